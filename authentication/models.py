from authentication.domain.models.user import Seller


__all__ = [
    "Seller",
]
