from .user import Seller


__all__ = [
    "Seller",
]
