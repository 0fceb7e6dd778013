from .identity_views import CurrentIdentityView


__all__ = [
    "CurrentIdentityView",
]
