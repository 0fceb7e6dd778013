from .identity_serializers import CallerIdentitySerializer


__all__ = [
    "CallerIdentitySerializer",
]
