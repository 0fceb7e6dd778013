from .product_serializers import ProductSearchQuerySerializer, ProductSerializer

__all__ = ["ProductSerializer", "ProductSearchQuerySerializer"]
