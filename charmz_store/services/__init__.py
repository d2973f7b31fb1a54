"""商店後端服務模組入口。"""

from .catalog_seed import seed_catalog
from .category_repository import Category, CategoryRepository
from .json_store import JsonCollection
from .photo_service import PhotoService
from .product_repository import Product, ProductRepository

__all__ = [
    "Category",
    "CategoryRepository",
    "JsonCollection",
    "PhotoService",
    "Product",
    "ProductRepository",
    "seed_catalog",
]
