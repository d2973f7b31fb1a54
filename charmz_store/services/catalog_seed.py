"""商品目錄初始資料。"""

from __future__ import annotations

from typing import Dict

from .category_repository import CategoryRepository
from .product_repository import ProductRepository


def _photo(photo_id: str) -> str:
    return f"https://images.unsplash.com/{photo_id}?w=400&h=400&fit=crop"


SEED_CATEGORIES = [
    {
        "name": "Ladies Collection",
        "description": "Elegant and stylish clothing for women",
        "image": _photo("photo-1483985988355-763728e1935b"),
    },
    {
        "name": "Kids Collection",
        "description": "Adorable and comfortable clothes for children",
        "image": _photo("photo-1471286174890-9c112ffca5b4"),
    },
    {
        "name": "Jewelry",
        "description": "Beautiful jewelry pieces for special occasions",
        "image": _photo("photo-1515562141207-7a88fb7ce338"),
    },
]

SEED_PRODUCTS = [
    {
        "name": "Elegant Formal Dress",
        "description": "Beautiful formal dress perfect for special occasions",
        "category": "Ladies Collection",
        "price": "4500",
        "original_price": "5500",
        "discount": 18,
        "stock": 10,
        "image": _photo("photo-1595777457583-95e059d581b8"),
        "color": "Navy Blue",
        "sizes": ["S", "M", "L", "XL"],
        "featured": True,
        "is_new": True,
    },
    {
        "name": "Casual Summer Top",
        "description": "Light and comfortable top for casual wear",
        "category": "Ladies Collection",
        "price": "2500",
        "stock": 15,
        "image": _photo("photo-1594633312681-425c7b97ccd1"),
        "color": "White",
        "sizes": ["S", "M", "L"],
    },
    {
        "name": "Designer Kurta Set",
        "description": "Traditional kurta with modern embroidery work",
        "category": "Ladies Collection",
        "price": "3200",
        "original_price": "4000",
        "discount": 20,
        "stock": 8,
        "image": _photo("photo-1583391733956-6c78339af9d6"),
        "color": "Pink",
        "sizes": ["M", "L", "XL"],
    },
    {
        "name": "Cute Baby Dress",
        "description": "Adorable dress for little girls",
        "category": "Kids Collection",
        "price": "1800",
        "stock": 12,
        "image": _photo("photo-1522771739844-6a9f6d5f14af"),
        "color": "Pink",
        "sizes": ["6M", "12M", "18M", "2T"],
        "featured": True,
        "is_new": True,
    },
    {
        "name": "Boys Casual Shirt",
        "description": "Comfortable casual shirt for boys",
        "category": "Kids Collection",
        "price": "1500",
        "original_price": "2000",
        "discount": 25,
        "stock": 20,
        "image": _photo("photo-1503919006281-e80acadaa664"),
        "color": "Blue",
        "sizes": ["2T", "3T", "4T", "5T"],
    },
    {
        "name": "Gold Plated Necklace",
        "description": "Beautiful gold plated necklace with intricate design",
        "category": "Jewelry",
        "price": "3500",
        "original_price": "4500",
        "discount": 22,
        "stock": 5,
        "image": _photo("photo-1599643478518-a784e5dc4c8f"),
        "color": "Gold",
        "sizes": ["One Size"],
        "featured": True,
    },
    {
        "name": "Pearl Earrings",
        "description": "Classic pearl earrings for elegant look",
        "category": "Jewelry",
        "price": "2200",
        "stock": 8,
        "image": _photo("photo-1506630448388-4e683c67ddb0"),
        "color": "White",
        "sizes": ["One Size"],
        "is_new": True,
    },
]


def seed_catalog(
    products: ProductRepository,
    categories: CategoryRepository,
    *,
    force: bool = False,
) -> Dict[str, int]:
    """寫入初始商品與分類；已有資料時略過，除非 force=True。"""

    seeded = {"categories": 0, "products": 0}

    if force:
        categories.collection.replace([])
    if not categories.list_categories():
        for entry in SEED_CATEGORIES:
            categories.create_category(**entry)
            seeded["categories"] += 1

    if force:
        products.collection.replace([])
    if not products.list_products():
        for entry in SEED_PRODUCTS:
            products.create_product(entry)
            seeded["products"] += 1

    return seeded
