"""管理商品資料的檔案型儲存模組。"""

from __future__ import annotations

import json
import logging
from dataclasses import asdict, dataclass, field, fields
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional
from uuid import uuid4

from ..common.errors import NotFoundError, ValidationError
from ..common.utils.validators import parse_bool
from .json_store import JsonCollection


logger = logging.getLogger(__name__)


@dataclass
class Product:
    """代表單一商品的資料結構。"""

    id: str
    name: str
    category: str
    price: str
    image: str
    description: str = ""
    original_price: Optional[str] = None
    discount: int = 0
    stock: int = 0
    images: List[str] = field(default_factory=list)
    color: Optional[str] = None
    colors: List[str] = field(default_factory=list)
    color_variants: Optional[str] = None
    sizes: List[str] = field(default_factory=list)
    featured: bool = False
    is_new: bool = False
    created_at: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    def variant_map(self) -> Dict[str, List[str]]:
        """將 color_variants 解析為 {顏色: [圖片]}。"""

        return {entry["color"]: entry["images"] for entry in parse_color_variants(self.color_variants)}

    @classmethod
    def from_dict(cls, raw: Dict[str, Any]) -> "Product":
        known = {f.name for f in fields(cls)}
        data = {k: v for k, v in raw.items() if k in known}
        data["id"] = str(data.get("id") or "")
        data["name"] = str(data.get("name") or "")
        data["category"] = str(data.get("category") or "")
        data["price"] = str(data.get("price") or "0")
        images = _image_list(data.get("images"))
        data["images"] = images
        data["image"] = _image_ref(data.get("image")) or (images[0] if images else "")
        data["discount"] = _stored_int(data.get("discount"), "discount", data["id"])
        data["stock"] = _stored_int(data.get("stock"), "stock", data["id"])
        data["colors"] = _str_list(data.get("colors"))
        data["sizes"] = _str_list(data.get("sizes"))
        data["color_variants"] = _stored_variants(data.get("color_variants"), data["id"])
        data["featured"] = bool(parse_bool(data.get("featured")))
        data["is_new"] = bool(parse_bool(data.get("is_new")))
        return cls(**data)


def _stored_int(value: Any, field_name: str, product_id: str) -> int:
    """解析已儲存的整數欄位；格式錯誤時以 0 代替並記錄警告。"""

    if value is None or value == "":
        return 0
    try:
        return int(value)
    except (TypeError, ValueError):
        logger.warning("product %s has invalid %s %r, using 0", product_id, field_name, value)
        return 0


def _str_list(value: Any) -> List[str]:
    if value is None:
        return []
    if isinstance(value, str):
        value = [value]
    if not isinstance(value, list):
        return []
    return [str(item) for item in value if item not in (None, "")]


def _stored_variants(value: Any, product_id: str) -> Optional[str]:
    if value is None or value == "" or isinstance(value, str):
        return value or None
    try:
        return serialize_color_variants(value)
    except ValidationError:
        logger.warning("product %s has unreadable color_variants, dropping them", product_id)
        return None


# 建立與更新時不可由外部覆寫的欄位
_IMMUTABLE_FIELDS = {"id", "created_at"}
# 由圖片正規化流程處理的欄位，不直接套用
_IMAGE_FIELDS = {"image", "images", "colors", "color_variants"}


def _image_ref(entry: Any) -> Optional[str]:
    if isinstance(entry, dict):
        entry = entry.get("url")
    if entry is None:
        return None
    ref = str(entry).strip()
    return ref or None


def parse_color_variants(value: Any) -> List[Dict[str, Any]]:
    """將顏色款式正規化為 ``[{"color": ..., "images": [...]}]``。

    接受已儲存的 JSON 字串、``{"color", "images"}`` 物件陣列，或
    ``{顏色: [圖片]}`` 對照表。圖片可為字串或 ``{"url": ...}`` 物件，
    缺少顏色的項目會被略過。
    """

    if value is None or value == "":
        return []
    if isinstance(value, str):
        try:
            value = json.loads(value)
        except json.JSONDecodeError as exc:
            raise ValidationError("color_variants is not valid JSON") from exc
    if isinstance(value, dict):
        value = [{"color": color, "images": images} for color, images in value.items()]
    if not isinstance(value, list):
        raise ValidationError("color_variants must be a list or mapping")

    variants: List[Dict[str, Any]] = []
    for entry in value:
        if not isinstance(entry, dict):
            continue
        color = str(entry.get("color") or "").strip()
        if not color:
            continue
        variants.append({"color": color, "images": _image_list(entry.get("images"))})
    return variants


def serialize_color_variants(value: Any) -> Optional[str]:
    variants = parse_color_variants(value)
    if not variants:
        return None
    return json.dumps(variants, ensure_ascii=False)


def _image_list(value: Any) -> List[str]:
    if value is None:
        return []
    if isinstance(value, (str, dict)):
        value = [value]
    if not isinstance(value, (list, tuple)):
        return []
    return [ref for ref in (_image_ref(img) for img in value) if ref]


def resolve_images(data: Dict[str, Any]) -> List[str]:
    """依序由 images、image、第一個顏色款式取得商品圖片陣列。"""

    images = _image_list(data.get("images"))
    if images:
        return images
    primary = _image_ref(data.get("image"))
    if primary:
        return [primary]
    for variant in parse_color_variants(data.get("color_variants")):
        if variant["images"]:
            return list(variant["images"])
    return []


class ProductRepository:
    """提供檔案型儲存的商品資料存取介面。"""

    def __init__(self, data_file: Path) -> None:
        self._collection = JsonCollection(data_file, "products")

    @property
    def collection(self) -> JsonCollection:
        return self._collection

    def list_products(self) -> List[Product]:
        """讀取全部商品，依新增順序排列；缺少 id 的紀錄無法被引用，略過並記錄警告。"""

        products = []
        for item in self._collection.read():
            if not item.get("id"):
                logger.warning("skipping stored product without id: %r", item.get("name"))
                continue
            products.append(Product.from_dict(item))
        return products

    def get_product(self, product_id: str) -> Optional[Product]:
        for item in self.list_products():
            if item.id == product_id:
                return item
        return None

    def get_products_by_category(self, category: str) -> List[Product]:
        wanted = (category or "").strip().lower()
        return [p for p in self.list_products() if p.category.lower() == wanted]

    def get_featured_products(self) -> List[Product]:
        return [p for p in self.list_products() if p.featured]

    def get_new_arrivals(self) -> List[Product]:
        return [p for p in self.list_products() if p.is_new]

    def get_sale_products(self) -> List[Product]:
        return [p for p in self.list_products() if p.discount > 0]

    def create_product(self, data: Dict[str, Any]) -> Product:
        """新增商品；無法決定主圖時拋出 ValidationError。"""

        images = resolve_images(data)
        if not images:
            raise ValidationError("At least one image is required")

        attrs = {k: v for k, v in data.items() if k not in _IMMUTABLE_FIELDS | _IMAGE_FIELDS}
        self._check_counts(attrs)
        product = Product.from_dict(
            {
                **attrs,
                "id": f"product_{uuid4().hex}",
                "images": images,
                "image": images[0],
                "colors": _str_list(data.get("colors")),
                "color_variants": serialize_color_variants(data.get("color_variants")),
                "created_at": datetime.now(timezone.utc).isoformat(),
            }
        )
        with self._collection.transaction() as records:
            records.append(product.to_dict())
        return product

    def update_product(self, product_id: str, patch: Dict[str, Any]) -> Product:
        """將 ``patch`` 合併至已儲存的商品。

        只有值不為 ``None`` 的欄位會覆寫。圖片欄位僅在提供非空的 ``images``
        （或單獨的 ``image``）時更新；``colors`` 與 ``color_variants`` 僅在有提供時更新。
        """

        supplied = {k: v for k, v in (patch or {}).items() if v is not None and k not in _IMMUTABLE_FIELDS}
        self._check_counts(supplied)

        with self._collection.transaction() as records:
            for index, entry in enumerate(records):
                if entry.get("id") != product_id:
                    continue
                current = Product.from_dict(entry).to_dict()
                current.update({k: v for k, v in supplied.items() if k not in _IMAGE_FIELDS})

                new_images = _image_list(supplied.get("images"))
                if not new_images and _image_ref(supplied.get("image")):
                    new_images = [_image_ref(supplied["image"])]
                if new_images:
                    current["images"] = new_images
                    current["image"] = new_images[0]
                if "colors" in supplied:
                    current["colors"] = _str_list(supplied["colors"])
                if "color_variants" in supplied:
                    variants = serialize_color_variants(supplied["color_variants"])
                    if variants is not None:
                        current["color_variants"] = variants

                updated = Product.from_dict(current)
                records[index] = updated.to_dict()
                return updated
        raise NotFoundError(f"Product {product_id} not found")

    def delete_product(self, product_id: str) -> bool:
        """刪除指定商品，回傳是否有資料被移除。"""

        with self._collection.transaction() as records:
            remaining = [item for item in records if item.get("id") != product_id]
            if len(remaining) == len(records):
                return False
            records[:] = remaining
        return True

    @staticmethod
    def _check_counts(data: Dict[str, Any]) -> None:
        for name in ("stock", "discount"):
            if data.get(name) is None:
                continue
            try:
                value = int(data[name])
            except (TypeError, ValueError) as exc:
                raise ValidationError(f"{name} must be an integer") from exc
            if value < 0:
                raise ValidationError(f"{name} must be >= 0")
