"""管理商品分類資料的儲存模組。"""

from __future__ import annotations

import logging
from dataclasses import asdict, dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional
from uuid import uuid4

from ..common.errors import NotFoundError, ValidationError
from .json_store import JsonCollection


logger = logging.getLogger(__name__)


@dataclass
class Category:
    """代表單一分類的資料結構。"""

    id: str
    name: str
    image: str
    description: str = ""
    created_at: str = ""

    def to_dict(self) -> Dict[str, str]:
        return asdict(self)

    @classmethod
    def from_dict(cls, raw: Dict[str, Any]) -> "Category":
        return cls(
            id=str(raw.get("id") or ""),
            name=str(raw.get("name") or ""),
            image=str(raw.get("image") or ""),
            description=str(raw.get("description") or ""),
            created_at=str(raw.get("created_at") or ""),
        )


class CategoryRepository:
    """提供檔案型儲存的分類資料存取介面。

    分類名稱不做唯一性檢查，商品以文字欄位 category 參照分類。
    """

    def __init__(self, data_file: Path) -> None:
        self._collection = JsonCollection(data_file, "categories")

    @property
    def collection(self) -> JsonCollection:
        return self._collection

    def list_categories(self) -> List[Category]:
        categories = []
        for item in self._collection.read():
            if not item.get("id"):
                logger.warning("skipping stored category without id: %r", item.get("name"))
                continue
            categories.append(Category.from_dict(item))
        return categories

    def get_category(self, category_id: str) -> Optional[Category]:
        for item in self.list_categories():
            if item.id == category_id:
                return item
        return None

    def create_category(
        self,
        *,
        name: str,
        image: str,
        description: Optional[str] = None,
    ) -> Category:
        """新增分類。"""

        name = (name or "").strip()
        image = (image or "").strip()
        if not name:
            raise ValidationError("Category name is required")
        if not image:
            raise ValidationError("Category image is required")

        category = Category(
            id=str(uuid4()),
            name=name,
            image=image,
            description=description or "",
            created_at=datetime.now(timezone.utc).isoformat(),
        )
        with self._collection.transaction() as records:
            records.append(category.to_dict())
        return category

    def update_category(
        self,
        category_id: str,
        *,
        name: Optional[str] = None,
        description: Optional[str] = None,
        image: Optional[str] = None,
    ) -> Category:
        """更新分類資料，回傳更新後結果。"""

        with self._collection.transaction() as records:
            for index, entry in enumerate(records):
                if entry.get("id") != category_id:
                    continue
                if name:
                    entry["name"] = name
                if description is not None:
                    entry["description"] = description
                if image:
                    entry["image"] = image
                updated = Category.from_dict(entry)
                records[index] = updated.to_dict()
                return updated
        raise NotFoundError(f"Category {category_id} not found")

    def delete_category(self, category_id: str) -> bool:
        with self._collection.transaction() as records:
            remaining = [item for item in records if item.get("id") != category_id]
            if len(remaining) == len(records):
                return False
            records[:] = remaining
        return True
