"""處理商品與分類圖片上傳的服務模組。"""

from __future__ import annotations

from io import BytesIO
from pathlib import Path
from typing import Dict, Iterable, List, Tuple
from uuid import uuid4

from PIL import Image, UnidentifiedImageError
from werkzeug.datastructures import FileStorage
from werkzeug.utils import secure_filename

from ..common.errors import ValidationError


UPLOAD_URL_PREFIX = "/uploads"


class PhotoService:
    """將上傳圖片轉為 JPEG 寫入 uploads 目錄，回傳可供前端使用的參照路徑。"""

    def __init__(self, upload_dir: Path) -> None:
        self._upload_dir = upload_dir
        self._upload_dir.mkdir(parents=True, exist_ok=True)

    def save_product_images(self, uploads: Iterable[FileStorage]) -> Dict[str, str]:
        """儲存多張商品圖片，回傳 {原始檔名: 參照路徑}，依上傳順序排列。"""

        saved: Dict[str, str] = {}
        try:
            for uploaded in uploads:
                _, reference = self.save_image(uploaded, prefix="product")
                saved[uploaded.filename] = reference
        except ValidationError:
            self.discard(saved.values())
            raise
        return saved

    def save_category_image(self, uploaded: FileStorage) -> str:
        _, reference = self.save_image(uploaded, prefix="category")
        return reference

    def save_image(self, uploaded: FileStorage, prefix: str) -> Tuple[str, str]:
        """儲存單張圖片，回傳 (檔案路徑, 參照路徑)。"""

        self._validate_upload(uploaded)
        filename = self._safe_filename(uploaded.filename, prefix=prefix)
        target_path = self._upload_dir / filename

        binary = uploaded.read()
        if not binary:
            raise ValidationError("圖片內容為空，請重新選擇檔案。")
        try:
            with Image.open(BytesIO(binary)) as image:
                rgb = image.convert("RGB")
                rgb.save(target_path, format="JPEG", quality=92)
        except (UnidentifiedImageError, OSError) as exc:
            raise ValidationError("無法辨識的圖片格式。") from exc

        return str(target_path), f"{UPLOAD_URL_PREFIX}/{filename}"

    def discard(self, references: Iterable[str]) -> None:
        """刪除本服務先前寫入的圖片；後續儲存失敗時用來清除孤立檔案。"""

        for reference in references:
            if not reference.startswith(f"{UPLOAD_URL_PREFIX}/"):
                continue
            (self._upload_dir / reference.rsplit("/", 1)[-1]).unlink(missing_ok=True)

    def resolve_variant_images(self, images: List[str], saved: Dict[str, str]) -> List[str]:
        """將顏色款式中引用的上傳檔名換成參照路徑，其餘視為網址原樣保留。"""

        by_reference_name = {ref.rsplit("/", 1)[-1]: ref for ref in saved.values()}
        resolved = []
        for name in images:
            resolved.append(saved.get(name) or by_reference_name.get(name) or name)
        return resolved

    def _validate_upload(self, uploaded: FileStorage) -> None:
        if uploaded is None or uploaded.filename is None or not uploaded.filename.strip():
            raise ValidationError("請選擇要上傳的圖片檔案。")

    def _safe_filename(self, original: str, prefix: str) -> str:
        stem = secure_filename(Path(original).stem).lower()[:16] or "image"
        unique = uuid4().hex[:8]
        return f"{prefix}_{stem}_{unique}.jpg"
