"""JSON 檔案型集合儲存，供商品與分類儲存庫共用。"""

from __future__ import annotations

import json
import logging
import os
import tempfile
import threading
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Dict, Iterator, List

from ..common.errors import PersistenceError


logger = logging.getLogger(__name__)


class JsonCollection:
    """以單一 JSON 檔案保存的物件陣列。

    每次異動都會讀入整個陣列、在記憶體中修改後整檔覆寫。
    ``transaction()`` 在整個讀寫週期持有集合鎖，避免並行寫入互相覆蓋。
    """

    def __init__(self, data_file: Path, label: str) -> None:
        self._data_file = data_file
        self._label = label
        self._lock = threading.RLock()

    @property
    def data_file(self) -> Path:
        return self._data_file

    def read(self) -> List[Dict[str, Any]]:
        """讀取全部資料；檔案不存在或損毀時回傳空陣列。"""

        with self._lock:
            try:
                return self._load()
            except PersistenceError as exc:
                logger.warning("%s collection unreadable, serving empty list: %s", self._label, exc)
                return []

    @contextmanager
    def transaction(self) -> Iterator[List[Dict[str, Any]]]:
        """取得資料供修改，區塊正常結束且內容有變動時寫回檔案。

        檔案損毀時拋出 ``PersistenceError``，不會覆寫原檔。
        """

        with self._lock:
            records = self._load()
            snapshot = json.dumps(records, sort_keys=True)
            yield records
            if json.dumps(records, sort_keys=True) != snapshot:
                self._write(records)

    def replace(self, records: List[Dict[str, Any]]) -> None:
        with self._lock:
            self._write(records)

    def _load(self) -> List[Dict[str, Any]]:
        if not self._data_file.exists():
            return []
        try:
            text = self._data_file.read_text(encoding="utf-8")
        except OSError as exc:
            raise PersistenceError(f"cannot read {self._data_file}: {exc}") from exc
        if not text.strip():
            return []
        try:
            payload = json.loads(text)
        except json.JSONDecodeError as exc:
            raise PersistenceError(f"{self._data_file.name} is not valid JSON") from exc
        if not isinstance(payload, list):
            raise PersistenceError(f"{self._data_file.name} must contain a JSON array")
        return [item for item in payload if isinstance(item, dict)]

    def _write(self, records: List[Dict[str, Any]]) -> None:
        content = json.dumps(records, ensure_ascii=False, indent=2) + "\n"
        try:
            self._data_file.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                dir=str(self._data_file.parent), prefix=f".{self._data_file.name}.", suffix=".tmp"
            )
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as handle:
                    handle.write(content)
                os.replace(tmp_name, self._data_file)
            except BaseException:
                if os.path.exists(tmp_name):
                    os.unlink(tmp_name)
                raise
        except OSError as exc:
            raise PersistenceError(f"cannot write {self._data_file}: {exc}") from exc
