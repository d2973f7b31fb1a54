"""商店後端設定模組。"""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv


logger = logging.getLogger(__name__)


def validate_currency(value: Optional[str]) -> str:
    v = (value or "PKR").strip().upper()
    if len(v) != 3:
        raise ValueError("Invalid currency code: expected ISO4217 length 3")
    return v


@dataclass
class StoreConfig:
    """封裝商店後端的設定值。"""

    secret_key: str
    admin_email: str
    admin_password: str
    admin_token: str
    data_root: Path
    currency: str = "PKR"
    log_level: str = "INFO"
    max_uploads: int = 20

    @property
    def data_dir(self) -> Path:
        return self.data_root / "data"

    @property
    def upload_dir(self) -> Path:
        return self.data_root / "uploads"

    @property
    def products_file(self) -> Path:
        return self.data_dir / "products.json"

    @property
    def categories_file(self) -> Path:
        return self.data_dir / "categories.json"

    @property
    def admin_credentials_file(self) -> Path:
        return self.data_dir / "admin.json"

    @classmethod
    def load(cls, data_root: Optional[Path] = None) -> "StoreConfig":
        """從 .env 與環境變數建構設定，並確保必要目錄存在。"""

        package_root = Path(__file__).resolve().parent
        load_dotenv(package_root.parent / ".env")

        root = data_root or Path(os.environ.get("CHARMZ_DATA_ROOT") or package_root)
        config = cls(
            secret_key=os.environ.get("CHARMZ_SECRET_KEY", "dev_secret"),
            admin_email=os.environ.get("CHARMZ_ADMIN_EMAIL", "admin@littlecharmz.com"),
            admin_password=os.environ.get("CHARMZ_ADMIN_PASSWORD", "admin123"),
            admin_token=os.environ.get("CHARMZ_ADMIN_TOKEN", "admin-token-123"),
            data_root=Path(root),
            currency=validate_currency(os.environ.get("CHARMZ_CURRENCY")),
            log_level=os.environ.get("LOG_LEVEL", "INFO"),
            max_uploads=int(os.environ.get("CHARMZ_MAX_UPLOADS", "20")),
        )

        config.data_dir.mkdir(parents=True, exist_ok=True)
        config.upload_dir.mkdir(parents=True, exist_ok=True)

        # admin.json 中的帳密優先於環境變數
        if config.admin_credentials_file.exists():
            try:
                admin_data = json.loads(config.admin_credentials_file.read_text(encoding="utf-8"))
            except (OSError, json.JSONDecodeError) as exc:
                logger.warning("讀取 %s 失敗: %s", config.admin_credentials_file, exc)
            else:
                if isinstance(admin_data, dict):
                    config.admin_email = admin_data.get("email", config.admin_email)
                    config.admin_password = admin_data.get("password", config.admin_password)
                    logger.info("已從 %s 載入管理員帳密", config.admin_credentials_file)

        return config

    def save_admin_credentials(self, email: str, password: str) -> None:
        """寫入 admin.json 並更新目前設定。"""

        self.admin_credentials_file.parent.mkdir(parents=True, exist_ok=True)
        self.admin_credentials_file.write_text(
            json.dumps({"email": email, "password": password}, indent=2, ensure_ascii=False),
            encoding="utf-8",
        )
        self.admin_email = email
        self.admin_password = password
