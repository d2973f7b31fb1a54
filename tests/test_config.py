import json

import pytest

from charmz_store.config import StoreConfig, validate_currency


def test_load_from_environment(tmp_path, monkeypatch):
    monkeypatch.setenv("CHARMZ_DATA_ROOT", str(tmp_path))
    monkeypatch.setenv("CHARMZ_ADMIN_TOKEN", "tok")
    monkeypatch.setenv("CHARMZ_CURRENCY", "usd")

    config = StoreConfig.load()

    assert config.data_root == tmp_path
    assert config.admin_token == "tok"
    assert config.currency == "USD"
    assert config.products_file == tmp_path / "data" / "products.json"
    assert config.data_dir.is_dir()
    assert config.upload_dir.is_dir()


def test_admin_file_overrides_environment(tmp_path, monkeypatch):
    monkeypatch.setenv("CHARMZ_ADMIN_EMAIL", "env@example.com")
    data_dir = tmp_path / "data"
    data_dir.mkdir()
    (data_dir / "admin.json").write_text(
        json.dumps({"email": "file@example.com", "password": "filepass"}), encoding="utf-8"
    )

    config = StoreConfig.load(data_root=tmp_path)

    assert config.admin_email == "file@example.com"
    assert config.admin_password == "filepass"


def test_save_admin_credentials_creates_data_dir(config):
    assert not config.data_dir.exists()

    config.save_admin_credentials("new@example.com", "newpass")

    stored = json.loads(config.admin_credentials_file.read_text(encoding="utf-8"))
    assert stored == {"email": "new@example.com", "password": "newpass"}
    assert config.admin_email == "new@example.com"


def test_validate_currency():
    assert validate_currency(None) == "PKR"
    with pytest.raises(ValueError):
        validate_currency("RUPEE")
