from io import BytesIO

import pytest
from PIL import Image

from charmz_store.app import create_app
from charmz_store.config import StoreConfig
from charmz_store.services import CategoryRepository, ProductRepository


ADMIN_TOKEN = "test-admin-token"


@pytest.fixture
def config(tmp_path):
    return StoreConfig(
        secret_key="test",
        admin_email="admin@example.com",
        admin_password="secret123",
        admin_token=ADMIN_TOKEN,
        data_root=tmp_path,
    )


@pytest.fixture
def product_repo(tmp_path):
    return ProductRepository(tmp_path / "products.json")


@pytest.fixture
def category_repo(tmp_path):
    return CategoryRepository(tmp_path / "categories.json")


@pytest.fixture
def app(config):
    app = create_app(config)
    app.config["TESTING"] = True
    return app


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def admin_headers():
    return {"Authorization": f"Bearer {ADMIN_TOKEN}"}


@pytest.fixture
def png_bytes():
    def _make(color=(200, 40, 40)) -> BytesIO:
        buf = BytesIO()
        Image.new("RGB", (8, 8), color).save(buf, format="PNG")
        buf.seek(0)
        return buf

    return _make
