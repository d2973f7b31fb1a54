from io import BytesIO

import pytest
from PIL import Image
from werkzeug.datastructures import FileStorage

from charmz_store.common.errors import ValidationError
from charmz_store.services.photo_service import PhotoService


def test_saves_jpeg_and_returns_reference(tmp_path, png_bytes):
    service = PhotoService(tmp_path / "uploads")
    upload = FileStorage(stream=png_bytes(), filename="Red Dress.png")

    path, reference = service.save_image(upload, prefix="product")

    assert reference.startswith("/uploads/product_red_dress_")
    assert reference.endswith(".jpg")
    with Image.open(path) as saved:
        assert saved.format == "JPEG"


def test_save_product_images_keeps_upload_order(tmp_path, png_bytes):
    service = PhotoService(tmp_path / "uploads")
    uploads = [
        FileStorage(stream=png_bytes(), filename="front.png"),
        FileStorage(stream=png_bytes((0, 0, 255)), filename="back.png"),
    ]

    saved = service.save_product_images(uploads)

    assert list(saved) == ["front.png", "back.png"]
    assert all(ref.startswith("/uploads/product_") for ref in saved.values())


def test_rejects_empty_and_invalid_uploads(tmp_path):
    service = PhotoService(tmp_path / "uploads")

    with pytest.raises(ValidationError):
        service.save_image(FileStorage(stream=BytesIO(b""), filename="a.png"), prefix="product")
    with pytest.raises(ValidationError):
        service.save_image(FileStorage(stream=BytesIO(b"not an image"), filename="a.png"), prefix="product")
    with pytest.raises(ValidationError):
        service.save_image(FileStorage(stream=BytesIO(b"x"), filename=""), prefix="product")


def test_resolve_variant_images(tmp_path):
    service = PhotoService(tmp_path / "uploads")
    saved = {"red.png": "/uploads/product_red_1.jpg"}

    resolved = service.resolve_variant_images(
        ["red.png", "product_red_1.jpg", "https://cdn/blue.jpg"], saved
    )

    assert resolved == ["/uploads/product_red_1.jpg", "/uploads/product_red_1.jpg", "https://cdn/blue.jpg"]


def test_discard_removes_only_own_uploads(tmp_path, png_bytes):
    upload_dir = tmp_path / "uploads"
    service = PhotoService(upload_dir)
    _, reference = service.save_image(FileStorage(stream=png_bytes(), filename="a.png"), prefix="product")

    service.discard([reference, "https://cdn/remote.jpg", "/uploads/missing.jpg"])

    assert list(upload_dir.iterdir()) == []


def test_failed_batch_leaves_no_files(tmp_path, png_bytes):
    upload_dir = tmp_path / "uploads"
    service = PhotoService(upload_dir)
    uploads = [
        FileStorage(stream=png_bytes(), filename="good.png"),
        FileStorage(stream=BytesIO(b"not an image"), filename="bad.png"),
    ]

    with pytest.raises(ValidationError):
        service.save_product_images(uploads)
    assert list(upload_dir.iterdir()) == []
