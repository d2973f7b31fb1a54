import json

import pytest

from charmz_store.common.errors import NotFoundError, ValidationError


def test_duplicate_names_are_accepted(category_repo):
    # Name uniqueness is not enforced; adding a constraint should change this test.
    first = category_repo.create_category(name="Jewelry", image="/uploads/j1.jpg")
    second = category_repo.create_category(name="Jewelry", image="/uploads/j2.jpg")

    assert first.id != second.id
    assert [c.name for c in category_repo.list_categories()] == ["Jewelry", "Jewelry"]


def test_create_requires_image(category_repo):
    with pytest.raises(ValidationError):
        category_repo.create_category(name="Kids", image="  ")


def test_create_requires_name(category_repo):
    with pytest.raises(ValidationError):
        category_repo.create_category(name="", image="/uploads/k.jpg")


def test_update_merges_supplied_fields(category_repo):
    created = category_repo.create_category(name="Kids", image="/uploads/k.jpg", description="old")

    updated = category_repo.update_category(created.id, description="new")

    assert updated.name == "Kids"
    assert updated.image == "/uploads/k.jpg"
    assert updated.description == "new"
    assert updated.created_at == created.created_at
    assert category_repo.get_category(created.id) == updated


def test_update_missing_category(category_repo):
    with pytest.raises(NotFoundError):
        category_repo.update_category("nope", name="x")


def test_delete(category_repo):
    created = category_repo.create_category(name="Kids", image="/uploads/k.jpg")

    assert category_repo.delete_category("nope") is False
    assert category_repo.delete_category(created.id) is True
    assert category_repo.list_categories() == []


def test_stored_category_without_id_is_skipped(category_repo):
    category_repo.collection.data_file.write_text(
        json.dumps([{"name": "Orphan", "image": "/x.jpg"}, {"id": "c1", "name": "Kids", "image": "/k.jpg"}]),
        encoding="utf-8",
    )

    categories = category_repo.list_categories()

    assert [c.id for c in categories] == ["c1"]
    assert category_repo.get_category("c1") == categories[0]
