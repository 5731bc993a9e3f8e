"""
Tests for content payload models and batch validation.
"""

from __future__ import annotations

import pytest

from luigis_box.core.exceptions import InvalidPayloadError, TooManyItemsError
from luigis_box.models.content import (
    ContentItem,
    OperationKind,
    RemovalItem,
    UpdateByQuery,
    validate_batch,
)


class TestOperationKind:
    """Per-operation item limits."""

    def test_limits(self) -> None:
        assert OperationKind.CONTENT_UPDATE.limit == 100
        assert OperationKind.PARTIAL_CONTENT_UPDATE.limit == 50
        assert OperationKind.CONTENT_REMOVAL.limit is None


class TestContentItem:
    """Tests for ContentItem."""

    def test_empty_url_rejected(self) -> None:
        with pytest.raises(InvalidPayloadError):
            ContentItem("", "products", {"title": "x"})

    def test_invalid_payload_error_is_value_error(self) -> None:
        with pytest.raises(ValueError):
            ContentItem("", "products")

    def test_to_dict_with_nested(self) -> None:
        item = ContentItem(
            "/p/1",
            "products",
            {"title": "Shoe"},
            nested=[ContentItem("/c/1", "categories", {"title": "Shoes"})],
        )

        assert item.to_dict() == {
            "url": "/p/1",
            "type": "products",
            "fields": {"title": "Shoe"},
            "nested": [{"url": "/c/1", "type": "categories", "fields": {"title": "Shoes"}}],
        }
        assert isinstance(item.nested, tuple)

    def test_is_frozen(self) -> None:
        item = ContentItem("/p/1", "products")

        with pytest.raises(AttributeError):
            item.url = "/p/2"  # type: ignore[misc]


class TestRemovalItem:
    def test_type_is_optional(self) -> None:
        assert RemovalItem("/p/1").to_dict() == {"url": "/p/1"}
        assert RemovalItem("/p/1", "products").to_dict() == {"url": "/p/1", "type": "products"}

    def test_empty_url_rejected(self) -> None:
        with pytest.raises(InvalidPayloadError):
            RemovalItem("")


class TestUpdateByQuery:
    """Tests for UpdateByQuery."""

    def test_requires_types(self) -> None:
        with pytest.raises(InvalidPayloadError):
            UpdateByQuery(types=(), search_fields={}, update_fields={"a": 1})

    def test_requires_update_fields(self) -> None:
        with pytest.raises(InvalidPayloadError):
            UpdateByQuery(types=["products"], search_fields={}, update_fields={})

    def test_types_frozen_to_tuple(self) -> None:
        query = UpdateByQuery(types=["products"], search_fields={}, update_fields={"a": 1})

        assert query.types == ("products",)


class TestValidateBatch:
    """Tests for validate_batch()."""

    def test_returns_tuple_in_order(self) -> None:
        items = [RemovalItem("/a"), RemovalItem("/b")]

        batch = validate_batch(OperationKind.CONTENT_REMOVAL, items, RemovalItem)

        assert batch == tuple(items)

    def test_later_mutation_of_input_does_not_affect_batch(self) -> None:
        items = [RemovalItem("/a")]
        batch = validate_batch(OperationKind.CONTENT_REMOVAL, items, RemovalItem)

        items.append(RemovalItem("/b"))

        assert len(batch) == 1

    def test_over_limit_raises_with_counts(self) -> None:
        items = [ContentItem(f"/p/{i}", "products") for i in range(51)]

        with pytest.raises(TooManyItemsError) as exc_info:
            validate_batch(OperationKind.PARTIAL_CONTENT_UPDATE, items, ContentItem)

        assert exc_info.value.limit == 50
        assert exc_info.value.actual == 51
        assert str(exc_info.value) == "Expect less than or equal 50 items. Got 51."

    def test_wrong_item_type_raises(self) -> None:
        with pytest.raises(InvalidPayloadError, match="ContentItem"):
            validate_batch(OperationKind.CONTENT_UPDATE, [RemovalItem("/a")], ContentItem)
