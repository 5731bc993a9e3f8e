"""
Content payloads sent to the Luigi's Box content API.

ContentItem / RemovalItem map one indexed object each; UpdateByQuery
describes an asynchronous bulk update of every object matching a query.
Batches are validated against the per-operation item limit before any
request is built.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from luigis_box.core.exceptions import InvalidPayloadError, TooManyItemsError

# =============================================================================
# Operation limits
# =============================================================================


class OperationKind(Enum):
    """Batch operations and the maximum number of items each accepts.

    None means the API documents no cap.
    """

    CONTENT_UPDATE = ("content_update", 100)
    PARTIAL_CONTENT_UPDATE = ("partial_content_update", 50)
    CONTENT_REMOVAL = ("content_removal", None)

    def __init__(self, label: str, limit: int | None) -> None:
        self.label = label
        self.limit = limit


# =============================================================================
# Items
# =============================================================================


@dataclass(frozen=True, slots=True)
class ContentItem:
    """One object to index.

    Attributes:
        url: Unique identity of the object (non-empty)
        type: Category label, e.g. "products" or "categories"
        fields: Indexed attributes of the object
        nested: Objects indexed together with this one (variants, categories)
    """

    url: str
    type: str
    fields: Mapping[str, Any] = field(default_factory=dict)
    nested: tuple[ContentItem, ...] = ()

    def __post_init__(self) -> None:
        if not self.url:
            raise InvalidPayloadError("Content item url must not be empty.")
        object.__setattr__(self, "nested", tuple(self.nested))

    def to_dict(self) -> dict[str, Any]:
        """Serialize to the API object shape."""
        data: dict[str, Any] = {
            "url": self.url,
            "type": self.type,
            "fields": dict(self.fields),
        }
        if self.nested:
            data["nested"] = [item.to_dict() for item in self.nested]
        return data


@dataclass(frozen=True, slots=True)
class RemovalItem:
    """One object to remove from the index.

    Attributes:
        url: Identity of the object to remove (non-empty)
        type: Optional category label narrowing the removal
    """

    url: str
    type: str | None = None

    def __post_init__(self) -> None:
        if not self.url:
            raise InvalidPayloadError("Removal item url must not be empty.")

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"url": self.url}
        if self.type is not None:
            data["type"] = self.type
        return data


@dataclass(frozen=True, slots=True)
class UpdateByQuery:
    """Asynchronous update of every object matching a query.

    Attributes:
        types: Object types the query is limited to
        search_fields: Field values an object must partially match
        update_fields: Field values written to every matching object
    """

    types: tuple[str, ...]
    search_fields: Mapping[str, Any]
    update_fields: Mapping[str, Any]

    def __post_init__(self) -> None:
        object.__setattr__(self, "types", tuple(self.types))
        if not self.types:
            raise InvalidPayloadError("Update by query needs at least one type.")
        if not self.update_fields:
            raise InvalidPayloadError("Update by query needs fields to update.")

    def to_dict(self) -> dict[str, Any]:
        return {
            "search": {
                "types": list(self.types),
                "partial": {"fields": dict(self.search_fields)},
            },
            "update": {"fields": dict(self.update_fields)},
        }


# =============================================================================
# Batch validation
# =============================================================================


def validate_batch(
    kind: OperationKind,
    items: Sequence[Any],
    item_type: type,
) -> tuple[Any, ...]:
    """Check a batch against its operation limit and freeze it.

    Args:
        kind: Operation the batch is submitted to
        items: Items in submission order
        item_type: Class every item must be an instance of

    Returns:
        The items as an immutable tuple, order preserved

    Raises:
        TooManyItemsError: If the batch exceeds kind.limit
        InvalidPayloadError: If an item has the wrong type
    """
    batch = tuple(items)
    if kind.limit is not None and len(batch) > kind.limit:
        raise TooManyItemsError(limit=kind.limit, actual=len(batch))

    for item in batch:
        if not isinstance(item, item_type):
            msg = (
                f"{kind.label} accepts {item_type.__name__} items, "
                f"got {type(item).__name__}."
            )
            raise InvalidPayloadError(msg)

    return batch
