"""Request payloads and typed response results."""

from luigis_box.models.content import (
    ContentItem,
    OperationKind,
    RemovalItem,
    UpdateByQuery,
    validate_batch,
)
from luigis_box.models.responses import (
    ItemError,
    JobStatus,
    OperationResult,
    UpdateByQueryResult,
)

__all__ = [
    "ContentItem",
    "ItemError",
    "JobStatus",
    "OperationKind",
    "OperationResult",
    "RemovalItem",
    "UpdateByQuery",
    "UpdateByQueryResult",
    "validate_batch",
]
