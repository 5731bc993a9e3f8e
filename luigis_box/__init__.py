"""luigis-box-client: content synchronization with the Luigi's Box search API.

This package signs and sends requests for:
- Full and partial content updates
- Content removal
- Update-by-query jobs and their status
"""

__version__ = "0.1.0"

from luigis_box.clients import FakeTransport, HttpxTransport, LuigisBoxClient  # noqa: E402
from luigis_box.core.config import ConfigRegistry, EndpointConfig, Settings  # noqa: E402
from luigis_box.core.exceptions import (  # noqa: E402
    ConfigurationError,
    InvalidPayloadError,
    LuigisBoxError,
    ProtocolError,
    TooManyItemsError,
    TransportError,
)
from luigis_box.models import (  # noqa: E402
    ContentItem,
    ItemError,
    JobStatus,
    OperationResult,
    RemovalItem,
    UpdateByQuery,
    UpdateByQueryResult,
)

__all__ = [
    "ConfigRegistry",
    "ConfigurationError",
    "ContentItem",
    "EndpointConfig",
    "FakeTransport",
    "HttpxTransport",
    "InvalidPayloadError",
    "ItemError",
    "JobStatus",
    "LuigisBoxClient",
    "LuigisBoxError",
    "OperationResult",
    "ProtocolError",
    "RemovalItem",
    "Settings",
    "TooManyItemsError",
    "TransportError",
    "UpdateByQuery",
    "UpdateByQueryResult",
    "__version__",
]
