"""
Luigi's Box API client and HTTP transport.
"""

from luigis_box.clients.gateway import LuigisBoxClient
from luigis_box.clients.transport import (
    FakeTransport,
    HttpxTransport,
    RawResponse,
    TransportProtocol,
)

__all__ = [
    "FakeTransport",
    "HttpxTransport",
    "LuigisBoxClient",
    "RawResponse",
    "TransportProtocol",
]
