"""
Request signing for the Luigi's Box API.

Every request carries three headers:

    Content-Type: application/json; charset=utf-8
    Date: Thu, 29 Jun 2017 12:11:16 GMT
    Authorization: luigisbox-python <public_key>:<digest>

The digest is base64(HMAC-SHA256(private_key, canonical_string)) where the
canonical string joins, with "\\n":

    HTTP method, Content-Type, Date, path

The path never contains the query string: GET /v1/update_by_query?job_id=42
is signed as /v1/update_by_query.

The timestamp is always supplied by the caller so signing stays deterministic.
"""

from __future__ import annotations

import base64
import hashlib
import hmac
from dataclasses import dataclass
from datetime import datetime, timezone
from email.utils import format_datetime
from typing import Final

CONTENT_TYPE: Final[str] = "application/json; charset=utf-8"
CLIENT_NAME: Final[str] = "luigisbox-python"

HEADER_CONTENT_TYPE: Final[str] = "Content-Type"
HEADER_DATE: Final[str] = "Date"
HEADER_AUTHORIZATION: Final[str] = "Authorization"


@dataclass(frozen=True, slots=True)
class SignedHeaders:
    """Headers authenticating a single request.

    Attributes:
        content_type: Content-Type header value
        date: HTTP-date the signature was computed for
        authorization: Authorization header value
    """

    content_type: str
    date: str
    authorization: str

    def as_dict(self) -> dict[str, str]:
        """Return the headers keyed by their HTTP names."""
        return {
            HEADER_CONTENT_TYPE: self.content_type,
            HEADER_DATE: self.date,
            HEADER_AUTHORIZATION: self.authorization,
        }


def http_date(timestamp: datetime) -> str:
    """Format a timestamp as an RFC 1123 HTTP-date in GMT.

    Naive datetimes are interpreted as UTC.
    """
    if timestamp.tzinfo is None:
        timestamp = timestamp.replace(tzinfo=timezone.utc)
    return format_datetime(timestamp.astimezone(timezone.utc), usegmt=True)


def canonical_string(
    http_method: str,
    content_type: str,
    date: str,
    path: str,
) -> str:
    """Build the exact string the signature is computed over."""
    return "\n".join([http_method.upper(), content_type, date, path])


def digest(private_key: str, message: str) -> str:
    """Compute the base64-encoded HMAC-SHA256 of message."""
    mac = hmac.new(
        private_key.encode("utf-8"),
        message.encode("utf-8"),
        hashlib.sha256,
    )
    return base64.b64encode(mac.digest()).decode("ascii").strip()


def request_headers(
    public_key: str,
    private_key: str,
    http_method: str,
    path: str,
    timestamp: datetime,
) -> SignedHeaders:
    """Sign a request and return the headers to send with it.

    Args:
        public_key: Public key placed in the Authorization header
        private_key: Secret key the digest is keyed with
        http_method: HTTP verb (GET, POST, PATCH, DELETE)
        path: Endpoint path without host and without query string
        timestamp: Moment of signing, also sent as the Date header

    Returns:
        SignedHeaders for the request
    """
    date = http_date(timestamp)
    signature = digest(
        private_key,
        canonical_string(http_method, CONTENT_TYPE, date, path),
    )
    return SignedHeaders(
        content_type=CONTENT_TYPE,
        date=date,
        authorization=f"{CLIENT_NAME} {public_key}:{signature}",
    )
