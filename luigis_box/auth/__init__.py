"""HMAC request signing for the Luigi's Box API."""

from luigis_box.auth.signing import (
    CONTENT_TYPE,
    SignedHeaders,
    canonical_string,
    digest,
    http_date,
    request_headers,
)

__all__ = [
    "CONTENT_TYPE",
    "SignedHeaders",
    "canonical_string",
    "digest",
    "http_date",
    "request_headers",
]
