"""
Typed results parsed from Luigi's Box API responses.

Content operations answer with

    {"ok_count": 1, "errors_count": 1,
     "errors": {"<url>": {"type": ..., "reason": ..., "caused_by": ...}}}

Update-by-query submission answers with

    {"status_url": "/v1/update_by_query?job_id=12345"}

and the job status endpoint with

    {"status": "complete", "tracker_id": "...", "updates_count": 5,
     "failures_count": 1, "failures": {"<url>": {...}}}

Per-item failures are data (ItemError), never exceptions. A response that
misses a field needed to build the result raises ProtocolError. The decoded
JSON is always kept verbatim in raw_response.
"""

from __future__ import annotations

import json
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Final
from urllib.parse import parse_qs, urlsplit

from luigis_box.core.exceptions import ProtocolError

STATUS_COMPLETE: Final[str] = "complete"

# Response field names
FIELD_OK_COUNT = "ok_count"
FIELD_ERRORS_COUNT = "errors_count"
FIELD_ERRORS = "errors"
FIELD_STATUS = "status"
FIELD_TRACKER_ID = "tracker_id"
FIELD_UPDATES_COUNT = "updates_count"
FIELD_FAILURES_COUNT = "failures_count"
FIELD_FAILURES = "failures"
FIELD_STATUS_URL = "status_url"
QUERY_JOB_ID = "job_id"


# =============================================================================
# Data Classes
# =============================================================================


@dataclass(frozen=True, slots=True)
class ItemError:
    """Failure of a single item reported by the API.

    Attributes:
        url: Identity of the rejected item
        type: Error category, e.g. "malformed_input"
        reason: Human-readable explanation
        caused_by: Structured detail, e.g. {"title": ["must be filled"]}
    """

    url: str
    type: str
    reason: str
    caused_by: Any = None


@dataclass(frozen=True, slots=True)
class OperationResult:
    """Outcome of a content update, partial update or removal.

    A 2xx response may still carry rejected items; check is_success().
    """

    ok_count: int
    errors_count: int
    errors: tuple[ItemError, ...]
    raw_response: Any

    def is_success(self) -> bool:
        return self.errors_count == 0


@dataclass(frozen=True, slots=True)
class UpdateByQueryResult:
    """Accepted update-by-query job."""

    job_id: int
    raw_response: Any


@dataclass(frozen=True, slots=True)
class JobStatus:
    """State of an update-by-query job.

    Attributes:
        tracker_id: Identifier correlating the status with its job
        completed: True once the API reports status "complete"
        ok_count: Updated objects, None when not reported
        errors_count: Failed objects, None when not reported
        errors: Failures; None when the response carries no "failures" key,
            an empty tuple when it carries an empty one
        raw_response: Decoded response JSON
    """

    tracker_id: str
    completed: bool
    ok_count: int | None
    errors_count: int | None
    errors: tuple[ItemError, ...] | None
    raw_response: Any

    def is_success(self) -> bool:
        """True when the job completed without failures."""
        return self.completed and not self.errors_count and not self.errors


# =============================================================================
# Parsing
# =============================================================================


def decode_body(body: bytes) -> dict[str, Any]:
    """Decode a response body into a JSON object.

    Raises:
        ProtocolError: If the body is not a JSON object
    """
    try:
        data = json.loads(body)
    except (UnicodeDecodeError, json.JSONDecodeError) as e:
        msg = f"Response body is not valid JSON: {e}"
        raise ProtocolError(msg) from e

    if not isinstance(data, dict):
        msg = f"Expected a JSON object, got {type(data).__name__}."
        raise ProtocolError(msg)
    return data


def _require(data: Mapping[str, Any], name: str) -> Any:
    if name not in data or data[name] is None:
        msg = f'Response is missing required field "{name}".'
        raise ProtocolError(msg)
    return data[name]


def _require_int(data: Mapping[str, Any], name: str) -> int:
    value = _require(data, name)
    if isinstance(value, bool) or not isinstance(value, int):
        msg = f'Field "{name}" must be an integer, got {value!r}.'
        raise ProtocolError(msg)
    return value


def _require_str(data: Mapping[str, Any], name: str, owner: str) -> str:
    if not isinstance(data.get(name), str):
        msg = f'Error entry for "{owner}" needs a string "{name}", got {data.get(name)!r}.'
        raise ProtocolError(msg)
    return data[name]


def _optional_int(data: Mapping[str, Any], name: str) -> int | None:
    if data.get(name) is None:
        return None
    return _require_int(data, name)


def parse_item_errors(errors: Any, field_name: str = FIELD_ERRORS) -> tuple[ItemError, ...]:
    """Convert a url → error mapping into ItemErrors, keeping key order.

    Raises:
        ProtocolError: If the mapping or one of its entries is malformed,
            including an entry without a string "type" or "reason"
    """
    if not isinstance(errors, Mapping):
        # PHP-encoded empty objects arrive as []
        if errors == []:
            return ()
        msg = f'Field "{field_name}" must be an object, got {type(errors).__name__}.'
        raise ProtocolError(msg)

    parsed: list[ItemError] = []
    for url, detail in errors.items():
        if not isinstance(detail, Mapping):
            msg = f'Error entry for "{url}" must be an object.'
            raise ProtocolError(msg)
        parsed.append(
            ItemError(
                url=url,
                type=_require_str(detail, "type", url),
                reason=_require_str(detail, "reason", url),
                caused_by=detail.get("caused_by"),
            )
        )
    return tuple(parsed)


def parse_operation_result(data: Mapping[str, Any]) -> OperationResult:
    """Build an OperationResult from a content operation response.

    An absent "errors" key is read as no errors.
    """
    return OperationResult(
        ok_count=_require_int(data, FIELD_OK_COUNT),
        errors_count=_require_int(data, FIELD_ERRORS_COUNT),
        errors=parse_item_errors(data.get(FIELD_ERRORS) or {}),
        raw_response=data,
    )


def parse_update_by_query_result(data: Mapping[str, Any]) -> UpdateByQueryResult:
    """Extract the job id from the status_url of a submission response."""
    status_url = _require(data, FIELD_STATUS_URL)
    if not isinstance(status_url, str):
        msg = f'Field "{FIELD_STATUS_URL}" must be a string, got {status_url!r}.'
        raise ProtocolError(msg)

    values = parse_qs(urlsplit(status_url).query).get(QUERY_JOB_ID, [])
    if len(values) != 1 or not values[0].isdigit():
        msg = f'Cannot read job id from status url "{status_url}".'
        raise ProtocolError(msg)

    return UpdateByQueryResult(job_id=int(values[0]), raw_response=data)


def parse_job_status(data: Mapping[str, Any]) -> JobStatus:
    """Build a JobStatus from an update-by-query status response."""
    status = _require(data, FIELD_STATUS)
    tracker_id = _require(data, FIELD_TRACKER_ID)

    errors: tuple[ItemError, ...] | None = None
    if data.get(FIELD_FAILURES) is not None:
        errors = parse_item_errors(data[FIELD_FAILURES], FIELD_FAILURES)

    return JobStatus(
        tracker_id=str(tracker_id),
        completed=status == STATUS_COMPLETE,
        ok_count=_optional_int(data, FIELD_UPDATES_COUNT),
        errors_count=_optional_int(data, FIELD_FAILURES_COUNT),
        errors=errors,
        raw_response=data,
    )
