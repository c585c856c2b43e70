"""Parsers for Airtable JSON responses."""

import json
from typing import Any, Optional

from pydantic import ValidationError

from lead_metrics.errors import MalformedResponseError
from lead_metrics.models.record import Record

from .constants import ERROR_KEY, OFFSET_KEY, RECORDS_KEY


def parse_json(text: str) -> Any:
    """Decode a success body; anything unparseable is a MalformedResponseError."""
    try:
        return json.loads(text)
    except (ValueError, TypeError) as e:
        raise MalformedResponseError(f"Response body is not valid JSON: {e}") from e


def parse_page(payload: Any) -> tuple[list[Record], Optional[str]]:
    """
    Split one list-records page into (records, offset).
    offset is None on the last page.
    """
    if not isinstance(payload, dict) or not isinstance(payload.get(RECORDS_KEY), list):
        raise MalformedResponseError("List response has no 'records' array")
    records = [parse_record(item) for item in payload[RECORDS_KEY]]
    offset = payload.get(OFFSET_KEY)
    if offset is not None and not isinstance(offset, str):
        raise MalformedResponseError(f"Unexpected offset token: {offset!r}")
    return records, offset or None


def parse_record(item: Any) -> Record:
    """Map one {id, fields} object to a Record."""
    if not isinstance(item, dict):
        raise MalformedResponseError(f"Record is not an object: {item!r}")
    data = dict(item)
    if data.get("fields") is None:
        data["fields"] = {}
    try:
        return Record.model_validate(data)
    except ValidationError as e:
        raise MalformedResponseError(f"Invalid record: {e}") from e


def parse_error(text: str) -> tuple[Optional[str], str]:
    """
    Extract (error_type, message) from an error body.
    Airtable sends {"error": {"type", "message"}} or {"error": "TYPE"};
    anything else falls back to the raw text.
    """
    try:
        payload = json.loads(text) if text else None
    except ValueError:
        payload = None

    if isinstance(payload, dict):
        error = payload.get(ERROR_KEY)
        if isinstance(error, dict):
            error_type = error.get("type")
            message = error.get("message")
            if error_type and message:
                return error_type, f"{error_type} - {message}"
            if error_type or message:
                return error_type, str(error_type or message)
        if isinstance(error, str) and error:
            return error, error
    return None, (text or "").strip() or "no response body"
