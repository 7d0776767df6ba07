"""
Error records for failed fetches.

**Conceptual**: A fetch can fail in many ways: the server answers 404, the
connection is refused, the request times out, the caller aborts it, or the
body is not JSON. Callers should not have to tell these apart to report
them, so every failure is described by one FetchErrorRecord and raised as a
FetchError carrying it.

**The 429 convention**: When there is no response at all (network failure,
timeout, abort) the record uses status 429 with status text
"TypeError: Failed to fetch" and the class "No Response". The 429 is a
sentinel meaning "failed to fetch", not an actual rate-limit answer.
"""

import json
from dataclasses import asdict, dataclass, replace
from datetime import datetime
from typing import Any, Dict, Iterable, Optional, Tuple

from utilkit.utils.time import Clock, resolve_clock

NO_RESPONSE_STATUS = 429
NO_RESPONSE_STATUS_TEXT = "TypeError: Failed to fetch"
NO_RESPONSE_CLASS = "No Response"
NO_RESPONSE_MESSAGE = "There was an error: Failed to fetch."

_STATUS_CLASSES = {
    1: "1xx Informational",
    2: "2xx Successful",
    3: "3xx Redirection",
    4: "4xx Client error",
    5: "5xx Server error",
}

_STATUS_MESSAGES = {
    502: "There was an error: Network response 502.",
    429: "There was an error: 429 Too Many Requests.",
    404: "There was an error: 404 Source Not Found.",
}
DEFAULT_MESSAGE = "There was an error: Network response was not OK."


class UtilkitNetError(Exception):
    """Base exception for utilkit.net errors."""
    pass


@dataclass(frozen=True)
class FetchErrorRecord:
    """
    Structured description of a failed fetch.

    Attributes:
        source: Label of the calling code (for error tracking).
        call: The URL that was requested.
        context: Auxiliary values the caller attached to the call.
        time: When the failure was observed (timezone-aware).
        message: Human-readable description.
        status_class: Status bucket, e.g. "4xx Client error" or "No Response".
        status: HTTP status code, or 429 when there was no response.
        ok: Whether the response status was in the 2xx range.
        status_text: Reason phrase of the response, or
            "TypeError: Failed to fetch" when there was no response.
    """
    source: str
    call: str
    context: Tuple[Any, ...]
    time: datetime
    message: str
    status_class: str
    status: int
    ok: bool
    status_text: str = ""

    def to_dict(self) -> Dict[str, Any]:
        """Return a JSON-serializable dict (time as ISO-8601, context as a list)."""
        data = asdict(self)
        data["context"] = list(self.context)
        data["time"] = self.time.isoformat()
        return data

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), default=str)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "FetchErrorRecord":
        """
        Rebuild a record from to_dict() output.

        Raises:
            KeyError: If a required field is missing.
            ValueError: If the time is not ISO-8601.
        """
        time_value = data["time"]
        if isinstance(time_value, str):
            time_value = datetime.fromisoformat(time_value)
        return cls(
            source=data["source"],
            call=data["call"],
            context=tuple(data.get("context") or ()),
            time=time_value,
            message=data["message"],
            status_class=data["status_class"],
            status=int(data["status"]),
            ok=bool(data["ok"]),
            status_text=data.get("status_text", ""),
        )


class FetchError(UtilkitNetError):
    """
    Raised for every failed fetch; the details live in `record`.

    str(error) is the record's message, so a bare `except FetchError as e:
    print(e)` is already readable.
    """

    def __init__(self, record: FetchErrorRecord):
        super().__init__(record.message)
        self.record = record

    @property
    def status(self) -> int:
        return self.record.status


def status_class(status: Optional[int]) -> str:
    """Bucket an HTTP status into its class name; None means there was no response."""
    if status is None or not 100 <= status < 600:
        return NO_RESPONSE_CLASS
    return _STATUS_CLASSES[status // 100]


def error_message(status: Optional[int]) -> str:
    """Human-readable message for a failed status (502, 429 and 404 get their own)."""
    if status is None:
        return NO_RESPONSE_MESSAGE
    return _STATUS_MESSAGES.get(status, DEFAULT_MESSAGE)


def is_ok_status(status: int) -> bool:
    return 200 <= status < 300


def construct_fetch_error(
    source: str,
    call: str,
    context: Optional[Iterable[Any]],
    response: Any,
    clock: Optional[Clock] = None,
    message: Optional[str] = None,
) -> FetchErrorRecord:
    """
    Build the error record for a failed call.

    **Conceptual**: `response` is whatever came back from the transport: a
    requests.Response (anything with `status_code`), or None when the request
    never produced a response. The no-response case gets the 429 sentinel.

    Args:
        source: Label of the calling code.
        call: Requested URL.
        context: Auxiliary values to keep with the record.
        response: Response-like object, or None.
        clock: Time source for the record's timestamp (defaults to UTC now).
        message: Overrides the status-derived message (e.g. for a body that
            is not JSON).

    Returns:
        The populated FetchErrorRecord.
    """
    stamp = resolve_clock(clock).now()
    context_values = tuple(context) if context is not None else ()

    if response is None:
        record = FetchErrorRecord(
            source=source or "",
            call=call or "",
            context=context_values,
            time=stamp,
            message=NO_RESPONSE_MESSAGE,
            status_class=NO_RESPONSE_CLASS,
            status=NO_RESPONSE_STATUS,
            ok=False,
            status_text=NO_RESPONSE_STATUS_TEXT,
        )
    else:
        status = int(response.status_code)
        reason = getattr(response, "reason", "")
        record = FetchErrorRecord(
            source=source or "",
            call=call or "",
            context=context_values,
            time=stamp,
            message=error_message(status),
            status_class=status_class(status),
            status=status,
            ok=is_ok_status(status),
            status_text=reason if isinstance(reason, str) else "",
        )

    if message is not None:
        record = replace(record, message=message)
    return record


def parse_error(error: Any) -> Any:
    """
    Recover a FetchErrorRecord from the forms an error may arrive in.

    Accepts a FetchError, a FetchErrorRecord, a dict from to_dict(), a JSON
    string of one, or such a string prefixed with "Error: ". Anything that
    does not decode to a record is returned unchanged.

    Only a leading "Error: " (any case) is stripped; text with "error: "
    further in is not searched for a record. to_json() output starts with
    "{", so records this package serializes parse whatever their messages
    say.
    """
    if isinstance(error, FetchError):
        return error.record
    if isinstance(error, FetchErrorRecord):
        return error

    if isinstance(error, str):
        text = error.strip()
        if text.lower().startswith("error: "):
            text = text[len("Error: "):]
        try:
            data = json.loads(text)
        except ValueError:
            return error
        if not isinstance(data, dict):
            return error
        error_data = data
    elif isinstance(error, dict):
        error_data = error
    else:
        return error

    try:
        return FetchErrorRecord.from_dict(error_data)
    except (KeyError, TypeError, ValueError):
        return error
