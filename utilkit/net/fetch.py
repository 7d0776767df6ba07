"""
Fetch wrappers that normalize every outcome.

**Conceptual**: handle_fetch() is a thin wrapper around a single HTTP GET. On
success it returns the decoded JSON body; on any failure it raises a
FetchError whose record describes what went wrong. Callers only ever catch
one exception type, whether the cause was a refused connection, a timeout,
an abort by the caller, a non-2xx status, or a body that is not JSON.

**Timeout and cancellation**: requests' own `timeout` bounds each socket
operation, not the whole call. handle_fetch() therefore checks both an
overall deadline (`timeout_ms`) and the caller's abort signal as soon as the
response headers arrive and again before each body chunk; whichever fires
first ends the call with the no-response record, even if the server answered
with an error status. A single blocking socket read cannot be interrupted, so
it is bounded by requests' own timeout (also `timeout_ms`) and the check runs
when it returns. Both are only consulted while the call is in flight, so
neither can affect a call that has already returned.

**Concurrency**: Every call builds and closes its own requests.Session
unless one is injected. Nothing is shared between calls, nothing is cached,
and nothing is retried; layer retries on top if you need them.
"""

import json
import logging
import time
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, Optional, Protocol

import requests

from utilkit.config.settings import FetchSettings, get_settings
from utilkit.net.errors import FetchError, construct_fetch_error, is_ok_status
from utilkit.utils.time import Clock

logger = logging.getLogger(__name__)

ALLOWED_METHODS = ("GET", "POST", "PUT", "DELETE")
CHUNK_SIZE = 8192
POLL_INTERVAL_S = 0.01
MALFORMED_BODY_MESSAGE = "There was an error: Response body was not valid JSON."


class AbortSignal(Protocol):
    """
    Cancellation token; threading.Event satisfies this protocol.

    Only is_set() is required. When the token also has a wait(timeout)
    method (as threading.Event does) the throttle delay blocks on it;
    otherwise is_set() is polled between short sleeps.
    """

    def is_set(self) -> bool:
        ...


@dataclass
class FetchOptions:
    """
    Per-call options for handle_fetch().

    Attributes:
        timeout_ms: Overall deadline for the request, in milliseconds.
        abort_signal: Optional caller-owned cancellation token. Setting it
            ends the call with a no-response FetchError.
        headers: Extra request headers.
    """
    timeout_ms: int = 8000
    abort_signal: Optional[AbortSignal] = None
    headers: Dict[str, str] = field(default_factory=dict)

    @classmethod
    def from_settings(cls, settings: FetchSettings, **overrides: Any) -> "FetchOptions":
        """Build options from FetchSettings; keyword overrides win."""
        values: Dict[str, Any] = {
            "timeout_ms": settings.timeout_ms,
            "headers": {"User-Agent": settings.user_agent},
        }
        values.update(overrides)
        return cls(**values)


def _aborted(signal: Optional[AbortSignal]) -> bool:
    return signal is not None and signal.is_set()


def _expired(deadline: float, signal: Optional[AbortSignal]) -> bool:
    return _aborted(signal) or time.monotonic() > deadline


def _throttle(delay_s: float, signal: Optional[AbortSignal]) -> bool:
    """Wait out the throttle delay; return True if the signal fired meanwhile."""
    if signal is None:
        if delay_s > 0:
            time.sleep(delay_s)
        return False

    wait = getattr(signal, "wait", None)
    if callable(wait):
        return bool(wait(delay_s))

    end = time.monotonic() + delay_s
    while not signal.is_set():
        remaining = end - time.monotonic()
        if remaining <= 0:
            return False
        time.sleep(min(remaining, POLL_INTERVAL_S))
    return True


def _read_body(response: Any, deadline: float, signal: Optional[AbortSignal]) -> Optional[bytes]:
    """Read the streamed body; None means the deadline passed or the call was aborted."""
    if _expired(deadline, signal):
        return None
    chunks = []
    for chunk in response.iter_content(chunk_size=CHUNK_SIZE):
        if _expired(deadline, signal):
            return None
        chunks.append(chunk)
    return b"".join(chunks)


def handle_fetch(
    url: str,
    source: str = "",
    context: Optional[Iterable[Any]] = None,
    options: Optional[FetchOptions] = None,
    delay_ms: Optional[int] = None,
    session: Optional[requests.Session] = None,
    clock: Optional[Clock] = None,
) -> Any:
    """
    GET a JSON endpoint with throttling, a deadline and cancellation.

    **Functionally**:
      1. Waits `delay_ms` to throttle bursts of calls. Aborting during the
         wait ends the call immediately.
      2. Sends a GET (redirects are not followed, so 3xx counts as a failure).
         If the abort signal or the deadline fired while waiting, the call
         ends with the no-response record whatever the status.
      3. Non-2xx status: raises FetchError with the status-derived record.
      4. Streams the body, giving up when `timeout_ms` has elapsed or the
         abort signal is set.
      5. Returns the decoded JSON body.

    **Error handling**: Every failure raises FetchError. Transport errors,
    timeouts and aborts give the no-response record (status 429, class
    "No Response", message mentioning "Failed to fetch"); the original
    requests exception is chained as __cause__.

    Args:
        url: Endpoint to call.
        source: Label of the calling code, copied into error records.
        context: Auxiliary values copied into error records.
        options: FetchOptions; defaults come from FetchSettings.
        delay_ms: Throttle delay; defaults to FetchSettings.delay_ms (100).
        session: Optional requests.Session to use (left open afterwards).
        clock: Time source for error record timestamps.

    Returns:
        Decoded JSON body (dict, list or scalar).

    Raises:
        FetchError: On any failure.

    Example:
        >>> try:
        ...     data = handle_fetch("https://api.example.com/items", source="ItemTable")
        ... except FetchError as e:
        ...     print(e.record.status, e.record.message)
    """
    settings = get_settings().fetch
    if options is None:
        options = FetchOptions.from_settings(settings)
    if delay_ms is None:
        delay_ms = settings.delay_ms
    context_values = tuple(context) if context is not None else ()
    signal = options.abort_signal

    def failure(response: Any = None, message: Optional[str] = None) -> FetchError:
        record = construct_fetch_error(source, url, context_values, response, clock=clock, message=message)
        logger.warning(
            "Fetch failed: %s (source=%s, status=%s, class=%s)",
            url, source or "-", record.status, record.status_class,
        )
        return FetchError(record)

    if _throttle(max(delay_ms, 0) / 1000, signal):
        logger.debug("Fetch aborted before sending: %s", url)
        raise failure()

    timeout_s = options.timeout_ms / 1000
    headers = {"Accept": "application/json"}
    headers.update(options.headers)

    owns_session = session is None
    if owns_session:
        session = requests.Session()

    logger.debug("GET %s (source=%s, timeout=%sms)", url, source or "-", options.timeout_ms)
    deadline = time.monotonic() + timeout_s
    try:
        try:
            response = session.get(
                url,
                headers=headers,
                timeout=timeout_s,
                allow_redirects=False,
                stream=True,
            )
        except requests.RequestException as e:
            raise failure() from e

        try:
            # An abort or deadline that fired while waiting for headers wins
            # over whatever status the server then sent.
            if _expired(deadline, signal):
                logger.debug("Fetch timed out or was aborted before the response: %s", url)
                raise failure()

            if not is_ok_status(response.status_code):
                raise failure(response)

            try:
                body = _read_body(response, deadline, signal)
            except requests.RequestException as e:
                raise failure() from e

            if body is None:
                logger.debug("Fetch timed out or was aborted while reading: %s", url)
                raise failure()

            try:
                return json.loads(body)
            except ValueError as e:
                raise failure(response, MALFORMED_BODY_MESSAGE) from e
        finally:
            response.close()
    finally:
        if owns_session:
            session.close()


def handle_basic_fetch(url: str, session: Optional[requests.Session] = None) -> Any:
    """
    Plain GET returning the decoded JSON body.

    No throttle, deadline or status check: a 404 with a JSON body returns that
    body. Transport failures and undecodable bodies raise FetchError.
    """
    settings = get_settings().fetch
    owns_session = session is None
    if owns_session:
        session = requests.Session()
    try:
        try:
            response = session.get(url, allow_redirects=False, timeout=settings.timeout_ms / 1000)
        except requests.RequestException as e:
            raise FetchError(construct_fetch_error("handle_basic_fetch", url, (), None)) from e
        try:
            return response.json()
        except ValueError as e:
            raise FetchError(
                construct_fetch_error("handle_basic_fetch", url, (), response, message=MALFORMED_BODY_MESSAGE)
            ) from e
    finally:
        if owns_session:
            session.close()


def fetch_data(
    url: str,
    parameters: Any = None,
    method: str = "GET",
    headers: Optional[Dict[str, str]] = None,
    session: Optional[requests.Session] = None,
) -> Any:
    """
    Send `parameters` as a JSON body and return the decoded JSON answer.

    Args:
        url: Endpoint to call.
        parameters: JSON-serializable request body (None sends no body).
        method: One of GET, POST, PUT, DELETE.
        headers: Request headers; defaults to {"Content-Type": "application/json"}.
        session: Optional requests.Session to use.

    Returns:
        Decoded JSON body of a 2xx response.

    Raises:
        ValueError: If method is not one of ALLOWED_METHODS.
        FetchError: On a transport failure, a non-2xx status or a body that
            is not JSON.
    """
    method = method.upper()
    if method not in ALLOWED_METHODS:
        raise ValueError(
            f"Invalid method given: {method}. Expected one of {', '.join(ALLOWED_METHODS)}"
        )

    if headers is None:
        headers = {"Content-Type": "application/json"}
    settings = get_settings().fetch

    owns_session = session is None
    if owns_session:
        session = requests.Session()
    try:
        try:
            response = session.request(
                method,
                url,
                json=parameters,
                headers=headers,
                timeout=settings.timeout_ms / 1000,
            )
        except requests.RequestException as e:
            raise FetchError(construct_fetch_error("fetch_data", url, (method,), None)) from e

        if not is_ok_status(response.status_code):
            record = construct_fetch_error("fetch_data", url, (method,), response)
            logger.warning("%s %s failed with status %s", method, url, record.status)
            raise FetchError(record)

        try:
            return response.json()
        except ValueError as e:
            raise FetchError(
                construct_fetch_error("fetch_data", url, (method,), response, message=MALFORMED_BODY_MESSAGE)
            ) from e
    finally:
        if owns_session:
            session.close()
