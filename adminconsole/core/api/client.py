"""Low-level HTTP gateway for the remote administrative API.

Every outbound request made by the console goes through ``ApiGateway``.
The gateway handles credentials, serialization, timeouts and the in-flight
indicator, and raises a single normalized ``ApiError`` on failure.
"""
from __future__ import annotations
import json
import logging
import threading
from typing import Any, Optional, Dict

import requests
from urllib3.exceptions import ReadTimeoutError

from .exceptions import ApiError, RequestTimeoutError

logger = logging.getLogger(__name__)

REQUEST_TIMEOUT = 15
DEFAULT_API_BASE_URL = "http://localhost:5000/api"
AUTH_FAILED_DETAIL = "Authentication failed."
UNEXPECTED_RESPONSE_DETAIL = "Server returned an unexpected response."


class NoContent:
    """Explicit empty result returned for HTTP 204.

    Distinct from a JSON ``null`` (``None``) and from an empty object.
    """

    _instance: Optional["NoContent"] = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "NO_CONTENT"


NO_CONTENT = NoContent()


def _is_read_timeout(exc: requests.ConnectionError) -> bool:
    """True when ``requests`` wrapped a read timeout hit while downloading a body."""
    reason = exc.args[0] if exc.args else None
    return isinstance(reason, ReadTimeoutError) or isinstance(exc.__context__, ReadTimeoutError)


class InFlightIndicator:
    """Process-wide "request in flight" flag scoped to gateway calls.

    Backed by a counter so that overlapping calls keep the flag raised until
    the last one settles.
    """

    def __init__(self):
        self._pending = 0
        self._lock = threading.Lock()

    @property
    def active(self) -> bool:
        with self._lock:
            return self._pending > 0

    def __enter__(self) -> "InFlightIndicator":
        with self._lock:
            self._pending += 1
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        with self._lock:
            self._pending = max(0, self._pending - 1)


class ApiGateway:
    """HTTP client for the administrative API with uniform error handling.

    Features:
    - Cookie-carrying ``requests.Session`` so the remote side can assert identity
    - JSON serialization of non-string bodies
    - Per-call deadline covering headers and body (default 15 seconds)
    - Failures normalized to ``ApiError``; HTTP 204 mapped to ``NO_CONTENT``

    Usage:
        gateway = ApiGateway("http://localhost:5000/api")
        me = gateway.get("/auth/me")
        gateway.post("/users/unlock", {"domain": "contoso", "samAccountName": "jdoe"})
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        timeout: float = REQUEST_TIMEOUT,
        indicator: Optional[InFlightIndicator] = None,
        http: Optional[requests.Session] = None,
        verify_tls: bool = True,
        auth_cookie: Optional[tuple[str, str]] = None,
    ):
        """Initialize the gateway.

        Args:
            base_url: API base URL including the ``/api`` prefix
            timeout: Default timeout in seconds for every call
            indicator: Shared in-flight indicator (a private one is created if omitted)
            http: Pre-built ``requests.Session`` (a new one is created if omitted)
            verify_tls: Verify server certificates
            auth_cookie: Optional (name, value) cookie seeded into the jar
        """
        self.base_url = (base_url or DEFAULT_API_BASE_URL).rstrip("/")
        self.timeout = timeout
        self.indicator = indicator or InFlightIndicator()
        self.http = http or requests.Session()
        self.verify_tls = verify_tls
        if auth_cookie:
            name, value = auth_cookie
            self.http.cookies.set(name, value)

    @property
    def in_flight(self) -> bool:
        return self.indicator.active

    def call(
        self,
        endpoint: str,
        method: str = "GET",
        body: Any = None,
        params: Optional[Dict[str, str]] = None,
        timeout: Optional[float] = None,
    ) -> Any:
        """Execute one request against the API.

        Args:
            endpoint: Path relative to the base URL (e.g., "/users/list")
            method: HTTP method
            body: JSON-serializable payload, or a pre-encoded string
            params: Query parameters
            timeout: Override of the default timeout

        Returns:
            Decoded JSON value, or ``NO_CONTENT`` for HTTP 204

        Raises:
            ApiError: On transport failure or non-success status
            RequestTimeoutError: When the timeout is exceeded
        """
        url = f"{self.base_url}{endpoint}"
        data = None
        if body is not None:
            data = body if isinstance(body, str) else json.dumps(body)

        limit = timeout if timeout is not None else self.timeout

        with self.indicator:
            try:
                resp = self._exchange_within(limit, method, endpoint, url, params=params, data=data)
            except requests.Timeout:
                logger.warning(f"{method} {endpoint} timed out")
                raise RequestTimeoutError(endpoint)
            except requests.ConnectionError as exc:
                if _is_read_timeout(exc):
                    logger.warning(f"{method} {endpoint} stalled while reading the response")
                    raise RequestTimeoutError(endpoint)
                logger.warning(f"{method} {endpoint} failed: {exc}")
                raise ApiError("Network Error", detail=str(exc), endpoint=endpoint)
            except requests.RequestException as exc:
                logger.warning(f"{method} {endpoint} failed: {exc}")
                raise ApiError("Network Error", detail=str(exc), endpoint=endpoint)

            if resp.status_code >= 400:
                raise self._error_from_response(resp, endpoint)
            if resp.status_code == 204:
                return NO_CONTENT
            if not resp.text:
                return None
            try:
                return resp.json()
            except ValueError:
                raise ApiError(
                    f"Invalid response from {endpoint}",
                    detail=UNEXPECTED_RESPONSE_DETAIL,
                    status_code=resp.status_code,
                    endpoint=endpoint,
                )

    def _exchange_within(self, limit: float, method: str, endpoint: str, url: str, **kwargs) -> requests.Response:
        """Send the request and download its body, abandoning both after ``limit`` seconds.

        ``requests`` applies its timeout to each socket read, so a server that
        trickles bytes can hold a plain call open indefinitely. The exchange
        runs on a watchdog thread and the caller stops waiting at the deadline.
        """
        result_holder: Dict[str, Any] = {}
        error_holder: Dict[str, BaseException] = {}
        done = threading.Event()

        def _exchange() -> None:
            try:
                resp = self.http.request(
                    method,
                    url,
                    headers={"Content-Type": "application/json"},
                    timeout=limit,
                    verify=self.verify_tls,
                    stream=True,
                    **kwargs,
                )
                result_holder["resp"] = resp
                try:
                    resp.content
                finally:
                    resp.close()
            except Exception as exc:
                error_holder["exc"] = exc
            finally:
                done.set()

        worker = threading.Thread(target=_exchange, name=f"api:{method} {endpoint}", daemon=True)
        worker.start()

        if not done.wait(timeout=limit):
            # Closing the stream makes a body download still in progress fail fast
            pending = result_holder.get("resp")
            if pending is not None:
                pending.close()
            logger.warning(f"{method} {endpoint} exceeded {limit}s; abandoning request")
            raise RequestTimeoutError(endpoint)

        if "exc" in error_holder:
            raise error_holder["exc"]
        return result_holder["resp"]

    def get(self, endpoint: str, params: Optional[Dict[str, str]] = None, **kwargs) -> Any:
        return self.call(endpoint, "GET", params=params, **kwargs)

    def post(self, endpoint: str, body: Any = None, **kwargs) -> Any:
        return self.call(endpoint, "POST", body=body, **kwargs)

    def put(self, endpoint: str, body: Any = None, **kwargs) -> Any:
        return self.call(endpoint, "PUT", body=body, **kwargs)

    def _error_from_response(self, resp: requests.Response, endpoint: str) -> ApiError:
        """Centralized translation of a non-success response into ``ApiError``.

        The body is parsed as ``{message|title, detail, errors}`` when it is a
        JSON object; anything else yields a synthesized error carrying the raw
        body. A 401 always reports an authentication failure.
        """
        raw = resp.text or ""
        payload: Any = None
        try:
            payload = json.loads(raw)
        except ValueError:
            payload = None

        if isinstance(payload, dict):
            message = payload.get("message") or payload.get("title") or f"HTTP error! status: {resp.status_code}"
            detail = payload.get("detail")
            field_errors = payload.get("errors") if isinstance(payload.get("errors"), dict) else None
        else:
            message = f"HTTP error! status: {resp.status_code}"
            detail = raw or UNEXPECTED_RESPONSE_DETAIL
            field_errors = None

        if resp.status_code == 401:
            detail = AUTH_FAILED_DETAIL

        logger.info(f"{endpoint} returned {resp.status_code}: {message}")
        return ApiError(
            str(message),
            detail=str(detail) if detail is not None else None,
            field_errors=field_errors,
            status_code=resp.status_code,
            endpoint=endpoint,
        )
