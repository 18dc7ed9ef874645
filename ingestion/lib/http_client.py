"""Rate-limited HTTP client shared by the upstream API clients.

Every client instance owns its throttle state, its optional response
cache and its retry policy:

- a minimum delay between the start of consecutive requests
- HTTP 429 responses sleep for the server's ``Retry-After`` (or a default)
  and retry
- network errors and 5xx responses retry with exponential backoff
- after ``max_retries`` attempts the last error is raised to the caller

Clock and sleep are injectable so tests run without real waiting.

Example:
    client = RateLimitedClient("https://api.open.fec.gov/v1", min_interval=1.0)
    data = client.get_json("/candidates/search", {"q": "Cruz, Ted"})
"""

import logging
import time
from typing import Any, Callable, Dict, Mapping, Optional

import requests
from tenacity import RetryCallState, Retrying, retry_if_exception_type, stop_after_attempt

from ingestion.lib.response_cache import ResponseCache, make_cache_key

logger = logging.getLogger(__name__)

DEFAULT_MIN_INTERVAL_SECONDS = 1.0
DEFAULT_MAX_RETRIES = 3
DEFAULT_RETRY_AFTER_SECONDS = 60.0
DEFAULT_BACKOFF_BASE_SECONDS = 1.0
DEFAULT_TIMEOUT_SECONDS = 30


class UpstreamAPIError(Exception):
    """Base exception for third-party API errors."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class UpstreamRateLimitError(UpstreamAPIError):
    """Raised when the upstream API answers HTTP 429."""

    def __init__(self, message: str, retry_after: Optional[float] = None):
        super().__init__(message, status_code=429)
        self.retry_after = retry_after


class UpstreamNotFoundError(UpstreamAPIError):
    """Raised when resource not found (HTTP 404)."""


class UpstreamServerError(UpstreamAPIError):
    """Raised for HTTP 5xx responses."""


RETRYABLE_ERRORS = (
    requests.exceptions.RequestException,
    UpstreamRateLimitError,
    UpstreamServerError,
)


def parse_retry_after(value: Optional[str]) -> Optional[float]:
    """Parse a Retry-After header given in seconds. Dates are ignored."""
    if value is None:
        return None
    try:
        seconds = float(str(value).strip())
    except ValueError:
        return None
    return max(seconds, 0.0)


class RateLimitedClient:
    """JSON-over-HTTP client with throttling, retry and optional caching.

    Attributes:
        base_url: API base URL
        min_interval: Minimum seconds between request starts
        max_retries: Total attempts per request (including the first)
        default_retry_after: Sleep for 429 responses without Retry-After
        backoff_base: First backoff delay; doubles per attempt
        timeout: Per-request timeout in seconds
        cache: Optional ResponseCache (None disables caching)
    """

    provider_name = "Upstream"

    def __init__(
        self,
        base_url: str,
        api_key: Optional[str] = None,
        min_interval: float = DEFAULT_MIN_INTERVAL_SECONDS,
        max_retries: int = DEFAULT_MAX_RETRIES,
        default_retry_after: float = DEFAULT_RETRY_AFTER_SECONDS,
        backoff_base: float = DEFAULT_BACKOFF_BASE_SECONDS,
        timeout: int = DEFAULT_TIMEOUT_SECONDS,
        session: Optional[requests.Session] = None,
        cache: Optional[ResponseCache] = None,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], None] = time.sleep,
    ):
        if max_retries < 1:
            raise ValueError("max_retries must be at least 1")

        self.base_url = base_url.rstrip("/")
        self.api_key = api_key
        self.min_interval = min_interval
        self.max_retries = max_retries
        self.default_retry_after = default_retry_after
        self.backoff_base = backoff_base
        self.timeout = timeout
        self.session = session or requests.Session()
        self.cache = cache
        self._clock = clock
        self._sleep = sleep
        self._last_request_at: Optional[float] = None

    # ------------------------------------------------------------------
    # Hooks for provider subclasses
    # ------------------------------------------------------------------

    def _auth_params(self) -> Dict[str, Any]:
        return {}

    def _auth_headers(self) -> Dict[str, str]:
        return {}

    # ------------------------------------------------------------------
    # Throttling and retry
    # ------------------------------------------------------------------

    def _throttle(self) -> None:
        """Sleep until ``min_interval`` has passed since the last request start."""
        if self._last_request_at is not None:
            elapsed = self._clock() - self._last_request_at
            remaining = self.min_interval - elapsed
            if remaining > 0:
                logger.debug(f"Throttling {self.provider_name} request for {remaining:.2f}s")
                self._sleep(remaining)
        self._last_request_at = self._clock()

    def _wait_before_retry(self, retry_state: RetryCallState) -> float:
        exc = retry_state.outcome.exception() if retry_state.outcome else None
        if isinstance(exc, UpstreamRateLimitError):
            if exc.retry_after is not None:
                return exc.retry_after
            return self.default_retry_after
        return self.backoff_base * (2 ** (retry_state.attempt_number - 1))

    def _log_retry(self, retry_state: RetryCallState) -> None:
        exc = retry_state.outcome.exception() if retry_state.outcome else None
        delay = retry_state.next_action.sleep if retry_state.next_action else 0
        logger.warning(
            f"{self.provider_name} request failed (attempt {retry_state.attempt_number}/"
            f"{self.max_retries}): {exc}. Retrying in {delay:.1f}s"
        )

    def _send_once(self, endpoint: str, params: Dict[str, Any]) -> Any:
        self._throttle()

        url = f"{self.base_url}{endpoint}"
        request_params = {**params, **self._auth_params()}
        headers = {"Accept": "application/json", **self._auth_headers()}

        logger.debug(f"GET {url} params={params}")

        response = self.session.get(
            url, params=request_params, headers=headers, timeout=self.timeout
        )
        status = response.status_code

        if status == 429:
            retry_after = parse_retry_after(response.headers.get("Retry-After"))
            raise UpstreamRateLimitError(
                f"{self.provider_name} API rate limit exceeded", retry_after=retry_after
            )
        if status == 404:
            raise UpstreamNotFoundError(f"Resource not found: {endpoint}", status_code=404)
        if status >= 500:
            raise UpstreamServerError(
                f"{self.provider_name} API error: HTTP {status}", status_code=status
            )
        if status >= 400:
            raise UpstreamAPIError(
                f"{self.provider_name} API error: HTTP {status}", status_code=status
            )

        try:
            return response.json()
        except ValueError as e:
            raise UpstreamAPIError(f"Invalid JSON response from {endpoint}: {e}", status_code=status) from e

    def get_json(
        self,
        endpoint: str,
        params: Optional[Mapping[str, Any]] = None,
        use_cache: bool = True,
    ) -> Any:
        """GET ``endpoint`` and return the decoded JSON body.

        Args:
            endpoint: Path below ``base_url`` (e.g. "/bill/118/hr")
            params: Query parameters (API keys are added by the client)
            use_cache: Read and write the response cache if one is configured

        Raises:
            UpstreamRateLimitError: Still throttled after all attempts
            UpstreamNotFoundError: HTTP 404
            UpstreamAPIError: Any other non-2xx status or invalid JSON
            requests.exceptions.RequestException: Network error after all attempts
        """
        params = dict(params or {})
        cache_key = make_cache_key(endpoint, params)

        if use_cache and self.cache is not None:
            cached = self.cache.get(cache_key)
            if cached is not None:
                return cached

        retrying = Retrying(
            retry=retry_if_exception_type(RETRYABLE_ERRORS),
            stop=stop_after_attempt(self.max_retries),
            wait=self._wait_before_retry,
            sleep=self._sleep,
            before_sleep=self._log_retry,
            reraise=True,
        )
        data = retrying(self._send_once, endpoint, params)

        if use_cache and self.cache is not None:
            self.cache.set(cache_key, data)
        return data
