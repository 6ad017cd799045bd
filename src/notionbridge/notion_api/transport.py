"""Async HTTP transport (request executor) for the Notion API.

Each call to :meth:`AsyncNotionTransport.execute` runs this lifecycle:

1. Send the HTTP request with auth and version headers under a total
   per-attempt timeout.
2. Classify the status code into the closed error taxonomy *before*
   looking at the body (:func:`classify_status`).
3. On ``2xx`` validate the JSON body against the expected wire model; a
   mismatch is an :class:`InternalServerError`.
4. On a timeout or internal server error, back off and retry (3 attempts
   in total by default).  Every other error kind is raised immediately.
5. Count requests, successes, errors and retries, time every call
   (failures tagged with ``error_kind``), and log a warning on every
   failed attempt.
6. With a :class:`~notionbridge.notion_api.circuit.CircuitBreaker`
   attached, reject calls while the circuit is open and report each
   call's outcome to it.
"""

from __future__ import annotations

import asyncio
import json as _json
import math
import sys
import time
from datetime import datetime, timezone
from email.utils import parsedate_to_datetime
from typing import Any

import httpx
from pydantic import BaseModel, ValidationError

from notionbridge.config import NotionBridgeConfig
from notionbridge.errors import (
    BadRequestError,
    ConflictError,
    ForbiddenError,
    InternalServerError,
    InvalidApiKeyError,
    NotFoundError,
    NotionError,
    RateLimitedError,
    RequestTimeoutError,
    ServiceUnavailableError,
)
from notionbridge.observability import NoopMetricsHook, get_logger

from .circuit import CircuitBreaker
from .retries import compute_backoff, should_retry

log = get_logger("notionbridge.transport")


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _parse_retry_after(
    response: httpx.Response,
    now: datetime | None = None,
) -> float | None:
    """Extract ``Retry-After`` as seconds, or ``None``.

    Accepts delta-seconds or an HTTP-date.  A date is converted to whole
    seconds from *now* (rounded up); dates in the past yield ``None``.
    """
    raw = response.headers.get("retry-after")
    if raw is None:
        return None
    raw = raw.strip()
    try:
        seconds = float(raw)
    except ValueError:
        pass
    else:
        return seconds if seconds >= 0 else None

    try:
        when = parsedate_to_datetime(raw)
    except (TypeError, ValueError):
        return None
    if when.tzinfo is None:
        when = when.replace(tzinfo=timezone.utc)
    delta = (when - (now or datetime.now(timezone.utc))).total_seconds()
    if delta <= 0:
        return None
    return float(math.ceil(delta))


def _notion_message(body: str) -> str:
    """Pull Notion's ``message`` out of an error body, else the raw text."""
    try:
        parsed = _json.loads(body)
    except ValueError:
        return body[:500]
    if isinstance(parsed, dict) and isinstance(parsed.get("message"), str):
        return parsed["message"]
    return body[:500]


def classify_status(
    status: int,
    body: str = "",
    retry_after: float | None = None,
    *,
    method: str = "",
    path: str = "",
) -> NotionError | None:
    """Map an HTTP status to its error, or ``None`` for success codes.

    This is a pure function of its arguments::

        400, 422  -> BadRequestError (body kept as detail)
        401       -> InvalidApiKeyError
        403       -> ForbiddenError
        404       -> NotFoundError
        409       -> ConflictError
        429       -> RateLimitedError (retry_after_seconds)
        503       -> ServiceUnavailableError
        other 5xx -> InternalServerError
        other 4xx -> InternalServerError
    """
    if status < 400:
        return None

    where = f"{method} {path}".strip()
    message = _notion_message(body)
    ctx: dict[str, Any] = {"status_code": status}
    if path:
        ctx["path"] = path

    if status in (400, 422):
        return BadRequestError(
            f"Bad request on {where}: {message}",
            context={**ctx, "body": body, "detail": f"{status}:{body}"},
        )
    if status == 401:
        return InvalidApiKeyError(f"Invalid API key on {where}", context=ctx)
    if status == 403:
        return ForbiddenError(
            f"Forbidden on {where}: {message}",
            context={**ctx, "body": body},
        )
    if status == 404:
        return NotFoundError(f"Not found on {where}: {message}", context=ctx)
    if status == 409:
        return ConflictError(f"Conflict on {where}: {message}", context=ctx)
    if status == 429:
        return RateLimitedError(
            f"Rate limited on {where}",
            retry_after_seconds=retry_after,
            context=ctx,
        )
    if status == 503:
        return ServiceUnavailableError(f"Service unavailable on {where}", context=ctx)
    return InternalServerError(
        f"Upstream error {status} on {where}: {message}",
        context={**ctx, "cause": f"{status}:{body}"},
    )


def _dump_payload(
    method: str,
    url: str,
    payload: Any,
    response_status: int | None,
    response_body: Any,
    token: str | None = None,
) -> None:
    """Write a redacted debug dump of the request/response to stderr."""
    from notionbridge.utils.redact import redact

    dump: dict[str, Any] = {"method": method, "url": url}
    if payload is not None:
        dump["request_body"] = payload
    if response_status is not None:
        dump["response_status"] = response_status
    if response_body is not None:
        dump["response_body"] = response_body
    print(_json.dumps(redact(dump, token), indent=2, default=str), file=sys.stderr)


def _emit_debug_dump(
    config: NotionBridgeConfig,
    method: str,
    response: httpx.Response,
    json_payload: Any,
) -> None:
    if not config.debug_dump_payload:
        return
    try:
        resp_body = response.json()
    except ValueError:
        resp_body = response.text[:1000]
    _dump_payload(
        method, str(response.url), json_payload,
        response.status_code, resp_body,
        token=config.token,
    )


def _parse_body(
    response: httpx.Response,
    response_model: type[BaseModel] | None,
    method: str,
    path: str,
) -> dict[str, Any]:
    """Decode a 2xx body and validate it against *response_model*."""
    if response.status_code == 204 or not response.content:
        return {}
    try:
        body = response.json()
    except ValueError as exc:
        raise InternalServerError(
            f"Invalid JSON in response to {method} {path}",
            context={"status_code": response.status_code},
            cause=exc,
        ) from exc
    if not isinstance(body, dict):
        raise InternalServerError(
            f"Unexpected response body type on {method} {path}: {type(body).__name__}",
            context={"status_code": response.status_code},
        )
    if response_model is not None:
        try:
            response_model.model_validate(body)
        except ValidationError as exc:
            raise InternalServerError(
                f"Response to {method} {path} failed validation as "
                f"{response_model.__name__}",
                context={"status_code": response.status_code, "validation_errors": exc.errors()},
                cause=exc,
            ) from exc
    return body


# ---------------------------------------------------------------------------
# Async transport
# ---------------------------------------------------------------------------

class AsyncNotionTransport:
    """Asynchronous HTTP transport with auth, timeout, retry, and metrics.

    Parameters
    ----------
    config:
        A :class:`NotionBridgeConfig` controlling transport behaviour.
    client:
        Optional pre-built ``httpx.AsyncClient``.  Tests pass one backed by
        ``httpx.MockTransport``; it must already carry base URL and headers.
    breaker:
        Optional :class:`CircuitBreaker`.  When omitted, one is built from
        the config if ``circuit_breaker_enabled`` is set.
    """

    def __init__(
        self,
        config: NotionBridgeConfig,
        client: httpx.AsyncClient | None = None,
        breaker: CircuitBreaker | None = None,
    ) -> None:
        self._config = config
        self._metrics = config.metrics if config.metrics is not None else NoopMetricsHook()
        if breaker is None and config.circuit_breaker_enabled:
            breaker = CircuitBreaker(
                failure_threshold=config.circuit_failure_threshold,
                recovery_timeout=config.circuit_recovery_timeout_seconds,
                success_threshold=config.circuit_success_threshold,
            )
        self._breaker = breaker

        if client is None:
            proxy: httpx.URL | str | None = config.http_proxy
            client = httpx.AsyncClient(
                base_url=config.base_url,
                headers={
                    "Authorization": f"Bearer {config.token}",
                    "Notion-Version": config.notion_version,
                    "Content-Type": "application/json",
                },
                timeout=httpx.Timeout(config.timeout_seconds),
                proxy=proxy,
            )
        self._client = client

    @property
    def breaker(self) -> CircuitBreaker | None:
        return self._breaker

    # -- public API --------------------------------------------------------

    async def execute(
        self,
        method: str,
        path: str,
        *,
        response_model: type[BaseModel] | None = None,
        timeout_seconds: float | None = None,
        **kwargs: Any,
    ) -> dict[str, Any]:
        """Execute an HTTP request against the Notion API.

        Parameters
        ----------
        method:
            HTTP method (``GET``, ``POST``, ``PATCH``, ``DELETE``).
        path:
            API path relative to ``base_url`` (e.g. ``/pages``).
        response_model:
            Pydantic model a 2xx body must satisfy.
        timeout_seconds:
            Per-attempt budget; defaults to ``config.timeout_seconds``.
        **kwargs:
            Forwarded to :meth:`httpx.AsyncClient.request` (``json=``,
            ``params=``).

        Returns
        -------
        dict
            Parsed JSON response body (``{}`` for empty responses).

        Raises
        ------
        NotionError
            The classified failure of the last attempt, or
            :class:`ServiceUnavailableError` while the circuit is open.
        """
        max_attempts = self._config.retry_max_attempts
        timeout = timeout_seconds if timeout_seconds is not None else self._config.timeout_seconds
        tags = {"method": method, "path": path}

        self._metrics.increment("notionbridge.requests_total", tags=tags)
        if self._breaker is not None:
            try:
                self._breaker.before_call(path)
            except ServiceUnavailableError:
                self._metrics.increment("notionbridge.circuit_rejections_total", tags=tags)
                raise
        t0 = time.monotonic()
        attempt = 0

        while True:
            try:
                body = await self._attempt(method, path, response_model, timeout, **kwargs)
            except NotionError as exc:
                error_kind = type(exc).__name__
                log.warning(
                    "Request attempt failed",
                    extra={
                        "extra_fields": {
                            "op": "request",
                            "method": method,
                            "path": path,
                            "attempt": attempt + 1,
                            "error_kind": error_kind,
                            "error": exc.message,
                        }
                    },
                )
                if should_retry(exc, attempt, max_attempts):
                    delay = compute_backoff(
                        attempt,
                        base=self._config.retry_base_delay,
                        spacing=self._config.retry_spacing,
                        jitter=self._config.retry_jitter,
                    )
                    self._metrics.increment(
                        "notionbridge.retries_total",
                        tags={**tags, "error_kind": error_kind},
                    )
                    attempt += 1
                    await asyncio.sleep(delay)
                    continue
                self._metrics.increment(
                    "notionbridge.errors_total",
                    tags={**tags, "error_kind": error_kind},
                )
                self._metrics.timing(
                    "notionbridge.request_duration_ms",
                    (time.monotonic() - t0) * 1000,
                    tags={**tags, "error_kind": error_kind},
                )
                if self._breaker is not None:
                    self._breaker.record(exc)
                raise

            if self._breaker is not None:
                self._breaker.record(None)
            self._metrics.increment("notionbridge.success_total", tags=tags)
            self._metrics.timing(
                "notionbridge.request_duration_ms",
                (time.monotonic() - t0) * 1000,
                tags=tags,
            )
            return body

    async def close(self) -> None:
        """Close the underlying async HTTP client and release resources."""
        await self._client.aclose()

    async def __aenter__(self) -> AsyncNotionTransport:
        return self

    async def __aexit__(self, *exc: object) -> None:
        await self.close()

    # -- internals ---------------------------------------------------------

    async def _attempt(
        self,
        method: str,
        path: str,
        response_model: type[BaseModel] | None,
        timeout: float,
        **kwargs: Any,
    ) -> dict[str, Any]:
        timeout_ms = int(timeout * 1000)
        try:
            response = await asyncio.wait_for(
                self._client.request(
                    method, path, timeout=httpx.Timeout(timeout), **kwargs,
                ),
                timeout,
            )
        except (asyncio.TimeoutError, httpx.TimeoutException) as exc:
            raise RequestTimeoutError(
                f"{method} {path} timed out after {timeout_ms}ms",
                timeout_ms=timeout_ms,
                context={"path": path},
                cause=exc,
            ) from exc
        except httpx.HTTPError as exc:
            raise InternalServerError(
                f"Network error on {method} {path}: {exc}",
                context={"path": path},
                cause=exc,
            ) from exc

        _emit_debug_dump(self._config, method, response, kwargs.get("json"))

        error = classify_status(
            response.status_code,
            response.text,
            _parse_retry_after(response) if response.status_code == 429 else None,
            method=method,
            path=path,
        )
        if error is not None:
            raise error
        return _parse_body(response, response_model, method, path)
