"""Configuration for notionbridge.

:class:`NotionBridgeConfig` is a dataclass that captures every tuneable
knob: transport and retry policy, schema cache bounds, the content
replacement protocol, and per-collection field overrides.  Instances are
passed to :class:`~notionbridge.service.NotionService`.

:class:`NotionEnvSettings` reads the ``NOTION_*`` environment variables
that :meth:`NotionBridgeConfig.from_env` layers under explicit overrides.
"""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass, field
from typing import Any

from pydantic import Field, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

# ---------------------------------------------------------------------------
# Environment settings
# ---------------------------------------------------------------------------


class NotionEnvSettings(BaseSettings):
    """``NOTION_*`` environment variables.

    Unset and empty variables stay ``None`` so the dataclass defaults
    apply.
    """

    model_config = SettingsConfigDict(
        env_prefix="NOTION_",
        env_ignore_empty=True,
        extra="ignore",
    )

    token: str | None = Field(default=None, validation_alias="NOTION_API_KEY")
    notion_version: str | None = Field(default=None, validation_alias="NOTION_VERSION")
    base_url: str | None = None
    timeout_seconds: float | None = None
    schema_cache_ttl_seconds: float | None = None
    http_proxy: str | None = None


# ---------------------------------------------------------------------------
# Configuration dataclass
# ---------------------------------------------------------------------------

@dataclass
class NotionBridgeConfig:
    """Complete configuration for a notionbridge service.

    Every parameter has a sensible default so that the only *required*
    value is ``token``.

    Parameters
    ----------
    token:
        Notion integration token.  **Required.**  Never logged.
    notion_version:
        Value of the ``Notion-Version`` header sent with every request.
    base_url:
        API root URL.  Override for proxy or testing environments.
    timeout_seconds:
        Total budget for one HTTP attempt, in seconds.
    retry_max_attempts:
        Total attempts (initial call included) for retryable failures.
    retry_base_delay:
        First exponential backoff step, in seconds.
    retry_spacing:
        Flat spacing raced against the exponential step; the shorter wins.
    retry_jitter:
        Randomly scale each delay to 50-100 % of its value.
    circuit_breaker_enabled:
        Put a closed/open/half-open circuit breaker in front of the API.
    circuit_failure_threshold:
        Consecutive upstream failures that open the circuit.
    circuit_recovery_timeout_seconds:
        How long an open circuit rejects calls after its last failure.
    circuit_success_threshold:
        Half-open successes needed to close the circuit again.
    schema_cache_ttl_seconds:
        Age after which a cached schema is refreshed.
    schema_cache_max_entries:
        Upper bound on cached schemas; the least recently accessed entry
        is evicted first.
    delete_concurrency:
        Simultaneous block deletes while replacing document content.
    append_batch_size:
        Blocks per append call (the Notion limit is 100).
    append_max_retries:
        Extra attempts for a failed append batch.
    append_retry_base_delay:
        First backoff step between append attempts, in seconds.
    field_overrides:
        Per-collection map of logical field name to Notion property name.
        The ``"title"`` key selects the property used as a record title.
    http_proxy:
        Optional HTTP/HTTPS proxy URL.
    metrics:
        Optional :class:`~notionbridge.observability.MetricsHook`.
    debug_dump_payload:
        Write the (redacted) request/response payload to *stderr*.
    """

    # ── Core ────────────────────────────────────────────────────────────
    token: str = ""

    notion_version: str = "2022-06-28"

    base_url: str = "https://api.notion.com/v1"

    # ── HTTP ────────────────────────────────────────────────────────────
    timeout_seconds: float = 10.0

    http_proxy: str | None = None

    # ── Retry ───────────────────────────────────────────────────────────
    retry_max_attempts: int = 3

    retry_base_delay: float = 1.0

    retry_spacing: float = 0.5

    retry_jitter: bool = True

    # ── Circuit breaker ─────────────────────────────────────────────────
    circuit_breaker_enabled: bool = False

    circuit_failure_threshold: int = 5

    circuit_recovery_timeout_seconds: float = 30.0

    circuit_success_threshold: int = 3

    # ── Schema cache ────────────────────────────────────────────────────
    schema_cache_ttl_seconds: float = 600.0

    schema_cache_max_entries: int = 100

    # ── Content replacement ─────────────────────────────────────────────
    delete_concurrency: int = 5

    append_batch_size: int = 100

    append_max_retries: int = 2

    append_retry_base_delay: float = 0.1

    # ── Collections ─────────────────────────────────────────────────────
    field_overrides: dict[str, dict[str, str]] = field(default_factory=dict)

    # ── Observability ──────────────────────────────────────────────────
    metrics: Any | None = None

    # ── Debug ───────────────────────────────────────────────────────────
    debug_dump_payload: bool = False

    def __post_init__(self) -> None:
        """Validate configuration after initialization."""
        from urllib.parse import urlparse

        parsed = urlparse(self.base_url)
        if parsed.scheme == "http" and parsed.hostname not in (
            "localhost",
            "127.0.0.1",
            "::1",
        ):
            raise ValueError(
                f"base_url uses insecure HTTP for non-local host '{parsed.hostname}'. "
                "Use HTTPS to protect your API token, or target localhost for testing."
            )

        if self.timeout_seconds <= 0:
            raise ValueError(f"timeout_seconds must be > 0, got {self.timeout_seconds}")
        if self.retry_max_attempts < 1:
            raise ValueError(f"retry_max_attempts must be >= 1, got {self.retry_max_attempts}")
        if self.retry_base_delay < 0:
            raise ValueError(f"retry_base_delay must be >= 0, got {self.retry_base_delay}")
        if self.retry_spacing < 0:
            raise ValueError(f"retry_spacing must be >= 0, got {self.retry_spacing}")
        if self.circuit_failure_threshold < 1:
            raise ValueError(
                f"circuit_failure_threshold must be >= 1, got {self.circuit_failure_threshold}"
            )
        if self.circuit_success_threshold < 1:
            raise ValueError(
                f"circuit_success_threshold must be >= 1, got {self.circuit_success_threshold}"
            )
        if self.circuit_recovery_timeout_seconds < 0:
            raise ValueError(
                "circuit_recovery_timeout_seconds must be >= 0, "
                f"got {self.circuit_recovery_timeout_seconds}"
            )
        if self.schema_cache_ttl_seconds < 0:
            raise ValueError(
                f"schema_cache_ttl_seconds must be >= 0, got {self.schema_cache_ttl_seconds}"
            )
        if self.schema_cache_max_entries < 1:
            raise ValueError(
                f"schema_cache_max_entries must be >= 1, got {self.schema_cache_max_entries}"
            )
        if self.delete_concurrency < 1:
            raise ValueError(f"delete_concurrency must be >= 1, got {self.delete_concurrency}")
        if not 1 <= self.append_batch_size <= 100:
            raise ValueError(
                f"append_batch_size must be between 1 and 100, got {self.append_batch_size}"
            )
        if self.append_max_retries < 0:
            raise ValueError(f"append_max_retries must be >= 0, got {self.append_max_retries}")
        if self.append_retry_base_delay < 0:
            raise ValueError(
                f"append_retry_base_delay must be >= 0, got {self.append_retry_base_delay}"
            )

    @property
    def timeout_ms(self) -> int:
        return int(self.timeout_seconds * 1000)

    @classmethod
    def from_env(cls, **overrides: Any) -> NotionBridgeConfig:
        """Build a config from ``NOTION_*`` environment variables.

        Keyword *overrides* win over the environment.  Raises
        :class:`ValueError` when a variable does not parse or when no
        token is available from either source.
        """
        try:
            settings = NotionEnvSettings()
        except ValidationError as exc:
            raise ValueError(f"Invalid NOTION_* environment: {exc}") from exc
        values: dict[str, Any] = settings.model_dump(exclude_none=True)
        values.update(overrides)
        if not values.get("token"):
            raise ValueError("NOTION_API_KEY is not set")
        return cls(**values)

    def __repr__(self) -> str:
        """Mask the token to prevent accidental credential leakage."""
        parts: list[str] = []
        for f in dataclasses.fields(self):
            val = getattr(self, f.name)
            if f.name == "token":
                masked = f"...{val[-4:]}" if len(val) >= 4 else "****"
                parts.append(f"token='{masked}'")
            else:
                parts.append(f"{f.name}={val!r}")
        return f"NotionBridgeConfig({', '.join(parts)})"
