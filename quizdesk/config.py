"""Runtime configuration read from the process environment."""

from __future__ import annotations

from dataclasses import dataclass
import os

from quizdesk.constants.ai_constants import DEFAULT_OPENAI_MODEL, DEFAULT_REQUEST_TIMEOUT_SECONDS
from quizdesk.constants.network_constants import DEFAULT_HOST, DEFAULT_PORT


@dataclass(slots=True, frozen=True)
class AppConfig:
    """Settings needed to wire the service together at startup."""

    host: str = DEFAULT_HOST
    port: int = DEFAULT_PORT
    openai_api_key: str | None = None
    openai_model: str = DEFAULT_OPENAI_MODEL
    openai_timeout_seconds: float = DEFAULT_REQUEST_TIMEOUT_SECONDS
    sample_seed: int | None = 0

    @property
    def has_openai_key(self) -> bool:
        return bool(self.openai_api_key)

    @classmethod
    def from_env(cls, environ: dict[str, str] | None = None) -> "AppConfig":
        env = os.environ if environ is None else environ
        port_value = env.get("QUIZDESK_PORT", "").strip()
        try:
            port = int(port_value) if port_value else DEFAULT_PORT
        except ValueError as exc:
            raise ValueError(f"QUIZDESK_PORT must be an integer, got {port_value!r}.") from exc
        timeout_value = env.get("QUIZDESK_OPENAI_TIMEOUT", "").strip()
        try:
            timeout = float(timeout_value) if timeout_value else DEFAULT_REQUEST_TIMEOUT_SECONDS
        except ValueError as exc:
            raise ValueError(
                f"QUIZDESK_OPENAI_TIMEOUT must be a number of seconds, got {timeout_value!r}."
            ) from exc
        return cls(
            host=env.get("QUIZDESK_HOST", "").strip() or DEFAULT_HOST,
            port=port,
            openai_api_key=env.get("OPENAI_API_KEY", "").strip() or None,
            openai_model=env.get("QUIZDESK_OPENAI_MODEL", "").strip() or DEFAULT_OPENAI_MODEL,
            openai_timeout_seconds=timeout,
        )
