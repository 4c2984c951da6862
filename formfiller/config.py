"""Runtime settings read from the environment (``FORMFILLER_*``), with ``.env`` support."""

from __future__ import annotations

from dataclasses import dataclass
import os

from dotenv import load_dotenv

ENV_PREFIX = "FORMFILLER_"


class ConfigError(RuntimeError):
    """Raised when a setting has an unusable value."""


@dataclass(slots=True)
class Settings:
    render_scale: float = 1.5
    font_name: str = "Helvetica"
    font_size: float = 12.0
    fetch_timeout: float = 30.0
    log_level: str = "INFO"

    def __post_init__(self) -> None:
        if self.render_scale <= 0:
            raise ConfigError(f"Render scale must be positive: {self.render_scale}")
        if self.font_size <= 0:
            raise ConfigError(f"Font size must be positive: {self.font_size}")


def load_settings(environ: dict[str, str] | None = None) -> Settings:
    if environ is None:
        load_dotenv(".env.local")
        load_dotenv()
        environ = dict(os.environ)

    defaults = Settings()
    return Settings(
        render_scale=_float(environ, "RENDER_SCALE", defaults.render_scale),
        font_name=environ.get(ENV_PREFIX + "FONT_NAME", defaults.font_name),
        font_size=_float(environ, "FONT_SIZE", defaults.font_size),
        fetch_timeout=_float(environ, "FETCH_TIMEOUT", defaults.fetch_timeout),
        log_level=environ.get(ENV_PREFIX + "LOG_LEVEL", defaults.log_level).upper(),
    )


def _float(environ: dict[str, str], name: str, default: float) -> float:
    raw = environ.get(ENV_PREFIX + name)
    if raw is None or raw == "":
        return default
    try:
        return float(raw)
    except ValueError as exc:
        raise ConfigError(f"{ENV_PREFIX}{name} must be a number, got {raw!r}") from exc
