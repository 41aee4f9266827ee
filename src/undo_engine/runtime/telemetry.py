"""Telemetry services built directly on structlog.

This module exposes a narrow surface area for the rest of the engine:

``configure(...)`` -- override or preset the structlog configuration
``get_logger(name)`` -- fetch (and cache) a bound logger
``record_event(name, ...)`` -- emit structured events at a chosen level
``span(name, ...)`` -- context manager timing a block and tagging its component
"""

from __future__ import annotations

import logging
import os
import sys
import time
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, MutableMapping, Optional

import structlog

ENV_PREFIX = "UNDO_ENGINE_"
DEFAULT_LOGGER_NAME = os.getenv(f"{ENV_PREFIX}LOGGER", "undo_engine")

_LOGGER_CACHE: MutableMapping[str, Any] = {}
_ACTIVE_PRESET: Optional[str] = None


def _env(name: str, default: Optional[str] = None) -> Optional[str]:
    return os.getenv(f"{ENV_PREFIX}{name}", default)


def _env_flag(name: str, default: bool) -> bool:
    raw = _env(name)
    if raw is None:
        return default
    return raw.lower() in {"1", "true", "yes", "on"}


def _stringify(value: Any) -> str:
    if isinstance(value, str):
        return value
    return repr(value) if isinstance(value, (dict, list, tuple, set)) else str(value)


def _resolve_level(name: Optional[str] = None) -> int:
    raw = (name or _env("LOG_LEVEL") or "INFO").upper()
    level = logging.getLevelName(raw)
    if not isinstance(level, int):
        raise ValueError(f"Unknown log level '{raw}'.")
    return level


def _stderr_logger_factory(*args: Any) -> structlog.PrintLogger:
    return structlog.PrintLogger(sys.stderr)


def _processors(*, json_format: bool, colors: bool) -> list[Any]:
    processors: list[Any] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
    ]
    if json_format:
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=colors))
    return processors


def _build_preset_config(preset: str) -> Dict[str, Any]:
    key = preset.lower()

    if key == "development":
        level, json_format, colors, console = "DEBUG", False, True, True
    elif key == "production":
        level, json_format, colors, console = "INFO", True, False, True
    elif key in {"performance", "performance_analysis"}:
        level, json_format, colors, console = "DEBUG", True, False, True
    else:
        raise ValueError(f"Unknown preset '{preset}'.")

    return _assemble(
        level=level, json_format=json_format, colors=colors, console=console
    )


def _build_default_config() -> Dict[str, Any]:
    return _assemble(
        level=None,
        json_format=_env_flag("LOG_JSON", False),
        colors=not _env_flag("NO_COLOR", False),
        console=not _env_flag("DISABLE_CONSOLE", False),
    )


def _assemble(
    *, level: Optional[str], json_format: bool, colors: bool, console: bool
) -> Dict[str, Any]:
    min_level = _resolve_level(level)
    return {
        "processors": _processors(json_format=json_format, colors=colors),
        "wrapper_class": structlog.make_filtering_bound_logger(min_level),
        # ReturnLogger renders records without writing them anywhere.
        "logger_factory": (
            _stderr_logger_factory if console else structlog.ReturnLoggerFactory()
        ),
        "cache_logger_on_first_use": False,
    }


def configure(
    *, config: Optional[Dict[str, Any]] = None, preset: Optional[str] = None
) -> None:
    """Override the active structlog configuration.

    Parameters
    ----------
    config:
        Explicit keyword arguments for ``structlog.configure``.
    preset:
        Named preset (``"development"``, ``"production"``,
        ``"performance"``). ``config`` and ``preset`` are mutually exclusive.
    """

    global _ACTIVE_PRESET
    if config and preset:
        raise ValueError("Provide either `config` or `preset`, not both.")

    if preset:
        config = _build_preset_config(preset)
    elif config is None:
        config = _build_default_config()

    structlog.configure(**config)
    _ACTIVE_PRESET = preset
    _LOGGER_CACHE.clear()


def active_preset() -> Optional[str]:
    return _ACTIVE_PRESET


def get_logger(name: Optional[str] = None) -> Any:
    """Return a cached lazy structlog logger bound to ``name``.

    The proxy is re-bound on every call, so output always follows the active
    configuration and the current ``sys.stderr``.
    """

    logger_name = name or DEFAULT_LOGGER_NAME
    if logger_name not in _LOGGER_CACHE:
        _LOGGER_CACHE[logger_name] = structlog.get_logger(
            logger_name, logger=logger_name
        )
    return _LOGGER_CACHE[logger_name]


def _resolve_level_method(logger: Any, level: str) -> Any:
    name = str(level).lower()
    attr = getattr(logger, name, None)
    if attr is None:
        raise ValueError(f"Unsupported log level '{level}'.")
    return attr


def record_event(
    name: str,
    *,
    level: str = "info",
    data: Optional[Dict[str, Any]] = None,
    logger_name: Optional[str] = None,
) -> None:
    """Emit a single structured event."""

    log = get_logger(logger_name)
    method = _resolve_level_method(log, level)
    payload = {key: _stringify(value) for key, value in (data or {}).items()}
    method(f"event::{name}", **payload)


@dataclass
class SpanHandle:
    """Handle returned from ``span`` for optional metadata updates."""

    logger: Any
    span_name: str
    component_name: Optional[str] = None
    metadata: Dict[str, Any] = field(default_factory=dict)
    failed: bool = False

    def add_metadata(self, key: str, value: Any) -> None:
        self.metadata[key] = _stringify(value)

    def _emit(
        self, level: str, message: str, extra: Optional[Dict[str, Any]] = None
    ) -> None:
        payload = {"span": self.span_name, **self.metadata}
        if self.component_name:
            payload["component"] = self.component_name
        if extra:
            payload.update({key: _stringify(val) for key, val in extra.items()})
        _resolve_level_method(self.logger, level)(message, **payload)

    def fail(self, reason: str) -> None:
        self.failed = True
        self._emit("error", "span::fail", {"reason": reason})

    def cancel(self, reason: str | None = None) -> None:
        extra = {"reason": reason} if reason else None
        self._emit("warning", "span::cancel", extra)


@contextmanager
def span(
    name: str,
    *,
    logger_name: Optional[str] = None,
    component: Optional[str | bool] = None,
    metadata: Optional[Dict[str, Any]] = None,
) -> Iterator[SpanHandle]:
    """Time a code block and (optionally) tag it with a component.

    Parameters
    ----------
    name:
        Operation name written on every span record.
    logger_name:
        Target logger; defaults to the engine logger.
    component:
        If ``True`` use the same name as the span; if a string, use it as the
        component identifier.
    metadata:
        Optional metadata bound to the structlog context for the duration of
        the block and written on the span records.
    """

    log = get_logger(logger_name)
    component_name = None
    if component is True:
        component_name = name
    elif isinstance(component, str):
        component_name = component

    metadata_payload = {
        key: _stringify(value) for key, value in (metadata or {}).items()
    }
    handle = SpanHandle(
        logger=log,
        span_name=name,
        component_name=component_name,
        metadata=dict(metadata_payload),
    )
    started = time.perf_counter()

    with structlog.contextvars.bound_contextvars(**metadata_payload):
        try:
            yield handle
        except Exception as exc:
            handle.fail(str(exc) or type(exc).__name__)
            raise
        finally:
            if not handle.failed:
                elapsed_ms = (time.perf_counter() - started) * 1000.0
                handle._emit(
                    "debug", "span::finish", {"elapsed_ms": f"{elapsed_ms:.3f}"}
                )


# Initialize the module-level logger once the config is ready.
configure()
logger = get_logger()

__all__ = [
    "SpanHandle",
    "active_preset",
    "configure",
    "get_logger",
    "record_event",
    "span",
    "logger",
]
