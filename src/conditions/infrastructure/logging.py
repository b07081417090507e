"""Log context for rule editing sessions, plus loguru handler setup."""

import contextvars
import sys
from typing import Any

from loguru import logger

from src.config import LoggingConfig

# Fields bound to every record emitted while a rule is being edited
_session_fields: contextvars.ContextVar[dict[str, Any]] = contextvars.ContextVar("session_fields", default={})


class RuleLogContext:
    """
    Binds the rule being edited, plus any extra fields, to log records.

    Contexts nest; inner fields override outer ones until the inner block exits.

    Example:
        with RuleLogContext("rule-42", step="parameters"):
            logger.info("Applied AddGroup")  # extra carries rule_id and step
    """

    def __init__(self, rule_id: str, **fields: Any):
        self.fields = {"rule_id": rule_id, **fields}
        self._token: contextvars.Token | None = None

    def __enter__(self) -> "RuleLogContext":
        self._token = _session_fields.set({**_session_fields.get(), **self.fields})
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        if self._token is not None:
            _session_fields.reset(self._token)
            self._token = None


def context_filter(record) -> bool:
    """Copy the session fields into the record's extras."""
    record["extra"].update(_session_fields.get())
    return True


def configure_structured_logging(config: LoggingConfig | None = None) -> None:
    """
    Install a console handler, and a rotating file handler when configured,
    showing the rule each record was emitted for.

    Records logged outside a RuleLogContext show "-" as rule id. Call once from
    the host at startup.
    """
    config = config or LoggingConfig()

    logger.remove()
    logger.configure(extra={"rule_id": "-"})

    logger.add(
        sink=sys.stderr,
        format=(
            "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | "
            "<level>{level: <8}</level> | "
            "<cyan>{extra[rule_id]}</cyan> | "
            "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> | "
            "<level>{message}</level>"
        ),
        filter=context_filter,
        level=config.level,
        colorize=True,
    )

    if config.file:
        logger.add(
            sink=config.file,
            format="{time:YYYY-MM-DD HH:mm:ss.SSS} | {level} | {extra} | {name}:{function}:{line} | {message}",
            filter=context_filter,
            level=config.level,
            rotation=config.rotation,
            retention=config.retention,
            compression="zip",
            serialize=False,
        )
