"""Logging setup with token redaction."""

import logging
import re
from typing import ClassVar

from rich.console import Console
from rich.logging import RichHandler

JSON_FORMAT = (
    '{"time": "%(asctime)s", "level": "%(levelname)s", '
    '"name": "%(name)s", "message": "%(message)s"}'
)
TEXT_FORMAT = "%(name)s | %(message)s"

# Loggers of the HTTP stack that are too chatty at INFO
NOISY_LOGGERS = ("httpx", "httpcore")


class SecretRedactingFilter(logging.Filter):
    """Mask GitHub credentials in log records before they are emitted."""

    SECRET_PATTERNS: ClassVar[list[tuple[re.Pattern[str], str]]] = [
        # ghp_, gho_, ghu_, ghs_ and ghr_ tokens
        (re.compile(r"gh[pousr]_[a-zA-Z0-9]{20,}"), "[REDACTED_GH_TOKEN]"),
        (re.compile(r"github_pat_[a-zA-Z0-9_]+"), "[REDACTED_GH_PAT]"),
        (re.compile(r"Bearer\s+[a-zA-Z0-9_\-\.]+"), "Bearer [REDACTED]"),
        (re.compile(r"(Authorization:\s*)[^\s,\]]+", re.IGNORECASE), r"\1[REDACTED]"),
        (re.compile(r"(token[=:]\s*)[^\s,\]]+", re.IGNORECASE), r"\1[REDACTED]"),
    ]

    def filter(self, record: logging.LogRecord) -> bool:
        """Redact the message template and any string arguments."""
        record.msg = self.redact(str(record.msg))
        if isinstance(record.args, tuple):
            record.args = tuple(
                self.redact(arg) if isinstance(arg, str) else arg for arg in record.args
            )
        return True

    def redact(self, text: str) -> str:
        """Return text with every known secret pattern masked."""
        for pattern, replacement in self.SECRET_PATTERNS:
            text = pattern.sub(replacement, text)
        return text


def setup_logging(
    verbose: bool = False,
    json_format: bool = False,
    console: Console | None = None,
) -> None:
    """Configure the root logger for command-line use.

    Args:
        verbose: Enable debug level logging.
        json_format: Emit one JSON object per line instead of rich output.
        console: Rich console to log to (stderr by default).
    """
    level = logging.DEBUG if verbose else logging.INFO

    handler: logging.Handler
    if json_format:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(JSON_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
    else:
        handler = RichHandler(
            console=console or Console(stderr=True),
            show_path=False,
            rich_tracebacks=verbose,
        )
        handler.setFormatter(logging.Formatter(TEXT_FORMAT))

    handler.addFilter(SecretRedactingFilter())

    root_logger = logging.getLogger()
    for existing in list(root_logger.handlers):
        root_logger.removeHandler(existing)
    root_logger.addHandler(handler)
    root_logger.setLevel(level)

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
