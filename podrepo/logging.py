import inspect
import logging
from pprint import pformat
from typing import Any

from pydantic import BaseModel

from podrepo.document import Document


class PprintLogger:
    """A logger wrapper that pretty prints documents, models and containers."""

    def __init__(self, logger: logging.Logger):
        self._logger = logger

    def _format_message(self, msg: Any, pprint: bool = True) -> str:
        """Format a message, optionally pretty printing it.

        Documents are rendered one statement per line, pydantic models through
        model_dump_json(), anything else through pformat.
        """
        if not pprint:
            return str(msg)

        if isinstance(msg, Document):
            header = f"<{msg.url}>" if msg.url else "<unsaved document>"
            lines = [header, *(f"  {line}" for line in msg.ntriples())]
            return "\n".join(lines)

        if isinstance(msg, BaseModel):
            return msg.model_dump_json(indent=2)

        if isinstance(msg, str):
            return msg

        return pformat(msg, width=120, depth=None)

    def debug(self, msg: Any, *args, pprint: bool = True, **kwargs) -> None:
        """Log a debug message with optional pprint formatting."""
        self._logger.debug(self._format_message(msg, pprint=pprint), *args, stacklevel=2, **kwargs)

    def info(self, msg: Any, *args, pprint: bool = True, **kwargs) -> None:
        """Log an info message with optional pprint formatting."""
        self._logger.info(self._format_message(msg, pprint=pprint), *args, stacklevel=2, **kwargs)

    def warning(self, msg: Any, *args, pprint: bool = True, **kwargs) -> None:
        """Log a warning message with optional pprint formatting."""
        self._logger.warning(self._format_message(msg, pprint=pprint), *args, stacklevel=2, **kwargs)

    def error(self, msg: Any, *args, pprint: bool = True, **kwargs) -> None:
        """Log an error message with optional pprint formatting."""
        self._logger.error(self._format_message(msg, pprint=pprint), *args, stacklevel=2, **kwargs)

    def exception(self, msg: Any, *args, pprint: bool = True, **kwargs) -> None:
        """Log an exception message with optional pprint formatting."""
        self._logger.exception(self._format_message(msg, pprint=pprint), *args, stacklevel=2, **kwargs)

    # Delegate other standard logger methods/attributes
    def __getattr__(self, name: str) -> Any:
        return getattr(self._logger, name)


def setup_logging(level: int | None = None, name: str | None = None) -> PprintLogger:
    """Return a PprintLogger named after the calling module.

    A stream handler is attached once per logger. The level is left to the
    logging hierarchy unless one is given.
    """
    if name is None:
        frame = inspect.currentframe().f_back  # type: ignore[union-attr]
        name = frame.f_globals.get("__name__", "podrepo")  # type: ignore[union-attr]
    logger = logging.getLogger(name)
    if level is not None:
        logger.setLevel(level)
    if not logger.handlers:
        handler = logging.StreamHandler()
        if level is not None:
            handler.setLevel(level)
        formatter = logging.Formatter("%(asctime)s - %(name)s:%(lineno)d - %(levelname)s - %(message)s")
        handler.setFormatter(formatter)
        logger.addHandler(handler)
    return PprintLogger(logger)
