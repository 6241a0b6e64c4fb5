"""
Structured logger used throughout bcartifacts.
"""

import inspect
import logging
from datetime import datetime

from pydantic import BaseModel, ValidationError


class LogLine(BaseModel):
    """
    A single log entry.
    """

    time: str
    level: str
    caller: str
    message: str


class ArtifactLogger:
    """
    Logger that emits one JSON document per log call.
    """

    def __init__(self, name: str = "bcartifacts") -> None:
        self.logger = logging.getLogger(name)

    def log(self, message: str, level: int) -> None:
        """
        Log a message at the given level.

        Args:
            message: Human readable message
            level: A level constant from the logging module
        """
        if not self.logger.isEnabledFor(level):
            return

        caller = ""
        frame = inspect.currentframe()
        if frame is not None and frame.f_back is not None:
            caller = frame.f_back.f_code.co_name

        line = LogLine(
            time=datetime.now().isoformat(timespec="seconds"),
            level=logging.getLevelName(level),
            caller=caller,
            message=message.replace("\n", " "),
        )
        self.logger.log(level, line.model_dump_json())


class MessageFormatter(logging.Formatter):
    """
    Formats ArtifactLogger records as their bare message, for handlers such as
    RichHandler that render time and level themselves.
    """

    def format(self, record: logging.LogRecord) -> str:
        message = record.getMessage()
        try:
            return LogLine.model_validate_json(message).message
        except ValidationError:
            return message
