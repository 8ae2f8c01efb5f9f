import logging
import os
from enum import Enum


class VerboseLevel(Enum):
    QUIET = 0
    INFO = 1
    DEBUG = 2

    @classmethod
    def parse(cls, value: "VerboseLevel | str | None") -> "VerboseLevel":
        if value is None:
            value = os.getenv("CSPOM_VERBOSE", "quiet")
        if isinstance(value, VerboseLevel):
            return value
        try:
            return cls[value.strip().upper()]
        except KeyError:
            raise ValueError(f"Invalid verbose level: {value}") from None


class InfoWarningErrorFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord):  # noqa
        if record.levelno == logging.INFO:
            return record.getMessage()
        return f"{record.levelname}: {record.getMessage()}"


def setup_logging(verbose: VerboseLevel | str | None = None) -> None:
    level = VerboseLevel.parse(verbose)
    if level is VerboseLevel.QUIET:
        return

    logger = logging.getLogger("cspom")
    logger.setLevel(
        logging.DEBUG if level is VerboseLevel.DEBUG else logging.INFO
    )
    if getattr(logger, "_cspom_configured", False):
        return

    debug_handler = logging.StreamHandler()
    debug_handler.setLevel(logging.DEBUG)

    debug_formatter = logging.Formatter(
        "%(asctime)s | %(levelname)s | "
        "%(filename)s:%(lineno)d | %(funcName)s() | %(message)s"
    )

    debug_handler.setFormatter(debug_formatter)
    debug_handler.addFilter(lambda record: record.levelno == logging.DEBUG)

    info_handler = logging.StreamHandler()
    info_handler.setLevel(logging.INFO)

    info_handler.setFormatter(InfoWarningErrorFormatter())
    info_handler.addFilter(lambda record: record.levelno >= logging.INFO)

    logger.addHandler(debug_handler)
    logger.addHandler(info_handler)
    logger._cspom_configured = True  # type: ignore[attr-defined]
