"""Console logging for the status agents."""

import logging
import os
import re
import sys

# Below DEBUG; also opens up third-party client logs
TRACE = 5
logging.addLevelName(TRACE, "TRACE")

# web3 and urllib3 log every RPC round-trip, backoff logs every retry
NOISY_LOGGERS = ("web3", "urllib3", "backoff")

AGENT_TAG = re.compile(r"^\[([\w.-]+)\]")


class ColoredFormatter(logging.Formatter):
    """ANSI-coloured level names and ``[agent]`` message prefixes."""

    COLORS = {
        "TRACE": "\033[90m",
        "DEBUG": "\033[36m",
        "INFO": "\033[32m",
        "WARNING": "\033[33m",
        "ERROR": "\033[31m",
        "CRITICAL": "\033[35m",
    }
    AGENT_COLOR = "\033[96m"
    RESET = "\033[0m"
    BOLD = "\033[1m"

    def format(self, record: logging.LogRecord) -> str:
        levelname = record.levelname
        if levelname in self.COLORS:
            record.levelname = (
                f"{self.COLORS[levelname]}{self.BOLD}{levelname}{self.RESET}"
            )

        result = super().format(record)
        record.levelname = levelname

        message = record.getMessage()
        tagged = AGENT_TAG.sub(
            lambda m: f"{self.AGENT_COLOR}[{m.group(1)}]{self.RESET}", message, count=1
        )
        if tagged != message:
            result = result.replace(message, tagged, 1)
        return result


def setup_logging(log_level: str | None = None) -> None:
    """Configure the root logger with a coloured stdout handler.

    ``log_level`` falls back to the LOG_LEVEL environment variable, then INFO.
    At DEBUG and above the noisy client loggers are held at WARNING; TRACE
    lets them through.
    """
    log_level = (log_level or os.getenv("LOG_LEVEL", "INFO")).upper()
    level = TRACE if log_level == "TRACE" else getattr(logging, log_level, logging.INFO)

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(
        ColoredFormatter(
            fmt="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
    )
    logging.basicConfig(level=level, handlers=[handler], force=True)

    noisy_level = TRACE if level == TRACE else logging.WARNING
    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(noisy_level)
