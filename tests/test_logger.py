import logging

import pytest

from tetu_status.logger import NOISY_LOGGERS, TRACE, ColoredFormatter, setup_logging


@pytest.fixture(autouse=True)
def restore_logging():
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    noisy = {name: logging.getLogger(name).level for name in NOISY_LOGGERS}
    yield
    root.handlers[:] = handlers
    root.setLevel(level)
    for name, noisy_level in noisy.items():
        logging.getLogger(name).setLevel(noisy_level)


def _record(msg, *args, level=logging.ERROR):
    return logging.LogRecord("tetu_status.agents", level, __file__, 1, msg, args, None)


def test_formatter_colors_level_and_agent_tag():
    formatter = ColoredFormatter(fmt="%(levelname)s %(message)s")
    record = _record("[%s] %s", "vault-tvl", "polygon vaults() failed")

    output = formatter.format(record)

    assert "\033[31m" in output
    assert f"{ColoredFormatter.AGENT_COLOR}[vault-tvl]{ColoredFormatter.RESET}" in output
    assert output.endswith(" polygon vaults() failed")
    assert record.levelname == "ERROR"


def test_formatter_leaves_untagged_messages():
    formatter = ColoredFormatter(fmt="%(message)s")
    assert formatter.format(_record("Built %d agent(s)", 3, level=logging.INFO)) == (
        "Built 3 agent(s)"
    )


def test_trace_level_is_registered():
    assert logging.getLevelName(TRACE) == "TRACE"


def test_setup_logging_quiets_client_loggers():
    setup_logging("debug")

    assert logging.getLogger().level == logging.DEBUG
    for name in NOISY_LOGGERS:
        assert logging.getLogger(name).level == logging.WARNING


def test_setup_logging_trace_opens_client_loggers():
    setup_logging("TRACE")

    assert logging.getLogger().level == TRACE
    assert logging.getLogger("web3").level == TRACE


def test_setup_logging_falls_back_to_env(monkeypatch):
    monkeypatch.setenv("LOG_LEVEL", "warning")
    setup_logging()
    assert logging.getLogger().level == logging.WARNING
