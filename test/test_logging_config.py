import json
import logging
from pathlib import Path

import pytest

from pos.logging_config import CHANNELS, JsonFormatter, setup_logging


@pytest.fixture
def clean_loggers():
    names = [None, *CHANNELS]
    saved = {n: list(logging.getLogger(n).handlers) for n in names}
    level = logging.getLogger().level
    yield
    for n in names:
        logger = logging.getLogger(n)
        for h in list(logger.handlers):
            if h not in saved[n]:
                logger.removeHandler(h)
                h.close()
    logging.getLogger().setLevel(level)


def test_order_channel_writes_json_lines(tmp_path: Path, clean_loggers):
    setup_logging(tmp_path)
    setup_logging(tmp_path)

    json_handlers = [h for h in logging.getLogger("pos.orders").handlers if isinstance(h.formatter, JsonFormatter)]
    assert len(json_handlers) == 1

    logging.getLogger("pos.orders").info("order_created order_id=%s", 7)
    for h in json_handlers:
        h.flush()

    lines = (tmp_path / "orders.log").read_text(encoding="utf-8").splitlines()
    record = json.loads(lines[-1])
    assert record["logger"] == "pos.orders"
    assert record["message"] == "order_created order_id=7"
    assert record["level"] == "INFO"
    assert (tmp_path / "errors.log").exists()
