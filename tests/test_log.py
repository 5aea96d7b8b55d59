import logging

import numpy as np

from composable_fitting import fit
from composable_fitting.log import PACKAGE_LOGGER, setup_logger
from composable_fitting.models import Linear


def test_setup_logger_writes_timestamped_file(tmp_path) -> None:
    log_dir = tmp_path / "logs"
    logger = setup_logger(logging.DEBUG, log_dir=str(log_dir))
    try:
        assert logger.name == PACKAGE_LOGGER
        assert len(logger.handlers) == 2

        # calling again replaces handlers instead of stacking them
        logger = setup_logger(logging.DEBUG, log_dir=str(log_dir))
        assert len(logger.handlers) == 2

        fit(Linear(), np.array([0.0, 1.0, 2.0]), np.array([1.0, 3.0, 5.0]))
        for handler in logger.handlers:
            handler.flush()

        files = sorted(log_dir.glob("fit_*.log"))
        assert files
        text = "".join(f.read_text(encoding="utf-8") for f in files)
        assert "fit start: 3 points, 2 params" in text
    finally:
        for handler in list(logger.handlers):
            logger.removeHandler(handler)
            handler.close()
        logger.setLevel(logging.NOTSET)


def test_fit_emits_debug_records(caplog) -> None:
    with caplog.at_level(logging.DEBUG, logger=PACKAGE_LOGGER):
        fit(Linear(), np.array([0.0, 1.0, 2.0]), np.array([1.0, 3.0, 5.0]))

    messages = [r.getMessage() for r in caplog.records]
    assert any(m.startswith("fit start") for m in messages)
    assert any(m.startswith("fit done") for m in messages)
