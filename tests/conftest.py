import logging

import pytest

from clockit.config import Palette


@pytest.fixture(autouse=True)
def _reset_clockit_logger():
    """The CLI installs handlers on the package logger; drop them between tests."""
    yield
    logger = logging.getLogger("clockit")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.setLevel(logging.NOTSET)


@pytest.fixture
def palette() -> Palette:
    return Palette(
        countdown="cyan",
        stopwatch="green",
        times_up="red",
        ui_text="white",
        pomodoro_work="magenta",
        pomodoro_break="blue",
    )
