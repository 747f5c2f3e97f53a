import io

from utils.logger import Logger, LogCategory, LogLevel


def _logger(level=LogLevel.INFO):
    stream = io.StringIO()
    return Logger(min_level=level, use_colors=False, stream=stream), stream


def test_message_and_details_tree():
    logger, stream = _logger()

    logger.info(LogCategory.EFFECT, "Effect started", effect="PULSE", run=3)

    lines = stream.getvalue().splitlines()
    assert "EFFECT" in lines[0]
    assert "Effect started" in lines[0]
    assert lines[1].strip() == "├─ effect: PULSE"
    assert lines[2].strip() == "└─ run: 3"


def test_level_filtering():
    logger, stream = _logger(LogLevel.WARN)

    logger.info(LogCategory.DEVICE, "hidden")
    logger.debug(LogCategory.DEVICE, "hidden too")
    logger.error(LogCategory.DEVICE, "shown")

    output = stream.getvalue()
    assert "hidden" not in output
    assert "shown" in output


def test_exception_detail():
    logger, stream = _logger()

    logger.error(LogCategory.SEQUENCER, "Step failed", exc=ConnectionError("bridge down"))

    assert "error: ConnectionError: bridge down" in stream.getvalue()
    assert "Traceback" not in stream.getvalue()


def test_traceback_at_debug():
    logger, stream = _logger(LogLevel.DEBUG)
    try:
        raise ValueError("boom")
    except ValueError as exc:
        logger.error(LogCategory.EFFECT, "Failed", exc=exc)

    assert "Traceback" in stream.getvalue()


def test_bound_logger_uses_category():
    logger, stream = _logger()
    bound = logger.for_category(LogCategory.CONFIG)

    bound.warn("Falling back")
    bound.with_category(LogCategory.TASK).info("Pruned")

    lines = stream.getvalue().splitlines()
    assert "CONFIG" in lines[0]
    assert "TASK" in lines[1]


def test_no_ansi_codes_without_colors():
    logger, stream = _logger()
    logger.info(LogCategory.GENERAL, "plain")
    assert "\033[" not in stream.getvalue()
