"""
Tests for command-line parsing and logging setup.
"""
import logging

from wobblewall.app.main import parse_args
from wobblewall.logging_config import setup_logging


class TestParseArgs:

    def test_defaults(self):
        args = parse_args([])
        assert args.debug is False
        assert args.log_file is None
        assert args.single is False

    def test_flags(self):
        args = parse_args(["--debug", "--single", "--log-file", "run.log"])
        assert args.debug and args.single
        assert args.log_file == "run.log"

    def test_qt_options_are_ignored(self):
        args = parse_args(["-platform", "offscreen", "--single"])
        assert args.single is True


class TestLogging:

    def test_repeated_setup_does_not_duplicate_handlers(self, tmp_path):
        log_file = tmp_path / "wobblewall.log"
        setup_logging(logging.DEBUG)
        setup_logging(logging.DEBUG, log_file=str(log_file))

        logger = logging.getLogger("wobblewall")
        try:
            assert len(logger.handlers) == 2
            assert logger.level == logging.DEBUG
            logging.getLogger("wobblewall.model.clock").debug("frame")
            for handler in logger.handlers:
                handler.flush()
            assert "wobblewall.model.clock - DEBUG - frame" in log_file.read_text(encoding="utf-8")
        finally:
            for handler in list(logger.handlers):
                handler.close()
                logger.removeHandler(handler)
            logger.setLevel(logging.NOTSET)
