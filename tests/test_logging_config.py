"""
로깅 설정 tests

테스트 범위:
  - 반복 호출 시 핸들러가 쌓이지 않음
  - 파일 핸들러 기록, 레벨 이름 해석
  - 다른 곳에서 붙인 핸들러 보존
"""
import logging

import pytest

from plonkish import logging_config
from plonkish.logging_config import LOGGER_NAME, setup_logging


@pytest.fixture
def plonkish_logger():
    logger = logging.getLogger(LOGGER_NAME)
    level = logger.level
    yield logger
    for handler in list(logging_config._installed):
        logger.removeHandler(handler)
        handler.close()
    logging_config._installed.clear()
    logger.setLevel(level)


# ─────────────────────────────────────────────────────────────────────
# 핸들러
# ─────────────────────────────────────────────────────────────────────

class TestHandlers:
    def test_repeated_setup_does_not_stack(self, plonkish_logger):
        setup_logging("INFO")
        first = len(plonkish_logger.handlers)
        setup_logging("INFO")
        setup_logging("DEBUG")
        assert len(plonkish_logger.handlers) == first

    def test_foreign_handler_kept(self, plonkish_logger):
        """다른 곳에서 붙인 핸들러는 다시 설정해도 남는다."""
        foreign = logging.NullHandler()
        plonkish_logger.addHandler(foreign)
        try:
            setup_logging("INFO")
            setup_logging("INFO")
            assert foreign in plonkish_logger.handlers
        finally:
            plonkish_logger.removeHandler(foreign)

    def test_file_handler_writes(self, plonkish_logger, tmp_path):
        path = tmp_path / "plonkish.log"
        setup_logging("INFO", log_file=str(path))
        logging.getLogger("plonkish.backend.verifier").info("Proof accepted")
        assert "Proof accepted" in path.read_text(encoding="utf-8")

    def test_child_below_level_not_written(self, plonkish_logger, tmp_path):
        path = tmp_path / "plonkish.log"
        setup_logging("WARNING", log_file=str(path))
        logging.getLogger("plonkish.backend.keygen").info("keys generated")
        assert "keys generated" not in path.read_text(encoding="utf-8")


# ─────────────────────────────────────────────────────────────────────
# 레벨
# ─────────────────────────────────────────────────────────────────────

class TestLevel:
    @pytest.mark.parametrize("level, expected", [
        ("debug", logging.DEBUG),
        ("WARNING", logging.WARNING),
        (logging.ERROR, logging.ERROR),
    ])
    def test_level_names(self, plonkish_logger, level, expected):
        assert setup_logging(level).level == expected

    def test_default_level_from_config(self, plonkish_logger, monkeypatch):
        monkeypatch.setattr(logging_config.config, "LOG_LEVEL", "ERROR")
        assert setup_logging().level == logging.ERROR

    def test_unknown_level(self, plonkish_logger):
        with pytest.raises(ValueError):
            setup_logging("LOUD")
