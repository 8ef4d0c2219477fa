"""
로깅 설정
=========

``plonkish`` 로거 하나에 콘솔 핸들러(와 선택적으로 파일 핸들러)를 붙인다.
하위 모듈은 ``logging.getLogger(__name__)`` 만 쓰고, 출력 위치는 여기서 정한다.

  keygen / prover / verifier  ──▶  logger "plonkish.backend.*"
                                      │ (전파)
                                      ▼
                               logger "plonkish"  ──▶ stdout
                                                  └─▶ LOG_FILE (있을 때)

레벨과 파일 경로의 기본값은 ``config.LOG_LEVEL`` / ``config.LOG_FILE`` 이다.
웹 앱 팩토리와 예제 스크립트가 시작할 때 한 번 부른다.
"""
import logging
import sys

from plonkish import config

LOGGER_NAME = "plonkish"

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
DATE_FORMAT = "%H:%M:%S"

# 이 모듈이 붙인 핸들러. 다시 부르면 이것만 교체한다.
_installed = []


def _level_of(level):
    """"DEBUG" 같은 이름이나 정수 레벨을 정수로."""
    if isinstance(level, int):
        return level
    value = logging.getLevelName(str(level).upper())
    if not isinstance(value, int):
        raise ValueError(f"알 수 없는 로그 레벨입니다: {level}")
    return value


def setup_logging(level=None, log_file=None):
    """``plonkish`` 로거를 설정하고 돌려준다.

    Args:
        level: 레벨 이름 또는 정수. None 이면 config.LOG_LEVEL
        log_file: 로그 파일 경로. None 이면 config.LOG_FILE

    여러 번 불러도 핸들러가 쌓이지 않는다. 다른 곳에서 붙인 핸들러는 건드리지 않는다.
    """
    level = _level_of(config.LOG_LEVEL if level is None else level)
    log_file = config.LOG_FILE if log_file is None else log_file

    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level)

    while _installed:
        handler = _installed.pop()
        logger.removeHandler(handler)
        handler.close()

    formatter = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)
    handlers = [logging.StreamHandler(sys.stdout)]
    if log_file:
        handlers.append(logging.FileHandler(log_file, encoding="utf-8"))

    for handler in handlers:
        handler.setLevel(level)
        handler.setFormatter(formatter)
        logger.addHandler(handler)
        _installed.append(handler)

    logger.debug("logging ready: level=%s file=%s", logging.getLevelName(level), log_file)
    return logger
