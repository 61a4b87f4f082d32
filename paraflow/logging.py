"""Structured logging with structlog."""

import logging
import sys
from functools import lru_cache

import structlog

from paraflow.config import get_settings


def configure_logging() -> None:
    """
    structlog를 표준 logging 위에 설정합니다.

    라이브러리는 import 시점에 로깅을 설정하지 않습니다. 애플리케이션에서
    필요할 때 한 번 호출하세요.
    """
    settings = get_settings()

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=getattr(logging, settings.log_level),
    )
    logging.getLogger("paraflow").setLevel(settings.log_level)

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.add_logger_name,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        cache_logger_on_first_use=True,
    )

    if settings.log_format == "json":
        formatter = structlog.stdlib.ProcessorFormatter(
            processor=structlog.processors.JSONRenderer(),
        )
    else:
        formatter = structlog.stdlib.ProcessorFormatter(
            processor=structlog.dev.ConsoleRenderer(colors=False),
        )

    for handler in logging.root.handlers:
        handler.setFormatter(formatter)


@lru_cache(maxsize=100)
def get_logger(name: str):
    """
    stdlib 로거를 감싼 structlog 로거를 반환합니다.

    configure_logging()을 호출하지 않은 애플리케이션에서는 stdlib 레벨 설정을
    그대로 따르므로 디버그 이벤트가 출력되지 않습니다.
    """
    return structlog.wrap_logger(logging.getLogger(name))
