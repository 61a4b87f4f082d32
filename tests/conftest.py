"""Pytest configuration and fixtures."""

import random
import threading

import pytest

from paraflow.config import reset_settings

MIN_DELAY = 0.01
MAX_DELAY = 0.04


class Recorder:
    """완료 콜백 호출을 기록하는 스파이"""

    def __init__(self):
        self.calls = []
        self._lock = threading.Lock()
        self._event = threading.Event()

    def __call__(self, error=None, value=None):
        with self._lock:
            self.calls.append((error, value))
        self._event.set()

    def wait(self, timeout: float = 5.0):
        assert self._event.wait(timeout), "callback was never called"
        return self.calls[0]

    @property
    def called(self) -> bool:
        return self._event.is_set()


def random_delay() -> float:
    return random.uniform(MIN_DELAY, MAX_DELAY)


def later(delay, done, error=None, value=None):
    threading.Timer(delay, done, args=(error, value)).start()


def source(value=None, error=None, delay=None, log=None, name=None):
    """done만 받는 연산: 지연 후 done(error, value)"""

    def op(done):
        if log is not None:
            log.append(("start", name))
        later(random_delay() if delay is None else delay, done, error, value)

    return op


def echo(error=None, delay=None, failed_value=None, log=None, name=None):
    """(value, done)을 받는 연산: 지연 후 입력 값을 그대로 돌려줌"""

    def op(value, done):
        op.inputs.append(value)
        if log is not None:
            log.append(("start", name))
        failed = error if failed_value is None or value == failed_value else None
        later(random_delay() if delay is None else delay, done, failed, value)

    op.inputs = []
    return op


def immediate(value=None, error=None):
    """호출 중에 바로 완료하는 연산"""

    def op(*args):
        done = args[-1]
        done(error, value)

    return op


@pytest.fixture
def recorder():
    return Recorder()


@pytest.fixture(autouse=True)
def clean_settings(monkeypatch):
    """테스트마다 설정 캐시와 PARAFLOW_ 환경 변수를 초기화합니다."""
    for key in ("PARAFLOW_LOG_LEVEL", "PARAFLOW_LOG_FORMAT", "PARAFLOW_ADAPTER_MAX_WORKERS"):
        monkeypatch.delenv(key, raising=False)
    reset_settings()
    yield
    reset_settings()

