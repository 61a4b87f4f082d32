"""ResultAggregator: 병렬 실행 결과를 원래 순서대로 모으는 집계기"""

from threading import RLock
from typing import Any, Callable, Dict, List, Optional

from paraflow.logging import get_logger

logger = get_logger(__name__)

Callback = Callable[[Any, Any], None]


class ResultAggregator:
    """
    parallel/map 한 번의 실행에 대한 완료 상태를 관리합니다.

    각 위치(index)에 대한 완료 콜백을 발급하고, 도착 순서와 상관없이
    결과를 원래 위치에 채웁니다. 최종 콜백은 정확히 한 번만 호출됩니다.

    완료 콜백은 다른 스레드에서 호출될 수 있으므로 슬롯 기록과
    "이미 호출됨" 래치는 RLock으로 보호합니다.
    """

    def __init__(self, size: int, callback: Callback):
        """
        Args:
            size: 전체 슬롯 수 (입력 컬렉션 크기)
            callback: 최종 콜백 callback(error, results)
        """
        self._size = size
        self._callback = callback
        self._slots: Optional[Dict[int, Any]] = {}
        self._completed = 0
        self._fired = False
        self._lock = RLock()

    @property
    def size(self) -> int:
        return self._size

    @property
    def completed(self) -> int:
        """채워진 슬롯 수"""
        with self._lock:
            return self._completed

    @property
    def fired(self) -> bool:
        with self._lock:
            return self._fired

    def slot(self, index: int) -> Callable[..., None]:
        """index 위치의 결과를 기록하는 완료 콜백을 반환합니다."""

        def done(error: Any = None, value: Any = None) -> None:
            if error is not None:
                self._fail(index, error)
            else:
                self._record(index, value)

        return done

    def _fail(self, index: int, error: Any) -> None:
        with self._lock:
            if self._fired:
                logger.debug("aggregator_failure_dropped", index=index)
                return
            self._fired = True
            self._slots = None

        logger.debug("aggregator_failed", index=index, size=self._size)
        self._callback(error, [])

    def _record(self, index: int, value: Any) -> None:
        with self._lock:
            if self._fired:
                return
            self._slots[index] = value
            self._completed = len(self._slots)
            if self._completed != self._size:
                return
            self._fired = True
            results: List[Any] = [self._slots[i] for i in range(self._size)]
            self._slots = None

        logger.debug("aggregator_completed", size=self._size)
        self._callback(None, results)

    def __repr__(self) -> str:
        return (
            f"ResultAggregator(size={self._size}, completed={self.completed}, "
            f"fired={self.fired})"
        )
