"""Flow: 콜백 스타일 비동기 연산을 위한 serial / parallel / map 러너"""

from threading import Lock
from typing import Any, Callable, Optional, Sequence, Tuple

from paraflow.core.aggregator import ResultAggregator
from paraflow.logging import get_logger

logger = get_logger(__name__)

# done(error, value): error가 None이면 성공
Done = Callable[..., None]
Callback = Callable[[Any, Any], None]
Operation = Callable[..., None]


class _SerialRun:
    """
    serial() 한 번의 실행 상태.

    스텝이 자기 호출 안에서 동기적으로 완료되면 재귀 대신 드라이버 루프가
    다음 스텝을 이어서 호출합니다. 따라서 긴 동기 체인도 스택을 쌓지 않습니다.
    """

    def __init__(self, steps: Sequence[Operation], callback: Callback):
        self.steps = steps
        self.callback = callback
        self.index = 0
        self._lock = Lock()
        self._calling = False
        self._captured: Optional[Tuple[Any, Any]] = None

    def start(self) -> None:
        self._drive(self._invoke(self.steps[0]))

    def done(self, error: Any = None, value: Any = None) -> None:
        with self._lock:
            if self._calling:
                # 스텝 호출이 아직 반환되지 않음: 드라이버가 이어받는다
                self._captured = (error, value)
                return
        # 완료 콜백에서 이어받은 드라이버: 스텝 예외를 받을 호출자가 없다
        self._drive((error, value), propagate=False)

    def _invoke(self, step: Operation, *inputs: Any) -> Optional[Tuple[Any, Any]]:
        """스텝을 호출하고, 호출 중에 완료되었다면 그 결과를 반환합니다."""
        with self._lock:
            self._calling = True
            self._captured = None
        try:
            step(*inputs, self.done)
        finally:
            with self._lock:
                self._calling = False
                captured, self._captured = self._captured, None
        return captured

    def _drive(self, outcome: Optional[Tuple[Any, Any]], propagate: bool = True) -> None:
        while outcome is not None:
            error, value = outcome
            if error is not None:
                logger.debug("serial_step_failed", index=self.index, steps=len(self.steps))
                self.callback(error, value)
                return
            if self.index == len(self.steps) - 1:
                logger.debug("serial_completed", steps=len(self.steps))
                self.callback(None, value)
                return
            self.index += 1
            try:
                outcome = self._invoke(self.steps[self.index], value)
            except Exception as e:
                if propagate:
                    raise
                logger.debug("serial_step_raised", index=self.index, error=repr(e))
                outcome = (e, None)


def serial(steps: Sequence[Operation], callback: Callback) -> None:
    """
    스텝들을 순서대로 하나씩 실행합니다.

    첫 스텝은 step(done)으로, 이후 스텝은 step(previous_value, done)으로
    호출됩니다. 실패한 스텝이 있으면 즉시 중단하고 callback(error, value)를
    호출하며, 모두 성공하면 callback(None, last_value)를 호출합니다.
    완료 콜백에서 이어 호출된 스텝이 예외를 던지면 그 예외가 해당 스텝의
    실패로 callback(error, None)에 전달됩니다.

    Args:
        steps: 순차 실행할 연산 시퀀스
        callback: 최종 콜백 callback(error, value)
    """
    if not steps:
        callback(None, None)
        return

    _SerialRun(steps, callback).start()


def parallel(operations: Sequence[Operation], callback: Callback) -> None:
    """
    모든 연산을 즉시 동시에 시작하고, 결과를 원래 순서대로 모읍니다.

    각 연산은 op(done)으로 호출됩니다. 모두 성공하면
    callback(None, results)를, 하나라도 실패하면 가장 먼저 도착한 실패로
    callback(error, [])를 한 번만 호출합니다.

    Args:
        operations: 병렬 실행할 연산 시퀀스
        callback: 최종 콜백 callback(error, results)
    """
    if not operations:
        callback(None, [])
        return

    aggregator = ResultAggregator(len(operations), callback)
    logger.debug("parallel_started", size=len(operations))
    for index, operation in enumerate(operations):
        operation(aggregator.slot(index))


def map(values: Sequence[Any], operation: Operation, callback: Callback) -> None:
    """
    하나의 연산을 각 값에 동시에 적용합니다.

    operation(value, done)이 값 순서대로 호출되며, 결과와 실패 처리는
    parallel()과 같습니다.

    Args:
        values: 입력 값 시퀀스
        operation: 각 값에 적용할 연산
        callback: 최종 콜백 callback(error, results)
    """
    if not values:
        callback(None, [])
        return

    aggregator = ResultAggregator(len(values), callback)
    logger.debug("map_started", size=len(values))
    for index, value in enumerate(values):
        operation(value, aggregator.slot(index))
