"""Executor: 콜백 스타일 연산을 동기/비동기 호출자에게 연결하는 실행 엔진"""

import asyncio
import threading
import time
from dataclasses import dataclass
from typing import Any, Callable, Optional, Tuple

from pydantic import BaseModel, ConfigDict

from paraflow.core.flow import Operation
from paraflow.core.node import ExecutionError
from paraflow.logging import get_logger

logger = get_logger(__name__)


class ExecutionResult(BaseModel):
    """실행 결과"""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    success: bool
    duration: float
    value: Any = None
    error: Any = None

    def raise_for_error(self, node_name: str = "") -> Any:
        """
        성공이면 값을 반환하고, 실패면 예외를 발생시킵니다.

        실패 객체가 예외면 그대로, 아니면 ExecutionError로 감싸서 발생시킵니다.
        """
        if self.success:
            return self.value
        if isinstance(self.error, BaseException):
            raise self.error
        raise ExecutionError(
            f"Operation failed: {self.error!r}",
            node_name=node_name,
            cause=self.error,
        )


@dataclass
class ExecutionPolicy:
    """실행 정책 설정"""
    raise_on_error: bool = False  # True면 실패 시 ExecutionResult 대신 예외 발생

    # 훅 함수들 (옵셔널)
    before_run: Optional[Callable[[Operation], None]] = None
    after_run: Optional[Callable[[Operation, ExecutionResult], None]] = None


def _operation_name(operation: Operation) -> str:
    return getattr(operation, "name", None) or getattr(operation, "__name__", type(operation).__name__)


class Executor:
    """
    콜백 스타일 연산 실행 엔진.

    연산(또는 Serial/Parallel/Map 노드)을 실행하고 완료 콜백이 호출될 때까지
    기다린 뒤 ExecutionResult로 돌려줍니다. 타임아웃은 없습니다: 끝나지 않는
    연산은 호출자를 계속 기다리게 합니다.

    Example:
        executor = Executor()
        result = executor.run(Serial([load, transform]))
        print(result.value)
    """

    def __init__(self, policy: Optional[ExecutionPolicy] = None):
        """
        Args:
            policy: 실행 정책 (None이면 기본 정책 사용)
        """
        self.policy = policy or ExecutionPolicy()

    def run(self, operation: Operation, *inputs: Any) -> ExecutionResult:
        """
        연산을 실행하고 완료될 때까지 현재 스레드를 블록합니다.

        완료 콜백은 어느 스레드에서 호출되어도 됩니다. 이벤트 루프에 묶인
        연산(코루틴 ModuleAdapter 등)은 run_async()를 사용하세요.

        Args:
            operation: 실행할 연산
            *inputs: 연산에 전달할 입력 (한 인자 연산이면 값 하나)

        Returns:
            ExecutionResult: 실행 결과
        """
        finished = threading.Event()
        lock = threading.Lock()
        outcome: list = []

        def done(error: Any = None, value: Any = None) -> None:
            with lock:
                if outcome:
                    return
                outcome.append((error, value))
            finished.set()

        self._before(operation)
        start_time = time.time()
        operation(*inputs, done)
        finished.wait()
        return self._finish(operation, outcome[0], time.time() - start_time)

    async def run_async(self, operation: Operation, *inputs: Any) -> ExecutionResult:
        """
        연산을 실행하고 완료를 await합니다.

        다른 스레드에서 호출된 완료 콜백은 이벤트 루프로 안전하게 전달됩니다.

        Args:
            operation: 실행할 연산
            *inputs: 연산에 전달할 입력

        Returns:
            ExecutionResult: 실행 결과
        """
        loop = asyncio.get_running_loop()
        future: asyncio.Future = loop.create_future()

        def settle(error: Any, value: Any) -> None:
            if not future.done():
                future.set_result((error, value))

        lock = threading.Lock()
        reported = False

        def done(error: Any = None, value: Any = None) -> None:
            nonlocal reported
            # 첫 보고만 루프로 전달한다. 루프가 닫힌 뒤의 중복 보고는 무시
            with lock:
                if reported:
                    return
                reported = True
            loop.call_soon_threadsafe(settle, error, value)

        self._before(operation)
        start_time = time.time()
        operation(*inputs, done)
        outcome = await future
        return self._finish(operation, outcome, time.time() - start_time)

    def _before(self, operation: Operation) -> None:
        logger.debug("execution_started", operation=_operation_name(operation))
        if self.policy.before_run:
            self.policy.before_run(operation)

    def _finish(
        self,
        operation: Operation,
        outcome: Tuple[Any, Any],
        duration: float,
    ) -> ExecutionResult:
        error, value = outcome
        success = error is None
        result = ExecutionResult(
            success=success,
            duration=duration,
            value=value if success else None,
            error=error,
        )

        if success:
            logger.debug("execution_completed", operation=_operation_name(operation), duration=duration)
        else:
            logger.info(
                "execution_failed",
                operation=_operation_name(operation),
                duration=duration,
                error=repr(error),
            )

        if self.policy.after_run:
            self.policy.after_run(operation, result)

        if not success and self.policy.raise_on_error:
            result.raise_for_error(node_name=_operation_name(operation))
        return result
