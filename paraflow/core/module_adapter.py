"""ModuleAdapter: 일반 함수를 콜백 스타일 연산으로 래핑하는 Strategy 패턴"""

import asyncio
import inspect
from concurrent.futures import Future, ThreadPoolExecutor
from threading import Lock
from typing import Any, Callable, Optional, Set

from paraflow.config import get_settings
from paraflow.core.flow import Done
from paraflow.core.node import Node
from paraflow.logging import get_logger

logger = get_logger(__name__)

_thread_pool: Optional[ThreadPoolExecutor] = None
_thread_pool_lock = Lock()


def get_thread_pool() -> ThreadPoolExecutor:
    """동기 함수 실행에 쓰는 공유 스레드 풀을 반환합니다."""
    global _thread_pool
    with _thread_pool_lock:
        if _thread_pool is None:
            _thread_pool = ThreadPoolExecutor(
                max_workers=get_settings().adapter_max_workers,
                thread_name_prefix="paraflow",
            )
        return _thread_pool


def shutdown_thread_pool(wait: bool = True) -> None:
    """공유 스레드 풀을 종료합니다. 다음 사용 시 새로 만들어집니다."""
    global _thread_pool
    with _thread_pool_lock:
        pool, _thread_pool = _thread_pool, None
    if pool is not None:
        pool.shutdown(wait=wait)


class ModuleAdapter(Node):
    """
    사용자 정의 함수를 콜백 스타일 연산으로 래핑합니다.

    - 반환값은 성공 값으로 done(None, result)에 전달됩니다.
    - 발생한 Exception은 그 객체 그대로 실패로 done(error)에 전달됩니다.

    동기/비동기 함수 모두 지원합니다:
    1. async def func(...)  # 실행 중인 이벤트 루프에 태스크로 예약
    2. def func(...)        # threaded=True면 공유 스레드 풀, 아니면 호출 스레드에서 실행

    예제:
        ```python
        async def fetch(url):
            ...

        map(urls, ModuleAdapter(fetch), callback)
        ```
    """

    def __init__(
        self,
        func: Callable[..., Any],
        name: Optional[str] = None,
        threaded: bool = True,
        **kwargs: Any,
    ):
        """
        Args:
            func: 래핑할 함수 (동기 또는 비동기)
            name: 노드 이름 (기본값은 함수 이름)
            threaded: 동기 함수를 스레드 풀에서 실행할지 여부
            **kwargs: 함수에 매번 전달할 추가 인자 (metadata는 Node 인자)
        """
        metadata = kwargs.pop("metadata", None)
        super().__init__(name=name or getattr(func, "__name__", "ModuleAdapter"), metadata=metadata)
        self.func = func
        self.func_kwargs = kwargs
        self.threaded = threaded
        self.is_async = inspect.iscoroutinefunction(func)
        # 실행 중인 태스크가 GC되지 않도록 참조를 유지
        self._tasks: Set[asyncio.Task] = set()

    def __call__(self, *args: Any) -> None:
        *inputs, done = args
        if self.is_async:
            self._run_async_impl(inputs, done)
        elif self.threaded:
            self._run_threaded_impl(inputs, done)
        else:
            self._run_sync_impl(inputs, done)

    def _run_sync_impl(self, inputs, done: Done) -> None:
        """호출 스레드에서 바로 실행"""
        try:
            result = self.func(*inputs, **self.func_kwargs)
        except Exception as e:
            logger.debug("adapter_failed", node=self.name, error=repr(e))
            done(e)
            return
        done(None, result)

    def _run_threaded_impl(self, inputs, done: Done) -> None:
        """공유 스레드 풀에서 실행"""
        future = get_thread_pool().submit(self.func, *inputs, **self.func_kwargs)

        def on_complete(f: Future) -> None:
            error = f.exception()
            if error is not None:
                logger.debug("adapter_failed", node=self.name, error=repr(error))
                done(error)
            else:
                done(None, f.result())

        future.add_done_callback(on_complete)

    def _run_async_impl(self, inputs, done: Done) -> None:
        """실행 중인 이벤트 루프에 태스크로 예약"""
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            raise RuntimeError(
                f"ModuleAdapter '{self.name}' wraps a coroutine function and "
                "must be invoked from a running event loop"
            ) from None

        task = loop.create_task(self.func(*inputs, **self.func_kwargs))
        self._tasks.add(task)

        def on_complete(t: asyncio.Task) -> None:
            self._tasks.discard(t)
            if t.cancelled():
                done(asyncio.CancelledError())
                return
            error = t.exception()
            if error is not None:
                logger.debug("adapter_failed", node=self.name, error=repr(error))
                done(error)
            else:
                done(None, t.result())

        task.add_done_callback(on_complete)

    def __repr__(self) -> str:
        return (
            f"ModuleAdapter(name='{self.name}', func={getattr(self.func, '__name__', self.func)!r}, "
            f"async={self.is_async}, threaded={self.threaded})"
        )
