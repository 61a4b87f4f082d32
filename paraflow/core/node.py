"""Node 추상화: Composite 패턴으로 Serial/Parallel/Map 플로우 정의"""

from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional, Sequence

from paraflow.core import flow
from paraflow.core.flow import Done, Operation
from paraflow.logging import get_logger

logger = get_logger(__name__)


class ExecutionError(Exception):
    """플로우 실행 실패를 예외로 보고할 때 사용하는 에러"""

    def __init__(self, message: str, node_name: str, cause: Optional[Any] = None):
        super().__init__(message)
        self.node_name = node_name
        self.cause = cause


class Node(ABC):
    """
    플로우 노드의 기본 추상 클래스.

    모든 노드는 그 자체로 콜백 스타일 연산입니다. 따라서 러너에 직접
    넘기거나 다른 노드의 자식으로 중첩할 수 있습니다.
    """

    def __init__(self, name: Optional[str] = None, metadata: Optional[Dict[str, Any]] = None):
        """
        Args:
            name: 노드 이름 (디버깅/로깅용)
            metadata: 추가 메타데이터
        """
        self.name = name or self.__class__.__name__
        self.metadata = metadata or {}

    @abstractmethod
    def __call__(self, *args: Any) -> None:
        """
        노드를 실행합니다. 마지막 인자는 항상 완료 콜백 done(error, value)입니다.
        """

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(name='{self.name}')"


class Serial(Node):
    """
    순차 실행 노드.

    자식 연산을 순서대로 실행하고 앞 스텝의 결과를 다음 스텝에 넘깁니다.
    입력을 받지 않는 연산(node(done))입니다.
    """

    def __init__(self, children: Sequence[Operation], name: Optional[str] = None, **kwargs):
        super().__init__(name=name or "Serial", **kwargs)
        self.children: List[Operation] = list(children)

    def __call__(self, done: Done) -> None:
        logger.debug("node_started", node=self.name, kind="serial", children=len(self.children))
        flow.serial(self.children, done)


class Parallel(Node):
    """
    병렬 실행 노드.

    자식 연산을 모두 동시에 시작하고 결과를 원래 순서의 리스트로 돌려줍니다.
    입력을 받지 않는 연산(node(done))입니다.
    """

    def __init__(self, children: Sequence[Operation], name: Optional[str] = None, **kwargs):
        super().__init__(name=name or "Parallel", **kwargs)
        self.children: List[Operation] = list(children)

    def __call__(self, done: Done) -> None:
        logger.debug("node_started", node=self.name, kind="parallel", children=len(self.children))
        flow.parallel(self.children, done)


class Map(Node):
    """
    매핑 노드.

    값 시퀀스를 입력으로 받아(node(values, done)) 같은 연산을 각 값에
    동시에 적용합니다. Serial 안에서 앞 스텝의 리스트 결과를 펼칠 때 씁니다.

    예제:
        ```python
        Serial([fetch_ids, Map(fetch_item)])
        ```
    """

    def __init__(self, operation: Operation, name: Optional[str] = None, **kwargs):
        label = getattr(operation, "name", None) or getattr(operation, "__name__", type(operation).__name__)
        super().__init__(name=name or f"Map[{label}]", **kwargs)
        self.operation = operation

    def __call__(self, values: Sequence[Any], done: Done) -> None:
        logger.debug("node_started", node=self.name, kind="map", values=len(values))
        flow.map(values, self.operation, done)

    def __repr__(self) -> str:
        return f"Map(name='{self.name}', operation={self.operation!r})"
