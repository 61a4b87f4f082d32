"""간단한 사용 예제"""

import sys
import threading
import random
from pathlib import Path

# 프로젝트 루트를 sys.path에 추가
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from paraflow import Serial, Parallel, Map, ModuleAdapter, Executor, serial


def later(done, error=None, value=None):
    """임의의 지연 후 done(error, value)를 호출합니다"""
    threading.Timer(random.uniform(0.05, 0.2), done, args=(error, value)).start()


def load_x(done):
    print("[LoadX] x = 5")
    later(done, value=5)


def add_ten(x, done):
    print(f"[AddTen] {x} + 10 = {x + 10}")
    later(done, value=x + 10)


def list_ids(done):
    later(done, value=[3, 1, 2])


def square(x):
    return x ** 2


def main():
    """간단한 플로우 예제"""

    print("=" * 60)
    print("paraflow 간단한 플로우 예제")
    print("=" * 60)

    # 콜백 스타일 러너 직접 사용
    finished = threading.Event()

    def on_serial(error, value):
        print(f"\n[serial] error={error}, value={value}")
        finished.set()

    serial([load_x, add_ten, add_ten], on_serial)
    finished.wait()

    # 노드 조합 + Executor
    # 1. Parallel: [x, ids]
    # 2. Serial: ids → Map(square)
    pipeline = Parallel([
        Serial([load_x, add_ten], name="PathA"),
        Serial([list_ids, Map(ModuleAdapter(square))], name="PathB"),
    ], name="SimplePipeline")

    executor = Executor()
    result = executor.run(pipeline)

    print("\n[실행 결과]")
    print(f"Success: {result.success}")
    print(f"Duration: {result.duration:.3f}초")
    print(f"Value: {result.value}")

    result = executor.run(Map(add_ten), [1, 2, 3])
    print(f"Map Value: {result.value}")

    print("\n" + "=" * 60)


if __name__ == "__main__":
    main()
