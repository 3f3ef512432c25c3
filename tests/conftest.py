from __future__ import annotations

import io
import sys
from pathlib import Path
from typing import Dict, List

import pytest

BASE_DIR = Path(__file__).resolve().parent.parent
SRC_DIR = (BASE_DIR / "src").resolve()

if str(BASE_DIR) not in sys.path:
    sys.path.append(str(BASE_DIR))
if str(SRC_DIR) not in sys.path:
    sys.path.append(str(SRC_DIR))

from treelox.evaluator import Interpreter
from treelox.utils import DEBUG_PY_TRACE_ENV


@pytest.fixture
def interpreter() -> Interpreter:
    """Interpreter whose print output and error reports go to in-memory buffers."""
    return Interpreter(out=io.StringIO(), err=io.StringIO())


@pytest.fixture(autouse=True)
def _no_py_trace(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv(DEBUG_PY_TRACE_ENV, raising=False)


def pytest_collection_modifyitems(
    session: pytest.Session,
    config: pytest.Config,
    items: List[pytest.Item],
) -> None:
    """Fail fast if two scenarios share a node id."""
    del session
    del config

    seen: Dict[str, int] = {}
    duplicates: List[str] = []
    for item in items:
        if item.nodeid in seen:
            duplicates.append(item.nodeid)
            continue
        seen[item.nodeid] = 1

    if not duplicates:
        return

    lines = "\n".join(f"- {nodeid}" for nodeid in sorted(set(duplicates)))
    raise pytest.UsageError(f"Duplicate pytest nodeids detected during collection:\n{lines}")
