import sys
from pathlib import Path
from typing import Any, List

import pytest

# Ensure 'src' is on sys.path for test imports without installing the package
ROOT = Path(__file__).resolve().parents[1]
src = ROOT / "src"
if str(src) not in sys.path:
    sys.path.insert(0, str(src))

from emitter import Emitter, create  # noqa: E402


class Recorder:
    """Listener that remembers every payload it was called with."""

    def __init__(self, name: str = "recorder") -> None:
        self.__name__ = name
        self.calls: List[Any] = []

    def __call__(self, payload: Any) -> None:
        self.calls.append(payload)

    @property
    def call_count(self) -> int:
        return len(self.calls)


@pytest.fixture()
def emitter() -> Emitter:
    return create()


@pytest.fixture()
def make_listener():
    return Recorder
