from __future__ import annotations

import os
import sys
from pathlib import Path

import pytest

_REPO_ROOT = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(_REPO_ROOT))

# Qt must not try to open a display while tests run
os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

from scene_doubles import FakeScene  # noqa: E402


@pytest.fixture(scope="session")
def qapp():
    from PySide6.QtWidgets import QApplication

    app = QApplication.instance() or QApplication([])
    yield app


@pytest.fixture
def scene() -> FakeScene:
    """A 1000x500 scene with a few boxes laid out left to right."""
    fake = FakeScene(width=1000, height=500)
    fake.add("a", 0, 0, 100, 50)
    fake.add("b", 200, 100, 100, 50)
    fake.add("c", 400, 200, 200, 100)
    fake.add("group", 0, 0, 600, 300)
    fake.add("p1", 10, 10, 5, 5, parent="group", tag="path", style={"fill": "red"})
    fake.add("p2", 20, 20, 5, 5, parent="group", tag="path")
    return fake


@pytest.fixture
def repo_root() -> Path:
    return _REPO_ROOT
