"""
Trellis Test Configuration and Fixtures.

Provides shared fixtures for unit and integration tests.
"""

import os
import tempfile
from pathlib import Path
from typing import Any

import pytest

from trellis.core.config import LayoutConfig, TrellisConfig
from trellis.core.graph_model import GraphModel
from trellis.core.layout_engine import LayoutEngine

# Qt tests run without a display
os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")


# =============================================================================
# Temporary Directory Fixtures
# =============================================================================

@pytest.fixture
def temp_dir():
    """Provide a temporary directory for test files."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def temp_file(temp_dir):
    """Provide a factory for creating temporary files."""

    def _create_file(name: str, content: str = "") -> Path:
        path = temp_dir / name
        path.write_text(content)
        return path

    yield _create_file


# =============================================================================
# Core Fixtures
# =============================================================================

@pytest.fixture
def graph():
    """Provide an empty graph model."""
    return GraphModel()


@pytest.fixture
def layout_config():
    """Provide the default layout configuration."""
    return LayoutConfig()


@pytest.fixture
def engine(graph, layout_config):
    """Provide a layout engine that never yields to the event loop."""
    return LayoutEngine(graph, layout_config, yield_control=False)


@pytest.fixture
def config():
    """Provide the default configuration."""
    return TrellisConfig()


# =============================================================================
# Sample Data Fixtures
# =============================================================================

@pytest.fixture
def nested_document() -> dict[str, Any]:
    """Provide a document mixing objects, arrays and scalars."""
    return {
        "project": {
            "name": "trellis",
            "tags": ["json", "layout", "tree"],
            "owner": {"team": "graphics", "active": True},
        },
        "version": 3,
        "empty": {},
        "nothing": None,
        "list": [],
    }


@pytest.fixture
def wide_document() -> dict[str, Any]:
    """Provide a document whose subtrees collide before arrangement."""
    return {
        "A": {"x": [1, 2, 3, 4, 5], "y": [6, 7, 8, 9]},
        "B": {"z": [10, 11, 12, 13, 14, 15]},
        "C": ["p", "q"],
    }



# =============================================================================
# GUI Fixtures
# =============================================================================

@pytest.fixture
def qtbot_or_skip(request):
    """
    Provide qtbot if pytest-qt is available, otherwise skip test.
    """
    import importlib.util
    if importlib.util.find_spec("pytestqt") is None:
        pytest.skip("pytest-qt not available")
    return request.getfixturevalue("qtbot")
