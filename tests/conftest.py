"""
Shared pytest configuration.

Puts the repository root on sys.path so the top-level modules import
without installation, and keeps root logger handlers from leaking
between tests that call configure_logging().
"""

import logging
import os
import sys
from pathlib import Path

import pytest

_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if _ROOT not in sys.path:
    sys.path.insert(0, _ROOT)


@pytest.fixture(autouse=True)
def _restore_root_logger():
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)


@pytest.fixture
def notes_tree(tmp_path: Path) -> Path:
    """A small notes folder with nested markdown, excluded folders and non-markdown files."""
    root = tmp_path / "notes"
    (root / "closures").mkdir(parents=True)
    (root / "types" / "coercion").mkdir(parents=True)
    (root / "node_modules" / "pkg").mkdir(parents=True)
    (root / ".git").mkdir()
    (root / "dist").mkdir()

    (root / "README.md").write_text("# JavaScript Notes\n\nIndex of topics.\n", encoding="utf-8")
    (root / "closures" / "scope.md").write_text("# Lexical Scope\n\n`let` is block scoped.\n", encoding="utf-8")
    (root / "types" / "coercion" / "equality.md").write_text("No heading here.\n", encoding="utf-8")
    (root / "types" / "notes.txt").write_text("# not markdown", encoding="utf-8")
    (root / "node_modules" / "pkg" / "README.md").write_text("# Package", encoding="utf-8")
    (root / ".git" / "HEAD.md").write_text("# hidden", encoding="utf-8")
    (root / "dist" / "old.md").write_text("# stale output", encoding="utf-8")
    (root / ".draft.md").write_text("# draft", encoding="utf-8")
    return root
