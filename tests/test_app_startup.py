"""Startup smoke test

Verifies that the Streamlit app can import all its project dependencies
without crashing.  Catches missing names in the import chain before a
deployment does.

Run as part of the normal test suite:
    pytest tests/test_app_startup.py -v
"""
from __future__ import annotations

import ast
import importlib
import sys
from pathlib import Path
from typing import List, Tuple

import pytest

PROJECT_ROOT = Path(__file__).resolve().parent.parent
APP_FILE = PROJECT_ROOT / "src" / "app" / "streamlit_app.py"
PROJECT_PACKAGES = ("src.", "briquette")


def _extract_project_imports(source: str) -> List[Tuple[str, List[str]]]:
    """Parse all 'from src.X / briquette.X import Y' statements from source."""
    tree = ast.parse(source)
    imports = []
    for node in ast.walk(tree):
        if isinstance(node, ast.ImportFrom) and node.module:
            if node.module.startswith(PROJECT_PACKAGES):
                names = [alias.name for alias in node.names]
                imports.append((node.module, names))
    return imports


class TestAppStartup:
    """Verify that every project import used by streamlit_app.py resolves."""

    @pytest.fixture(autouse=True)
    def _ensure_project_root_on_path(self) -> None:
        root = str(PROJECT_ROOT)
        if root not in sys.path:
            sys.path.insert(0, root)

    def test_app_imports_found(self) -> None:
        imports = _extract_project_imports(APP_FILE.read_text(encoding="utf-8"))
        assert imports

    def test_all_project_modules_importable(self) -> None:
        imports = _extract_project_imports(APP_FILE.read_text(encoding="utf-8"))
        modules = {mod for mod, _names in imports}

        failures = []
        for mod in sorted(modules):
            try:
                importlib.import_module(mod)
            except ImportError as exc:
                failures.append(f"{mod}: {exc}")

        assert not failures, (
            "These modules failed to import:\n" + "\n".join(failures)
        )

    def test_all_names_importable(self) -> None:
        imports = _extract_project_imports(APP_FILE.read_text(encoding="utf-8"))

        failures = []
        for mod_name, names in imports:
            try:
                mod = importlib.import_module(mod_name)
            except ImportError:
                continue
            for name in names:
                if not hasattr(mod, name):
                    failures.append(f"{mod_name}.{name} does not exist")

        assert not failures, (
            "These names are imported but do not exist:\n" + "\n".join(failures)
        )

    def test_version_module(self) -> None:
        from src.app.version import APP_VERSION, version_label
        from briquette import __version__

        assert APP_VERSION == __version__
        label = version_label()
        assert label.startswith(f"v{APP_VERSION} (")
