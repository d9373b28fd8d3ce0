"""Shared helpers for building small React projects on disk."""
from pathlib import Path
from textwrap import dedent

import pytest

from component_extractor.analyzer.parser import LanguageParser


FIXTURES_DIR = Path(__file__).parent / 'fixtures'


def write_files(root: Path, files: dict) -> Path:
    """Write {relative path: source} below root, dedenting each source."""
    for relative, content in files.items():
        path = root / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(dedent(content).lstrip("\n"), encoding="utf-8")
    return root


def parse(code: str, language: str = 'javascript'):
    """Root node of `code` parsed with the given grammar."""
    return LanguageParser(language).parse_source(dedent(code).lstrip("\n")).root_node


@pytest.fixture
def make_project(tmp_path):
    """Factory writing a project under tmp_path/project and returning its root."""
    def _make(files: dict) -> Path:
        return write_files(tmp_path / "project", files)
    return _make


@pytest.fixture
def react_app() -> Path:
    """Checked-in sample React project."""
    return FIXTURES_DIR / 'react_app'
