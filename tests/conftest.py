import os
import pytest
from pathlib import Path

from cssmdoc.config import Config

FIXTURES_DIR = Path(__file__).parent / 'fixtures'
MOCK_PROJECT = (FIXTURES_DIR / 'mock_project').resolve()

CSSMDOC_ENV_VARS = [
    'CSSMDOC_IGNORE',
    'CSSMDOC_STYLE_GLOBS',
    'CSSMDOC_EXTS',
    'CSSMDOC_REVERSE',
    'CSSMDOC_OUTPUT',
    'CSSMDOC_OUTPUT_FORMAT',
]


@pytest.fixture(autouse=True)
def clean_cssmdoc_env():
    """Keep CSSMDOC_* variables (including ones loaded from .env files) out of other tests."""
    saved = {name: os.environ.pop(name) for name in CSSMDOC_ENV_VARS if name in os.environ}
    yield
    for name in CSSMDOC_ENV_VARS:
        os.environ.pop(name, None)
    os.environ.update(saved)


@pytest.fixture
def mock_project():
    return MOCK_PROJECT


@pytest.fixture
def parse_options():
    """Options used against the fixture project."""
    return Config(exts=['jsx', 'tsx'], style_globs=['.css', '.module.css', '.scss'])


@pytest.fixture
def make_project(tmp_path):
    """Factory writing ``{relative_path: content}`` into a fresh project directory."""
    def _make(files):
        root = tmp_path / 'project'
        for relative_path, content in files.items():
            file_path = root / relative_path
            file_path.parent.mkdir(parents=True, exist_ok=True)
            file_path.write_text(content, encoding='utf-8')
        root.mkdir(exist_ok=True)
        return root.resolve()

    return _make
