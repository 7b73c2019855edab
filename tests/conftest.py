from __future__ import annotations

import sys
from pathlib import Path

import pytest


def pytest_configure() -> None:
    # Ensure `import ndjson_stream` works when running tests without installing the package.
    repo_root = Path(__file__).resolve().parents[1]
    src_dir = repo_root / "src"
    if src_dir.exists() and str(src_dir) not in sys.path:
        sys.path.insert(0, str(src_dir))


@pytest.fixture
def mixed_ndjson() -> bytes:
    # Valid, blank, malformed and non-ASCII lines; last record unterminated.
    return (
        '{"id":1,"name":"café"}\n'
        "\n"
        "not-json\n"
        "   \n"
        '[1,2,3]\n'
        '{"id":2,"tags":["über","☃"]}\n'
        '{"id":3'
        "\n"
        '"tail"'
    ).encode("utf-8")
