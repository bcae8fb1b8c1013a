from __future__ import annotations

import sys
from pathlib import Path

import pytest
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.ext.compiler import compiles

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))


@compiles(JSONB, "sqlite")
def _compile_jsonb_to_sqlite(element, compiler, **kw):  # pragma: no cover - SQLite shim
    return "JSON"


@pytest.fixture
def sqlite_url(tmp_path: Path) -> str:
    pytest.importorskip("aiosqlite")
    return f"sqlite+aiosqlite:///{tmp_path / 'musiclib.db'}"
