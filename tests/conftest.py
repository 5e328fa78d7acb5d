import sys
from pathlib import Path

import pytest

# Ensure repository root is on the import path for local package imports during tests.
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

FIXTURES = Path(__file__).resolve().parent / "fixtures" / "http"


@pytest.fixture()
def load_fixture():
    def _load(name: str) -> bytes:
        return (FIXTURES / name).read_bytes()

    return _load
