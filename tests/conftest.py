import datetime
import pathlib
import sys

import pytest

PROJECT_ROOT = pathlib.Path(__file__).resolve().parents[1]
SRC_DIR = PROJECT_ROOT / "src"
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))
if str(SRC_DIR) not in sys.path:
    sys.path.insert(0, str(SRC_DIR))

UTC = datetime.timezone.utc


def ms(year: int, month: int, day: int, hour: int = 0, minute: int = 0, tz=UTC) -> float:
    """Epoch milliseconds for a wall-clock time in ``tz``."""
    return datetime.datetime(year, month, day, hour, minute, tzinfo=tz).timestamp() * 1000


@pytest.fixture
def now_ms() -> float:
    """Wednesday 2024-06-12 12:00 UTC."""
    return ms(2024, 6, 12, 12)


@pytest.fixture
def anyio_backend() -> str:
    return "asyncio"
