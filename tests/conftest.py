# Ensure the repo root and src/ are importable (so `import markets.query` works under pytest).
import sys, pathlib
from datetime import date

import pytest

ROOT = pathlib.Path(__file__).resolve().parents[1]
for p in (ROOT, ROOT / "src"):
    if str(p) not in sys.path:
        sys.path.insert(0, str(p))

from markets.models import Market, UserPosition  # noqa: E402

CITY_HALL = UserPosition(37.5665, 126.9780)


def make_market(name, days, lat=37.5, lng=127.0, address="somewhere"):
    return Market(name=name, address=address, position=UserPosition(lat, lng), open_days=frozenset(days))


@pytest.fixture
def catalog():
    # Ordered on purpose: proximity to City Hall is not catalog order.
    return (
        make_market("Far 4/9", {4, 9}, lat=37.4322, lng=127.1290),
        make_market("Near 4/9", {4, 9}, lat=37.5651, lng=126.9895),
        make_market("Mid 4/9", {4, 9}, lat=37.5400, lng=127.0300),
        make_market("Only 5/0", {5, 0}, lat=37.2352, lng=127.2074),
        make_market("Only 1/6", {1, 6}, lat=37.6910, lng=127.8860),
    )


@pytest.fixture
def fourth():
    return date(2026, 10, 14)


CSV_HEADER = "name,address,lat,lng,days\n"


@pytest.fixture
def write_catalog(tmp_path):
    def _write(body, name="markets.csv", header=CSV_HEADER):
        path = tmp_path / name
        path.write_text(header + body, encoding="utf-8")
        return str(path)
    return _write
