from __future__ import annotations

import json
from datetime import date
from io import StringIO

from precompute_days import precompute, write_records


def test_precompute_week():
    records = list(precompute(date(2025, 6, 14), 7, 40.7128, -74.0060, "America/New_York"))
    assert len(records) == 7
    assert [r["requestedDate"] for r in records][:2] == ["2025-06-14", "2025-06-15"]
    assert [r["dayRuler"] for r in records] == ["Saturn", "Sun", "Moon", "Mars", "Mercury", "Jupiter", "Venus"]
    assert records[0]["key"] == "2025-06-14_40.7128_-74.0060_America/New_York"
    # Each planetary day ends where the next begins.
    for today, tomorrow in zip(records, records[1:]):
        assert today["nextSunrise"] == tomorrow["sunrise"]


def test_write_records_counts_unavailable():
    out = StringIO()
    records = precompute(date(2025, 6, 20), 3, 82.5018, -62.3481, "Etc/GMT+4")
    written, unavailable = write_records(records, out)
    assert (written, unavailable) == (3, 3)
    lines = out.getvalue().splitlines()
    assert len(lines) == 3
    assert all(json.loads(line)["available"] is False for line in lines)
