"""
Unit tests for resource summaries and presentation helpers.
"""

from relief.analysis import format_preview, format_summary, resources_frame, summarize_resources
from relief.models import Resource
from relief.views import humanize, marker_color, to_geojson


def _r(rid, rtype="food", status="available", quantity=None):
    return Resource(
        id=rid, name=f"Resource {rid}", type=rtype, location_name="Site", address="1 Main St",
        latitude=10.5, longitude=-20.25, status=status, created_by="u-1", quantity=quantity,
    )


# ── Tests: summarize_resources ───────────────────────────────────────

def test_summary_empty():
    summary = summarize_resources([])
    assert summary["total"] == 0
    assert summary["total_quantity"] == 0
    assert set(summary["by_type"]) == {"shelter", "food", "medical", "logistics", "water", "clothing"}
    assert all(v == 0 for v in summary["by_status"].values())
    assert format_summary(summary) == "(no resources)"


def test_summary_counts():
    items = [
        _r("1", "food", "available", 10),
        _r("2", "food", "low_stock", 5),
        _r("3", "medical", "available"),
    ]
    summary = summarize_resources(items)
    assert summary["total"] == 3
    assert summary["by_type"]["food"] == 2
    assert summary["by_type"]["shelter"] == 0
    assert summary["by_status"]["available"] == 2
    assert summary["matrix"]["food"]["low_stock"] == 1
    assert summary["matrix"]["medical"]["available"] == 1
    assert summary["total_quantity"] == 15

    text = format_summary(summary)
    assert "Total resources: 3" in text
    assert "low_stock" in text


def test_frame_keeps_order():
    df = resources_frame([_r("b"), _r("a")])
    assert df["id"].tolist() == ["b", "a"]


def test_preview():
    assert "no resources" in format_preview([])
    assert "Resource 1" in format_preview([_r("1")])


# ── Tests: views ─────────────────────────────────────────────────────

def test_marker_colors():
    assert marker_color("available") == "#10b981"
    assert marker_color("low_stock") == "#f59e0b"
    assert marker_color("out_of_stock") == "#ef4444"
    assert marker_color("unavailable") == "#6b7280"


def test_humanize():
    assert humanize("out_of_stock") == "out of stock"


def test_geojson_uses_lon_lat_order():
    collection = to_geojson([_r("1", status="low_stock")])
    feature = collection["features"][0]
    assert feature["id"] == "1"
    assert feature["geometry"] == {"type": "Point", "coordinates": [-20.25, 10.5]}
    assert feature["properties"]["marker_color"] == "#f59e0b"
