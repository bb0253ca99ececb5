import logging

import pytest

from crag_info import server
from crag_info.core.clients.graphql import GraphQLClient, cache_id, set_client


def test_format_grade_route():
    result = server.format_grade("US", {"yds": "5.11b", "french": "6c+"}, {"sport": True})
    assert result == {"context": "US", "grade": "5.11b", "scale": "YOSEMITE DECIMAL SYSTEM"}


def test_format_grade_boulder():
    result = server.format_grade("FR", {"font": "7A"}, None, is_boulder=True)
    assert result["grade"] == "7A"
    assert result["scale"] == "Font"


def test_format_grade_unknown_context():
    with pytest.raises(ValueError, match="Unknown grade context"):
        server.format_grade("DE", {}, {"sport": True})


def test_validate_grade():
    assert server.validate_grade("AU", "24")["valid"] is True
    bad = server.validate_grade("US", "V4", "sport")
    assert bad["valid"] is False
    assert bad["error"] == "Invalid grade"


def test_grade_scales_lists_every_context():
    contexts = server.grade_scales()["contexts"]
    assert set(contexts) == {"US", "FR", "AU"}
    assert contexts["AU"]["ice"] == {"id": "wi", "name": "WI"}


def test_area_by_uuid_tool():
    client = GraphQLClient(url="https://example.test")
    client.write_fragment(cache_id("Area", "a1"), {"uuid": "a1", "areaName": "Lower Gorge"})
    set_client(client)
    assert server.area_by_uuid("a1") == {"uuid": "a1", "found": True, "area": {"uuid": "a1", "areaName": "Lower Gorge"}}
    assert server.area_by_uuid("zz")["found"] is False


async def test_crags_near_tool_reports_failure(fake_client_factory):
    set_client(fake_client_factory(error=RuntimeError("down")))
    result = await server.crags_near(-121.14, 44.36)
    assert result["data"] == []
    assert result["error"] == "API error"
    assert result["summary"].startswith("Lookup failed")


@pytest.mark.parametrize("raw, expected", [("debug", logging.DEBUG), (" WARNING ", logging.WARNING), ("verbose", logging.INFO), ("", logging.INFO)])
def test_log_level_from_environment(monkeypatch, raw, expected):
    monkeypatch.setenv("CRAG_INFO_LOG_LEVEL", raw)
    assert server._get_log_level() == expected


def test_log_level_default(monkeypatch):
    monkeypatch.delenv("CRAG_INFO_LOG_LEVEL", raising=False)
    assert server._get_log_level() == logging.INFO
