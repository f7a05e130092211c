import pytest

from core.registry import get_form
from views.report import ReportView


FORESTRY_5 = get_form("forestry", "forestry_5")


@pytest.fixture
def report(gateway):
    async def fetch(page, limit, filters):
        return await gateway.list(FORESTRY_5.form, FORESTRY_5.sector, page, limit, filters)

    return ReportView(FORESTRY_5.fields, FORESTRY_5.columns, fetch)


@pytest.fixture
def offline_report():
    async def fetch(page, limit, filters):
        raise AssertionError("no backend call expected")

    return ReportView(FORESTRY_5.fields, FORESTRY_5.columns, fetch)


@pytest.fixture
def watersheds(backend):
    return backend.seed("forestry", "forestry_5", [
        {"calendar_year": 2024, "classification": "Small sized watershed", "municipalities": ["Boac", "Mogpog"]},
        {"calendar_year": 2024, "classification": "Large sized watershed", "municipalities": ["Gasan"]},
        {"calendar_year": 2023, "classification": "Small sized watershed", "municipalities": ["Boac"]},
    ])


class TestBuildFilters:
    def test_blank_filters_dropped(self, offline_report):
        filters, errors = offline_report.build_filters({"calendar_year": "", "name_of_watershed": None})
        assert filters == {}
        assert errors == []

    def test_values_coerced(self, offline_report):
        filters, _ = offline_report.build_filters({"calendar_year": "2024", "municipalities": "Boac,Gasan"})
        assert filters == {"calendar_year": 2024, "municipalities": ["Boac", "Gasan"]}

    def test_unknown_filter(self, offline_report):
        _, errors = offline_report.build_filters({"colour": "green"})
        assert errors == [{"field": "colour", "msg": "Unknown filter"}]


class TestQuery:
    @pytest.mark.asyncio
    async def test_filters_are_anded(self, report, watersheds):
        result = await report.query({"calendar_year": "2024", "classification": "Small sized watershed"})

        assert result.ok
        assert result.data.page.total == 1
        assert result.data.page.records[0]["_id"] == watersheds[0]["_id"]

    @pytest.mark.asyncio
    async def test_no_filters_lists_everything(self, report, watersheds):
        result = await report.query({})
        assert result.data.page.total == 3

    @pytest.mark.asyncio
    async def test_multiselect_filter(self, report, watersheds):
        result = await report.query({"municipalities": ["Boac"]})
        assert {r["_id"] for r in result.data.page.records} == {watersheds[0]["_id"], watersheds[2]["_id"]}

    @pytest.mark.asyncio
    async def test_filters_built_once_and_returned(self, report, watersheds, monkeypatch):
        calls = []
        build = report.build_filters

        def counting_build(raw):
            calls.append(raw)
            return build(raw)

        monkeypatch.setattr(report, "build_filters", counting_build)
        result = await report.query({"calendar_year": "2024"})

        assert len(calls) == 1
        assert result.data.filters == {"calendar_year": 2024}
        assert result.data.page.total == 2

    @pytest.mark.asyncio
    async def test_invalid_filter_not_sent(self, report, backend):
        result = await report.query({"calendar_year": "1850"})

        assert not result.ok
        assert result.error["code"] == 422
        assert backend.requests == []
        assert result.data.page is None

    @pytest.mark.asyncio
    async def test_backend_failure(self, report, backend):
        backend.queue_response(500, {"msg": "boom"})
        result = await report.query({})
        assert not result.ok
        assert result.error == {"code": 500, "msg": "boom"}


def test_filter_controls(offline_report):
    controls = {c.name: c for c in offline_report.filter_controls()}
    assert controls["municipalities"].widget == "multiselect"
    assert len(controls["classification"].options) == 4
