import pytest

from core.errors import GatewayError
from core.notifications import Level
from core.registry import get_form
from views.form import INSERTED_MESSAGE, FormView


BIODIVERSITY_4 = get_form("biodiversity", "biodiversity_4")


class Recorder:
    """Submit callback that records what it was given."""

    def __init__(self, error: GatewayError | None = None):
        self.calls = []
        self.error = error

    async def __call__(self, record):
        self.calls.append(record)
        if self.error:
            raise self.error
        return {**record, "_id": "1"}


class TestBuildRecord:
    def test_exactly_declared_fields(self):
        view = FormView(BIODIVERSITY_4.fields, Recorder())
        record, errors = view.build_record({"calendar_year": 2024, "hacker": 1})

        assert errors == []
        assert set(record) == set(BIODIVERSITY_4.field_names)

    def test_blank_falls_back_to_initial_value(self):
        view = FormView(BIODIVERSITY_4.fields, Recorder())
        record, _ = view.build_record({"calendar_year": "2024", "province": ""})

        assert record["province"] == "Marinduque"
        assert record["calendar_year"] == 2024

    def test_required_field(self):
        view = FormView(BIODIVERSITY_4.fields, Recorder())
        _, errors = view.build_record({})
        assert errors == [{"field": "calendar_year", "msg": "Calendar Year is required"}]

    def test_bad_number(self):
        view = FormView(BIODIVERSITY_4.fields, Recorder())
        _, errors = view.build_record({"calendar_year": 2024, "area": "wide"})
        assert [e["field"] for e in errors] == ["area"]


class TestSubmit:
    @pytest.mark.asyncio
    async def test_success_closes_drawer(self):
        on_submit = Recorder()
        view = FormView(BIODIVERSITY_4.fields, on_submit)
        view.open()

        result = await view.submit({"calendar_year": 2024, "area": "12.5"})

        assert result.ok
        assert result.notification.level == Level.SUCCESS
        assert result.notification.message == INSERTED_MESSAGE
        assert on_submit.calls[0]["area"] == 12.5
        assert not view.visible
        assert view.values["province"] == "Marinduque"

    @pytest.mark.asyncio
    async def test_invalid_input_not_submitted(self):
        on_submit = Recorder()
        view = FormView(BIODIVERSITY_4.fields, on_submit)

        result = await view.submit({"area": "12"})

        assert not result.ok
        assert result.error["code"] == 422
        assert on_submit.calls == []
        assert view.visible

    @pytest.mark.asyncio
    async def test_rejection_keeps_values(self):
        error = GatewayError(
            code=422,
            msg="Validation failed",
            field_errors=[{"field": "dominant_species", "msg": "Too long"}],
        )
        view = FormView(BIODIVERSITY_4.fields, Recorder(error))

        result = await view.submit({"calendar_year": 2024, "dominant_species": "Narra"})

        assert not result.ok
        assert result.notification.level == Level.ERROR
        assert view.visible
        assert view.values["dominant_species"] == "Narra"
        widgets = {w.name: w for w in view.render()}
        assert widgets["dominant_species"].error == "Too long"


def test_render_uses_initial_values():
    view = FormView(BIODIVERSITY_4.fields, Recorder())
    widgets = {w.name: w for w in view.render()}

    assert widgets["province"].value == "Marinduque"
    assert widgets["calendar_year"].required
    assert [o.value for o in widgets["status"].options] == ["Excellent", "Good", "Fair", "Poor"]
