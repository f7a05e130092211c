import pydantic
import pytest

from core.registry import FORMS, UnknownFormError, forms_by_sector, get_form
from core.schema import (
    CellType,
    ColumnSchema,
    FieldSchema,
    FormDefinition,
    FormEnum,
    Sector,
    SchemaError,
    WidgetKind,
    options_of,
)
from sectors.common import year_options


class TestFieldSchema:
    def test_select_requires_options(self):
        with pytest.raises(SchemaError):
            FieldSchema(name="status", label="Status", widget_kind=WidgetKind.SELECT)

    def test_text_rejects_options(self):
        with pytest.raises(SchemaError):
            FieldSchema(name="remarks", label="Remarks", options=options_of("a"))

    def test_option_values(self):
        f = FieldSchema(name="x", label="X", widget_kind=WidgetKind.SELECT, options=options_of("a", "b"))
        assert f.option_values == ["a", "b"]


class TestFormDefinition:
    def test_duplicate_field_names_rejected(self):
        with pytest.raises(SchemaError, match="Duplicate"):
            FormDefinition(
                form=FormEnum.BIODIVERSITY_4,
                sector=Sector.BIODIVERSITY,
                title="Broken",
                fields=(FieldSchema(name="a", label="A"), FieldSchema(name="a", label="A again")),
                columns=(),
            )

    def test_column_without_field_rejected(self):
        with pytest.raises(SchemaError, match="without a matching field"):
            FormDefinition(
                form=FormEnum.BIODIVERSITY_4,
                sector=Sector.BIODIVERSITY,
                title="Broken",
                fields=(FieldSchema(name="a", label="A"),),
                columns=(ColumnSchema(header_name="B", field="b"),),
            )

    @pytest.mark.parametrize("definition", list(FORMS.values()), ids=lambda d: d.form.value)
    def test_registered_forms_are_consistent(self, definition):
        """Every column of every registered form names one of its fields."""
        names = set(definition.field_names)
        assert len(names) == len(definition.fields)
        assert {c.field for c in definition.columns} <= names
        assert {c.field for c in definition.cell_columns} <= names

    def test_derived_migrator_columns(self):
        definition = get_form("biodiversity", "biodiversity_4")
        columns = {c.field: c.type for c in definition.cell_columns}

        assert columns["calendar_year"] == CellType.NUMBER
        assert columns["area"] == CellType.NUMBER
        assert columns["date_of_inventory"] == CellType.DATE
        assert columns["status"] == CellType.STRING

    def test_multiselect_left_out_of_migrator_columns(self):
        definition = get_form("forestry", "forestry_5")
        assert "municipalities" not in {c.field for c in definition.cell_columns}


class TestRecordModel:
    def test_undeclared_keys_ignored(self):
        model = get_form("biodiversity", "biodiversity_4").record_model()
        record = model.model_validate({"calendar_year": 2024, "injected": "x"})
        assert "injected" not in record.model_dump()

    def test_required_field(self):
        model = get_form("biodiversity", "biodiversity_4").record_model()
        with pytest.raises(pydantic.ValidationError):
            model.model_validate({"province": "Marinduque"})

    def test_select_only_accepts_options(self):
        model = get_form("biodiversity", "biodiversity_4").record_model()
        with pytest.raises(pydantic.ValidationError):
            model.model_validate({"calendar_year": 2024, "status": "Unknown"})

    def test_record_id_alias(self):
        model = get_form("biodiversity", "biodiversity_4").record_model()
        record = model.model_validate({"_id": "abc", "calendar_year": 2024})
        assert record.model_dump(by_alias=True)["_id"] == "abc"

    def test_model_is_cached(self):
        definition = get_form("biodiversity", "biodiversity_8")
        assert definition.record_model() is definition.record_model()


class TestRegistry:
    def test_every_form_registered(self):
        assert set(FORMS) == set(FormEnum)

    def test_unknown_form(self):
        with pytest.raises(UnknownFormError):
            get_form("biodiversity", "biodiversity_99")

    def test_form_must_match_sector(self):
        with pytest.raises(UnknownFormError):
            get_form("forestry", "biodiversity_4")

    def test_forms_by_sector(self):
        grouped = forms_by_sector()
        assert [d.form for d in grouped[Sector.FORESTRY]] == [FormEnum.FORESTRY_5]
        assert len(grouped[Sector.BIODIVERSITY]) == 4


def test_year_options_newest_first():
    options = year_options(2000, 2003)
    assert [o.value for o in options] == [2003, 2002, 2001, 2000]
