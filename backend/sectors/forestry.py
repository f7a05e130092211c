from core.schema import (
    ColumnSchema,
    FieldSchema,
    FormDefinition,
    FormEnum,
    Sector,
    ValueType,
    WidgetKind,
    options_of,
)
from sectors.common import CALENDAR_YEAR, CALENDAR_YEAR_COLUMN, MUNICIPALITIES, PROVINCE, PROVINCE_COLUMN


WATERSHED_CLASSIFICATIONS = (
    "Small sized watershed",
    "Medium sized watershed",
    "Large sized watershed",
    "Extremely Large sized watershed",
)

# Watersheds span several municipalities, hence the multi-select.
FORESTRY_5 = FormDefinition(
    form=FormEnum.FORESTRY_5,
    sector=Sector.FORESTRY,
    title="Watersheds",
    fields=(
        CALENDAR_YEAR,
        PROVINCE,
        FieldSchema(name="name_of_watershed", label="Name of Watershed"),
        FieldSchema(name="previous_name_of_watershed", label="Previous Name of Watershed"),
        FieldSchema(name="area_ha", label="Area (ha)", widget_kind=WidgetKind.NUMBER),
        FieldSchema(
            name="classification",
            label="Classification",
            widget_kind=WidgetKind.SELECT,
            options=options_of(*WATERSHED_CLASSIFICATIONS),
        ),
        FieldSchema(
            name="municipalities",
            label="Municipalities",
            widget_kind=WidgetKind.MULTISELECT,
            options=options_of(*MUNICIPALITIES),
        ),
    ),
    columns=(
        CALENDAR_YEAR_COLUMN,
        PROVINCE_COLUMN,
        ColumnSchema(header_name="Name of Watershed", field="name_of_watershed"),
        ColumnSchema(header_name="Previous Name of Watershed", field="previous_name_of_watershed"),
        ColumnSchema(header_name="Area (in hectares)", field="area_ha", value_type=ValueType.NUMBER),
        ColumnSchema(
            header_name="Classification (small, medium, large)",
            field="classification",
            value_type=ValueType.SELECT,
            values=WATERSHED_CLASSIFICATIONS,
        ),
        ColumnSchema(header_name="Municipalities", field="municipalities", editable=False),
    ),
)


FORMS = (FORESTRY_5,)
