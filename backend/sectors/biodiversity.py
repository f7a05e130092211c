from core.schema import (
    CellType,
    ColumnSchema,
    FieldSchema,
    FormDefinition,
    FormEnum,
    MigratorColumn,
    Sector,
    ValueType,
    WidgetKind,
    options_of,
)
from sectors.common import (
    CALENDAR_YEAR,
    CALENDAR_YEAR_COLUMN,
    MUNICIPALITY,
    MUNICIPALITY_COLUMN,
    PROVINCE,
    PROVINCE_COLUMN,
    YES_NO,
)


# ---------------------------------------------------------------------------
# Biodiversity 4: inventory sites
# ---------------------------------------------------------------------------

INVENTORY_STATUS = ("Excellent", "Good", "Fair", "Poor")

BIODIVERSITY_4 = FormDefinition(
    form=FormEnum.BIODIVERSITY_4,
    sector=Sector.BIODIVERSITY,
    title="Biodiversity Inventory",
    fields=(
        CALENDAR_YEAR,
        PROVINCE,
        MUNICIPALITY,
        FieldSchema(name="date_of_inventory", label="Date of Inventory", widget_kind=WidgetKind.DATE),
        FieldSchema(name="area", label="Area (in hectares)", widget_kind=WidgetKind.NUMBER),
        FieldSchema(name="dominant_species", label="Dominant Species"),
        FieldSchema(
            name="status",
            label="Status",
            widget_kind=WidgetKind.SELECT,
            options=options_of(*INVENTORY_STATUS),
        ),
    ),
    columns=(
        CALENDAR_YEAR_COLUMN,
        PROVINCE_COLUMN,
        MUNICIPALITY_COLUMN,
        ColumnSchema(header_name="Date of Inventory", field="date_of_inventory", value_type=ValueType.DATE),
        ColumnSchema(header_name="Area (in hectares)", field="area", value_type=ValueType.NUMBER),
        ColumnSchema(header_name="Dominant Species", field="dominant_species"),
        ColumnSchema(
            header_name="Status",
            field="status",
            value_type=ValueType.SELECT,
            values=INVENTORY_STATUS,
        ),
    ),
)


# ---------------------------------------------------------------------------
# Biodiversity 8: inland wetlands
# ---------------------------------------------------------------------------

BIODIVERSITY_8 = FormDefinition(
    form=FormEnum.BIODIVERSITY_8,
    sector=Sector.BIODIVERSITY,
    title="Inland Wetlands",
    fields=(
        CALENDAR_YEAR,
        PROVINCE,
        MUNICIPALITY,
        FieldSchema(name="name_of_wetland", label="Name of Wetland"),
        FieldSchema(name="wetland_type", label="Wetland Type"),
        FieldSchema(
            name="wet_area_dry_season_ha",
            label="Wet Area (Dry Season)(in ha)",
            widget_kind=WidgetKind.NUMBER,
        ),
        FieldSchema(
            name="wet_area_wet_season_ha",
            label="Wet Area (Wet Season)(in ha)",
            widget_kind=WidgetKind.NUMBER,
        ),
        FieldSchema(name="assessed", label="Assessed", widget_kind=WidgetKind.SELECT, options=YES_NO),
        FieldSchema(
            name="presence_of_management_plan",
            label="Presence of Management Plan",
            widget_kind=WidgetKind.SELECT,
            options=YES_NO,
        ),
        FieldSchema(name="recognition", label="Recognition"),
        FieldSchema(name="remarks", label="Remarks"),
    ),
    columns=(
        CALENDAR_YEAR_COLUMN,
        PROVINCE_COLUMN,
        MUNICIPALITY_COLUMN,
        ColumnSchema(header_name="Name of Wetland", field="name_of_wetland"),
        ColumnSchema(header_name="Wetland Type", field="wetland_type"),
        ColumnSchema(
            header_name="Wet Area (Dry Season)(in ha)",
            field="wet_area_dry_season_ha",
            value_type=ValueType.NUMBER,
        ),
        ColumnSchema(
            header_name="Wet Area (Wet Season)(in ha)",
            field="wet_area_wet_season_ha",
            value_type=ValueType.NUMBER,
        ),
        ColumnSchema(header_name="Assessed", field="assessed", value_type=ValueType.SELECT, values=("Yes", "No")),
        ColumnSchema(
            header_name="Presence of Management Plan",
            field="presence_of_management_plan",
            value_type=ValueType.SELECT,
            values=("Yes", "No"),
        ),
        ColumnSchema(header_name="Recognition", field="recognition"),
        ColumnSchema(header_name="Remarks", field="remarks"),
    ),
)


# ---------------------------------------------------------------------------
# Biodiversity 12 and 20: wildlife permits
# ---------------------------------------------------------------------------

_PERMIT_FIELDS = (
    FieldSchema(
        name="number_of_permits_issued",
        label="Number of Permits Issued",
        widget_kind=WidgetKind.NUMBER,
    ),
    FieldSchema(name="revenue_generated", label="Revenue Generated", widget_kind=WidgetKind.NUMBER),
)

_PERMIT_COLUMNS = (
    ColumnSchema(
        header_name="Number of Permits Issued",
        field="number_of_permits_issued",
        value_type=ValueType.NUMBER,
    ),
    ColumnSchema(header_name="Revenue Generated", field="revenue_generated", value_type=ValueType.NUMBER),
)

_PERMIT_MIGRATOR_COLUMNS = (
    MigratorColumn(header_name="number_of_permits_issued", field="number_of_permits_issued", type=CellType.NUMBER),
    MigratorColumn(header_name="revenue_generated", field="revenue_generated", type=CellType.NUMBER),
)

_LOCATION_MIGRATOR_COLUMNS = (
    MigratorColumn(header_name="calendar_year", field="calendar_year", type=CellType.NUMBER),
    MigratorColumn(header_name="province", field="province", type=CellType.STRING),
    MigratorColumn(header_name="municipality", field="municipality", type=CellType.STRING),
)

BIODIVERSITY_12 = FormDefinition(
    form=FormEnum.BIODIVERSITY_12,
    sector=Sector.BIODIVERSITY,
    title="Wildlife Import/Export/Re-Export Permit",
    fields=(
        CALENDAR_YEAR,
        PROVINCE,
        MUNICIPALITY,
        FieldSchema(name="permit_type", label="Permit Type"),
        *_PERMIT_FIELDS,
    ),
    columns=(
        CALENDAR_YEAR_COLUMN,
        PROVINCE_COLUMN,
        MUNICIPALITY_COLUMN,
        ColumnSchema(header_name="Permit Type", field="permit_type"),
        *_PERMIT_COLUMNS,
    ),
    migrator_columns=(
        *_LOCATION_MIGRATOR_COLUMNS,
        MigratorColumn(header_name="permit_type", field="permit_type", type=CellType.STRING),
        *_PERMIT_MIGRATOR_COLUMNS,
    ),
)

BIODIVERSITY_20 = FormDefinition(
    form=FormEnum.BIODIVERSITY_20,
    sector=Sector.BIODIVERSITY,
    title="Wildlife Farm Permit",
    fields=(CALENDAR_YEAR, PROVINCE, MUNICIPALITY, *_PERMIT_FIELDS),
    columns=(CALENDAR_YEAR_COLUMN, PROVINCE_COLUMN, MUNICIPALITY_COLUMN, *_PERMIT_COLUMNS),
    migrator_columns=(*_LOCATION_MIGRATOR_COLUMNS, *_PERMIT_MIGRATOR_COLUMNS),
)


FORMS = (BIODIVERSITY_4, BIODIVERSITY_8, BIODIVERSITY_12, BIODIVERSITY_20)
