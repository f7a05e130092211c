"""Lookup of form definitions by sector and form identifier."""

from core.schema import FormDefinition, FormEnum, Sector
import sectors.biodiversity
import sectors.forestry


class UnknownFormError(LookupError):
    pass


FORMS: dict[FormEnum, FormDefinition] = {
    definition.form: definition
    for definition in (*sectors.biodiversity.FORMS, *sectors.forestry.FORMS)
}


def get_form(sector: Sector | str, form: FormEnum | str) -> FormDefinition:
    """Return the definition of ``form``, which must belong to ``sector``.

    Raises:
        UnknownFormError: If the form does not exist in that sector
    """
    try:
        definition = FORMS[FormEnum(form)]
    except ValueError:
        raise UnknownFormError(f"Unknown form: {form}") from None
    if definition.sector != sector:
        raise UnknownFormError(f"Form {form} is not part of sector {sector}")
    return definition


def forms_by_sector() -> dict[Sector, list[FormDefinition]]:
    result: dict[Sector, list[FormDefinition]] = {sector: [] for sector in Sector}
    for definition in FORMS.values():
        result[definition.sector].append(definition)
    return result
