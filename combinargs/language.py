"""
Locale tables. A :py:class:`Language` is consulted only while arguments are
being constructed, to fill in affixes, meta-variables and help/error labels
that the caller did not supply.
"""
import os
from dataclasses import dataclass
from typing import Dict


@dataclass(frozen=True)
class Language:
    """
    Default strings for one locale.

    >>> ENGLISH.negation_prefix, GERMAN.negation_prefix
    ('no', 'kein')
    """

    code: str
    negation_prefix: str
    meta_var: str
    options: str
    default: str
    allowed_values: str
    missing_flag: str
    missing_value: str
    invalid_value: str
    unknown_variant: str
    unrecognized_argument: str
    extra_arguments: str
    help_long: str
    help_short: str
    help_description: str
    version_long: str
    version_short: str
    version_description: str
    long_prefix: str = "--"
    short_prefix: str = "-"
    negation_infix: str = "-"
    value_infix: str = "="


ENGLISH = Language(
    code="en",
    negation_prefix="no",
    meta_var="VALUE",
    options="OPTIONS",
    default="Default",
    allowed_values="Possible values",
    missing_flag="Missing Flag",
    missing_value="Missing Value",
    invalid_value="Parse Error",
    unknown_variant="Unknown Variant",
    unrecognized_argument="Unrecognized Argument",
    extra_arguments="Unused argument(s)",
    help_long="help",
    help_short="h",
    help_description="Show this text.",
    version_long="version",
    version_short="v",
    version_description="Show the current version.",
)

GERMAN = Language(
    code="de",
    negation_prefix="kein",
    meta_var="WERT",
    options="OPTIONEN",
    default="Standard",
    allowed_values="Erlaubte Werte",
    missing_flag="Fehlende Flag",
    missing_value="Fehlender Wert",
    invalid_value="Parse-Fehler",
    unknown_variant="Unbekannte Variante",
    unrecognized_argument="Unbekanntes Argument",
    extra_arguments="Nicht alle Argumente verwendet",
    help_long="hilfe",
    help_short="h",
    help_description="Zeige diesen Text an.",
    version_long="version",
    version_short="v",
    version_description="Zeige die aktuelle Version an.",
)

LANGUAGES: Dict[str, Language] = {ENGLISH.code: ENGLISH, GERMAN.code: GERMAN}


def default_language() -> Language:
    """
    The language named by ``COMBINARGS_LANGUAGE`` (English if unset).
    """
    code = os.environ.get("COMBINARGS_LANGUAGE", ENGLISH.code)
    try:
        return LANGUAGES[code]
    except KeyError:
        raise KeyError(
            f"Unknown language {code!r}. Expected one of {', '.join(LANGUAGES)}."
        )
