"""Shared helpers for reading deck / note type settings embedded in a page."""

import json
from typing import Any

from ..core.errors import ConfigNotFoundError, ConfigSyntaxError, ConfigValidationError
from ..core.nodes import TableBlock


def _reject_constant(name: str) -> Any:
    raise ValueError(f"{name} is not valid JSON")


def loads_strict(text: str) -> Any:
    """json.loads without the NaN/Infinity extension."""
    return json.loads(text, parse_constant=_reject_constant)


def read_table(block: TableBlock, into: dict[str, Any]) -> None:
    """
    Read ``key<TAB>value`` rows. Values that decode as JSON are decoded,
    the rest are kept as strings. Earlier rows win.
    """
    for row in block.raw_cells:
        if len(row) < 2 or not row[0].strip():
            continue
        value = row[1].strip()
        try:
            decoded = loads_strict(value)
        except (ValueError, RecursionError):
            decoded = value
        into.setdefault(row[0].strip(), decoded)


def read_settings(
    json_text: str,
    table: dict[str, Any],
    label: str,
    not_found: type[ConfigNotFoundError],
    syntax_error: type[ConfigSyntaxError],
    invalid: type[ConfigValidationError],
) -> dict[str, Any]:
    """
    Combine the JSON and tabular settings of a page. JSON members override
    table rows.
    """
    if json_text.strip() == "" and not table:
        raise not_found(f"No {label} settings found in the page.")
    if json_text.strip() == "":
        return dict(table)

    try:
        obj = loads_strict(json_text)
    except (ValueError, RecursionError) as e:
        raise syntax_error(str(e)) from e
    if not isinstance(obj, dict):
        raise invalid(f"{label.capitalize()} setting must be an object.")
    return {**table, **obj}


def is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)
