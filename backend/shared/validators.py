"""Settings helpers for list-valued environment variables."""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, Any

from pydantic_settings import EnvSettingsSource

if TYPE_CHECKING:
    from pydantic.fields import FieldInfo

# Fields whose env values are handed to validators as raw strings.
LIST_FIELDS = frozenset({"cors_origins"})


def _parse_json_list(text: str) -> list[str]:
    try:
        parsed = json.loads(text)
    except json.JSONDecodeError as e:
        raise ValueError(f"Invalid JSON array: {e}") from e
    if not isinstance(parsed, list) or not all(isinstance(item, str) for item in parsed):
        raise ValueError("JSON value must be an array of strings")
    return parsed


def parse_string_list(value: str | list[str]) -> list[str]:
    """Parse a non-empty list of strings from a list, a JSON array, or CSV text.

    Raises ValueError when the result would be empty or the JSON is malformed.
    """
    if isinstance(value, list):
        items = value
    elif value.strip().startswith("["):
        items = _parse_json_list(value.strip())
    else:
        items = [part.strip() for part in value.split(",") if part.strip()]

    if not items:
        raise ValueError("String list value must not be empty")
    return items


class StringListEnvSettingsSource(EnvSettingsSource):
    """Skip pydantic-settings' JSON pre-decoding for list fields.

    Lets ``parse_string_list`` accept both JSON and comma-separated env values.
    """

    def prepare_field_value(
        self,
        field_name: str,
        field: FieldInfo,
        value: Any,  # noqa: ANN401
        value_is_complex: bool,  # noqa: FBT001
    ) -> Any:  # noqa: ANN401
        if field_name in LIST_FIELDS and isinstance(value, str):
            return value
        return super().prepare_field_value(field_name, field, value, value_is_complex)
