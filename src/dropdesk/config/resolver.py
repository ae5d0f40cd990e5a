"""Settings resolution helpers."""

from __future__ import annotations

from collections.abc import Mapping as MappingABC
from copy import deepcopy
from typing import Any, Mapping

from pydantic import ValidationError

from .exceptions import SettingsError
from .models import DropDeskSettings

_FIELD_ALIASES = {
    name: field.alias for name, field in DropDeskSettings.model_fields.items() if field.alias
}


def resolve_with_precedence(
    *,
    defaults: DropDeskSettings,
    stored: Mapping[str, Any] | None = None,
    overrides: Mapping[str, Any] | None = None,
) -> dict[str, Any]:
    """Layer settings sources over the defaults, later sources winning.

    Merging is shallow: the settings document is flat, so a key present in a
    later layer replaces the earlier value wholesale.

    Args:
        defaults: Baseline settings model.
        stored: Values read from the settings document.
        overrides: Partial update supplied by the caller.

    Returns:
        dict[str, Any]: Merged settings document keyed by on-disk names.

    Raises:
        SettingsError: If a layer is not a mapping or uses non-string keys.
    """
    merged = defaults.to_document()
    for name, source in (("stored", stored), ("override", overrides)):
        if source is None:
            continue
        merged = _shallow_merge(merged, _normalize_mapping(source, source_name=name))
    return merged


def validate_settings(document: Mapping[str, Any]) -> DropDeskSettings:
    """Return a typed settings model for a merged document.

    Raises:
        SettingsError: If a known key carries an invalid value.
    """
    try:
        return DropDeskSettings.model_validate(dict(document))
    except ValidationError as exc:
        raise SettingsError(f"Invalid settings values: {exc}") from exc


def _normalize_mapping(source: Mapping[str, Any], *, source_name: str) -> dict[str, Any]:
    if not isinstance(source, MappingABC):
        raise SettingsError(f"{source_name.capitalize()} settings must be a mapping.")

    result: dict[str, Any] = {}
    for key, value in dict(source).items():
        if not isinstance(key, str):
            raise SettingsError(f"{source_name.capitalize()} setting keys must be strings.")
        result[_FIELD_ALIASES.get(key, key)] = value
    return result


def _shallow_merge(base: Mapping[str, Any], overrides: Mapping[str, Any]) -> dict[str, Any]:
    merged: dict[str, Any] = {key: deepcopy(value) for key, value in base.items()}
    for key, value in overrides.items():
        merged[key] = deepcopy(value)
    return merged


__all__ = ["resolve_with_precedence", "validate_settings"]
