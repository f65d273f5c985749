"""Editable target fields and their per-field edit state."""

from __future__ import annotations

from collections.abc import Mapping
from enum import StrEnum

from pydantic import BaseModel, ConfigDict


class EditableField(StrEnum):
    TARGET_AIR_HUMIDITY = "target_air_humidity"
    LIGHT_ON_TIME = "light_on_time"
    LIGHT_OFF_TIME = "light_off_time"


class FieldEditState(StrEnum):
    """Per-field state machine: UNTOUCHED -> TOUCHED, never back."""

    UNTOUCHED = "untouched"
    TOUCHED = "touched"


class FormField(BaseModel):
    model_config = ConfigDict(frozen=True)

    value: str = ""
    state: FieldEditState = FieldEditState.UNTOUCHED

    @property
    def is_touched(self) -> bool:
        return self.state == FieldEditState.TOUCHED


def initial_form() -> dict[EditableField, FormField]:
    return {field: FormField() for field in EditableField}


def prefill_form(
    current: Mapping[EditableField, FormField],
    server_values: Mapping[EditableField, str],
) -> dict[EditableField, FormField]:
    """Copy server values into every untouched field.

    Touched fields are returned unchanged, whatever their value (an
    operator who cleared a field still owns it).
    """
    merged: dict[EditableField, FormField] = {}
    for field in EditableField:
        slot = current.get(field, FormField())
        if slot.is_touched or field not in server_values:
            merged[field] = slot
        else:
            merged[field] = FormField(value=server_values[field], state=FieldEditState.UNTOUCHED)
    return merged


def touch_field(
    current: Mapping[EditableField, FormField],
    field: EditableField,
    value: str,
) -> dict[EditableField, FormField]:
    """Record operator input into *field*, marking it touched."""
    updated = dict(current)
    updated[field] = FormField(value=value, state=FieldEditState.TOUCHED)
    return updated
