"""Base model for grow-box controller payloads.

Every payload model inherits from :class:`GrowboxBaseModel` which
provides:

* ``alias_generator=to_camel`` so camelCase JSON keys map
  automatically to snake_case fields.
* A ``model_validator(mode="before")`` that turns non-finite floats
  (NaN, infinity) into ``None``; a failed sensor read on the device
  can surface either as ``null`` or as ``NaN`` depending on firmware.
* :meth:`GrowboxBaseModel.from_payload` which decodes JSON text or an
  already-parsed mapping and reports failures as
  :class:`~pygrowbox.exceptions.GrowboxPayloadError`.
"""

from __future__ import annotations

import json
import math
from collections.abc import Mapping
from typing import Any, Self

from pydantic import BaseModel, ConfigDict, ValidationError, model_validator
from pydantic.alias_generators import to_camel

from pygrowbox.exceptions import GrowboxPayloadError


def _clean_value(value: Any) -> Any:
    if isinstance(value, float) and not math.isfinite(value):
        return None
    return value


class GrowboxBaseModel(BaseModel):
    """Base for controller payload models."""

    model_config = ConfigDict(
        frozen=True,
        extra="ignore",
        populate_by_name=True,
        alias_generator=to_camel,
    )

    @model_validator(mode="before")
    @classmethod
    def _clean_non_finite(cls, values: Any) -> Any:
        if not isinstance(values, dict):
            return values
        return {key: _clean_value(value) for key, value in values.items()}

    @classmethod
    def from_payload(cls, payload: str | bytes | Mapping[str, Any], *, event: str = "") -> Self:
        """Decode *payload* into a model instance.

        Raises
        ------
        GrowboxPayloadError
            If *payload* is not valid JSON, is not a JSON object, or does
            not validate against the model.
        """
        data: Any = payload
        if isinstance(payload, (str, bytes)):
            try:
                data = json.loads(payload)
            except (json.JSONDecodeError, UnicodeDecodeError) as exc:
                raise GrowboxPayloadError(f"{cls.__name__} payload is not JSON: {exc}", event=event) from exc

        if not isinstance(data, Mapping):
            raise GrowboxPayloadError(
                f"{cls.__name__} payload must be a JSON object, got {type(data).__name__}",
                event=event,
            )

        try:
            return cls.model_validate(dict(data))
        except ValidationError as exc:
            raise GrowboxPayloadError(
                f"{cls.__name__} payload failed validation: {exc.error_count()} error(s)",
                event=event,
            ) from exc

    def to_payload(self) -> dict[str, Any]:
        """Dump the model using the camelCase wire names."""
        return self.model_dump(by_alias=True)
