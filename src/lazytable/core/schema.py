"""
Schema descriptor for a Table – a thin wrapper over a pydantic model.

* `json_schema()` exports the model as a JSON-schema document.
* `validate()` checks a value mapping against the model; the value itself is
  left untouched.
"""

from __future__ import annotations

from typing import Any, Dict, Generic, Mapping, Type, TypeVar

from pydantic import BaseModel

T_Model = TypeVar("T_Model", bound=BaseModel)

DEFAULT_JSON_SCHEMA: Dict[str, Any] = {
    "$schema": "http://json-schema.org/draft-07/schema#",
    "additionalProperties": True,
    "type": "object",
}


class Schema(Generic[T_Model]):
    def __init__(self, model: Type[T_Model]):
        self.model = model

    def json_schema(self) -> Dict[str, Any]:
        return self.model.model_json_schema()

    def validate(self, value: Mapping[str, Any]) -> T_Model:
        """Raise `pydantic.ValidationError` if `value` does not fit the model."""
        return self.model.model_validate(dict(value))

    def __repr__(self) -> str:
        return f"Schema({self.model.__name__})"


def as_schema(schema: Any) -> Any:
    """Bare model classes get wrapped; anything else is used as given."""
    if isinstance(schema, type) and issubclass(schema, BaseModel):
        return Schema(schema)
    return schema
