"""Static tool definitions.

A tool's JSON schema is derived from its parameter list once, when the tool is
constructed, and checked against the 2020-12 meta-schema at that point. The
same compiled validator is reused for every call.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Callable, Dict, List, Optional

from jsonschema import Draft202012Validator
from pydantic import BaseModel, ConfigDict, Field, PrivateAttr, field_validator, model_validator


class ParameterType(str, Enum):
    """JSON types a tool parameter may declare."""
    STRING = "string"
    NUMBER = "number"
    BOOLEAN = "boolean"
    OBJECT = "object"
    ARRAY = "array"


class ToolParameter(BaseModel):
    """A single named tool parameter."""
    model_config = ConfigDict(extra="forbid", frozen=True)

    name: str = Field(..., min_length=1, description="Argument name")
    type: ParameterType = Field(..., description="JSON type of the argument")
    description: str = Field(..., description="Description shown to the model")
    required: bool = Field(False, description="Whether the argument must be present")
    items: Optional[Dict[str, Any]] = Field(None, description="Item schema (array parameters only)")
    properties: Optional[Dict[str, Dict[str, Any]]] = Field(
        None,
        description="Property schemas (object parameters only)"
    )

    @model_validator(mode="after")
    def check_variant(self) -> "ToolParameter":
        if self.items is not None and self.type is not ParameterType.ARRAY:
            raise ValueError(f"Parameter '{self.name}': 'items' is only valid for array parameters")
        if self.properties is not None and self.type is not ParameterType.OBJECT:
            raise ValueError(f"Parameter '{self.name}': 'properties' is only valid for object parameters")
        return self

    def to_schema(self) -> Dict[str, Any]:
        schema: Dict[str, Any] = {"type": self.type.value, "description": self.description}
        if self.items is not None:
            schema["items"] = self.items
        if self.properties is not None:
            schema["properties"] = self.properties
        return schema


class Tool(BaseModel):
    """Tool definition owned by exactly one agent.

    The handler is called as ``handler(arguments, context)`` and may be a plain
    function or a coroutine function. It returns a ``ToolResult`` (or a dict
    with the same shape).
    """
    model_config = ConfigDict(extra="forbid", frozen=True, arbitrary_types_allowed=True)

    name: str = Field(..., min_length=1, description="Tool name")
    description: str = Field(..., description="Tool description for the model")
    parameters: List[ToolParameter] = Field(default_factory=list, description="Declared parameters")
    handler: Callable[..., Any] = Field(..., description="Function to execute")

    _input_schema: Dict[str, Any] = PrivateAttr(default_factory=dict)
    _validator: Optional[Draft202012Validator] = PrivateAttr(default=None)

    @field_validator("parameters")
    @classmethod
    def unique_names(cls, v: List[ToolParameter]) -> List[ToolParameter]:
        seen = set()
        for param in v:
            if param.name in seen:
                raise ValueError(f"Duplicate parameter name: {param.name}")
            seen.add(param.name)
        return v

    def model_post_init(self, __context: Any) -> None:
        schema = {
            "type": "object",
            "properties": {p.name: p.to_schema() for p in self.parameters},
            "required": [p.name for p in self.parameters if p.required],
        }
        Draft202012Validator.check_schema(schema)
        self._input_schema = schema
        self._validator = Draft202012Validator(schema)

    @property
    def input_schema(self) -> Dict[str, Any]:
        """JSON schema for the tool's arguments."""
        return self._input_schema

    @property
    def validator(self) -> Draft202012Validator:
        return self._validator

    def to_provider_schema(self) -> Dict[str, Any]:
        """Tool description in the shape inference providers expect."""
        return {
            "name": self.name,
            "description": self.description,
            "input_schema": self.input_schema,
        }
