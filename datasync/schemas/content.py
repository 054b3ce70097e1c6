"""Pydantic models for content types and items."""

from __future__ import annotations

import re
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

FieldType = Literal[
    "text",
    "textarea",
    "markdown",
    "date",
    "number",
    "select",
    "multi-select",
    "phone",
    "email",
    "url",
    "image",
]

SELECT_TYPES = {"select", "multi-select"}


class FieldValidation(BaseModel):
    min: float | None = None
    max: float | None = None
    pattern: str | None = None

    @field_validator("pattern")
    @classmethod
    def _pattern_compiles(cls, value: str | None) -> str | None:
        if value is not None:
            try:
                re.compile(value)
            except re.error as exc:
                raise ValueError(f"Invalid pattern: {exc}") from None
        return value


class FieldDefinition(BaseModel):
    name: str = Field(min_length=1)
    label: str | None = None
    type: FieldType = "text"
    required: bool = False
    placeholder: str | None = None
    help_text: str | None = None
    options: list[str] | None = None
    validation: FieldValidation | None = None

    @model_validator(mode="after")
    def _select_needs_options(self) -> "FieldDefinition":
        if self.type in SELECT_TYPES and not self.options:
            raise ValueError(f"Field {self.name!r} of type {self.type} needs options")
        return self


class ContentTypeCreate(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    name: str = Field(min_length=1)
    fields: list[FieldDefinition] = Field(default_factory=list, alias="schema")

    @model_validator(mode="after")
    def _unique_field_names(self) -> "ContentTypeCreate":
        names = [f.name for f in self.fields]
        if len(names) != len(set(names)):
            raise ValueError("Field names must be unique")
        return self


ContentStatus = Literal["draft", "published", "archived"]


class ContentItemCreate(BaseModel):
    content_type_id: str
    title: str = Field(min_length=1)
    data: dict[str, Any] = Field(default_factory=dict)
    status: ContentStatus = "draft"


class ContentItemUpdate(BaseModel):
    title: str | None = None
    data: dict[str, Any] | None = None
    status: ContentStatus | None = None
