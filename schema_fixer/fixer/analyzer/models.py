"""Data models for the validation error analyzer."""

from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from fixer.schema.navigator import NOT_SET, normalize_path


class _CamelModel(BaseModel):
    """Base model serialised with camelCase keys, populated by either name."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ResultType(str, Enum):
    """Whether a result carries a trigger field (forward) or not (reverse)."""

    dependency = "dependency"
    simple = "simple"


class ValidationError(_CamelModel):
    """A validation error mapped onto a data path.

    Produced by an external validator (or by ``fixer.validator.mapper``).
    """

    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, extra="ignore"
    )

    # Raw RJSF/ajv errors use "property", "schemaPath" and "params".
    field_path: str = Field(
        validation_alias=AliasChoices("fieldPath", "field_path", "property"),
        serialization_alias="fieldPath",
    )
    message: str = ""
    constraint_locator: str = Field(
        "",
        validation_alias=AliasChoices(
            "constraintLocator", "constraint_locator", "schemaPath", "schema_path"
        ),
        serialization_alias="constraintLocator",
    )
    parameters: dict[str, Any] = Field(
        default_factory=dict,
        validation_alias=AliasChoices("parameters", "params"),
        serialization_alias="parameters",
    )

    @field_validator("field_path")
    @classmethod
    def _normalize_field_path(cls, value: str) -> str:
        return normalize_path(value)

    @field_validator("parameters", mode="before")
    @classmethod
    def _none_parameters(cls, value: Any) -> Any:
        return value if value is not None else {}


class Suggestion(_CamelModel):
    """A single field the user should change, and what to change it to."""

    field: str
    current_value: Any = NOT_SET
    allowed_values: list[Any] = Field(default_factory=list)
    is_required: bool = False
    title: str | None = None
    # Produced by the nested object/array checks; kept regardless of UI visibility.
    nested: bool = Field(False, exclude=True)


class AnalysisResult(_CamelModel):
    """Intermediate, call-scoped result for one error."""

    trigger_field: str | None = None
    trigger_value: Any = None
    error_field: str
    current_value: Any = None
    suggestions: list[Suggestion] = Field(default_factory=list)

    @property
    def type(self) -> ResultType:
        return ResultType.dependency if self.trigger_field else ResultType.simple


class GroupedAnalysisResult(_CamelModel):
    """Labelled, typed result ready for a renderer."""

    trigger_field: str | None = None
    trigger_value: Any = None
    trigger_field_label: str | None = None
    error_field: str
    error_field_label: str | None = None
    error_field_current_value: Any = None
    suggestions: list[Suggestion] = Field(default_factory=list)
    type: ResultType


class MissingFieldInfo(_CamelModel):
    """Suggested fields that the UI-facing schema does not expose."""

    error_field: str
    missing_fields: list[str] = Field(default_factory=list)


class ValidationAnalysisOutput(_CamelModel):
    """Final engine output."""

    analyses: list[GroupedAnalysisResult] = Field(default_factory=list)
    missing_in_flattened_schema: list[MissingFieldInfo] = Field(default_factory=list)


class FilteredAnalysis(_CamelModel):
    """Errors and analyses narrowed down to what the user can act on."""

    validation_errors: list[ValidationError] = Field(default_factory=list)
    analysis_output: ValidationAnalysisOutput = Field(
        default_factory=ValidationAnalysisOutput
    )


class DedupMode(str, Enum):
    """How aggressively the actionable pass collapses analyses."""

    basic = "basic"
    enhanced = "enhanced"


class AnalysisReport(_CamelModel):
    """Actionable errors and analyses, plus why an analysis was refused."""

    validation_errors: list[ValidationError] = Field(default_factory=list)
    analysis_output: ValidationAnalysisOutput = Field(
        default_factory=ValidationAnalysisOutput
    )
    warnings: list[str] = Field(default_factory=list)
