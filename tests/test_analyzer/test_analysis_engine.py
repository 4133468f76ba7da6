"""Tests for fixer.analyzer.engine."""

from __future__ import annotations

import copy

import pytest

import fixer.analyzer.engine as engine_module
from fixer.analyzer.engine import (
    AnalysisEngine,
    analyze_dependency_error,
    analyze_validation_errors,
    analyze_with_warnings,
)
from fixer.analyzer.models import DedupMode, ResultType, ValidationError
from fixer.schema.navigator import NOT_SET
from fixer.schema.refs import check_schema


def _error(field_path: str, locator: str) -> ValidationError:
    return ValidationError(field_path=field_path, message="", constraint_locator=locator)


def _financials_schema(with_broker: bool = False) -> dict:
    financials: dict = {
        "type": "object",
        "properties": {
            "insurers": {"type": "array", "title": "Insurers", "minItems": 1},
        },
        "required": ["insurers"],
    }
    if with_broker:
        financials["properties"]["broker"] = {"type": "string", "title": "Broker"}
        financials["required"].append("broker")

    return {
        "type": "object",
        "properties": {
            "x": {
                "type": "object",
                "properties": {
                    "include": {"type": "boolean"},
                    "financials": {"type": "object"},
                },
                "dependencies": {
                    "include": {
                        "oneOf": [
                            {
                                "properties": {
                                    "include": {"enum": [True]},
                                    "financials": financials,
                                },
                                "required": ["financials"],
                            },
                            {"properties": {"include": {"enum": [False]}}},
                        ]
                    }
                },
            }
        },
    }


def _financials_ui_schema() -> dict:
    return {
        "type": "object",
        "properties": {
            "x": {
                "type": "object",
                "properties": {
                    "include": {"type": "boolean", "title": "Include financials"},
                },
            }
        },
    }


def _financials_data() -> dict:
    return {"x": {"include": True, "financials": {"insurers": []}}}


def _scenario_d_data() -> dict:
    return {"industry": "Associations", "segment": "Printing", "employees": 10}


SEGMENT_LOCATOR = "#/dependencies/industry/oneOf/0/properties/segment/enum"


class TestReverseScenario:
    def test_segment_value_points_to_other_industry(
        self, ui_schema: dict, schema: dict
    ) -> None:
        output = analyze_validation_errors(
            [_error("segment", SEGMENT_LOCATOR)], _scenario_d_data(), ui_schema, schema
        )

        assert len(output.analyses) == 1
        analysis = output.analyses[0]
        assert analysis.type == ResultType.simple
        assert analysis.trigger_field is None
        assert analysis.error_field == "segment"
        assert analysis.error_field_label == "Class Segment"
        assert analysis.error_field_current_value == "Printing"
        assert len(analysis.suggestions) == 1
        suggestion = analysis.suggestions[0]
        assert suggestion.field == "industry"
        assert suggestion.allowed_values == ["Business Services"]
        assert suggestion.current_value == "Associations"
        assert output.missing_in_flattened_schema == []

    def test_inputs_are_not_mutated(self, ui_schema: dict, schema: dict) -> None:
        data = _scenario_d_data()
        before = (copy.deepcopy(data), copy.deepcopy(ui_schema), copy.deepcopy(schema))
        analyze_validation_errors([_error("segment", SEGMENT_LOCATOR)], data, ui_schema, schema)
        assert (data, ui_schema, schema) == before

    def test_repeated_calls_are_identical(self, ui_schema: dict, schema: dict) -> None:
        errors = [_error("segment", SEGMENT_LOCATOR)]
        first = analyze_validation_errors(errors, _scenario_d_data(), ui_schema, schema)
        second = analyze_validation_errors(errors, _scenario_d_data(), ui_schema, schema)
        assert first.model_dump(by_alias=True) == second.model_dump(by_alias=True)


class TestForwardScenarios:
    def test_nested_array_min_items(self) -> None:
        error = _error(
            "x.include",
            "#/properties/x/dependencies/include/oneOf/1/properties/include/enum",
        )
        output = analyze_validation_errors(
            [error], _financials_data(), _financials_ui_schema(), _financials_schema()
        )

        assert len(output.analyses) == 1
        analysis = output.analyses[0]
        assert analysis.type == ResultType.dependency
        assert analysis.trigger_field == "x.include"
        assert analysis.trigger_value is True
        assert analysis.trigger_field_label == "Include financials"
        assert len(analysis.suggestions) == 1
        suggestion = analysis.suggestions[0]
        assert suggestion.field == "x.financials.insurers"
        assert suggestion.allowed_values == ["at least 1 items"]
        assert suggestion.current_value == "array with 0 items"

    def test_fields_missing_from_ui_are_reported(self) -> None:
        schema = {
            "type": "object",
            "properties": {"kind": {"type": "string"}},
            "dependencies": {
                "kind": {
                    "oneOf": [
                        {
                            "properties": {
                                "kind": {"enum": ["a"]},
                                "p": {"type": "string"},
                                "q": {"type": "number"},
                                "r": {"type": "array"},
                            },
                            "required": ["p", "q", "r"],
                        }
                    ]
                }
            },
        }
        ui_schema = {"type": "object", "properties": {"kind": {"type": "string"}}}
        error = _error("kind", "#/dependencies/kind/oneOf/0/required")

        output = analyze_validation_errors([error], {"kind": "a"}, ui_schema, schema)

        assert len(output.analyses) == 1
        assert [s.field for s in output.analyses[0].suggestions] == ["p", "q", "r"]
        assert [s.allowed_values for s in output.analyses[0].suggestions] == [
            ["<a string>"],
            ["<a number>"],
            ["<an array>"],
        ]
        assert len(output.missing_in_flattened_schema) == 1
        missing = output.missing_in_flattened_schema[0]
        assert missing.error_field == "kind"
        assert missing.missing_fields == ["p", "q", "r"]

    def test_dependency_on_named_property(self) -> None:
        schema = {
            "type": "object",
            "properties": {
                "product": {"type": "string"},
                "bpp": {
                    "type": "object",
                    "properties": {"form": {"type": "string"}},
                    "dependencies": {
                        "form": {
                            "oneOf": [
                                {
                                    "properties": {
                                        "form": {"enum": ["special"]},
                                        "limit": {"type": "number", "title": "Limit"},
                                    },
                                    "required": ["limit"],
                                }
                            ]
                        }
                    },
                },
            },
        }
        data = {"product": "bop", "bpp": {"form": "special"}}
        error = _error("product", "#/dependencies/bpp/oneOf/0/properties/product/enum")

        results = analyze_dependency_error(error, data, {}, schema)

        assert len(results) == 1
        assert results[0].trigger_field == "bpp"
        assert [s.field for s in results[0].suggestions] == ["bpp.limit"]
        assert results[0].current_value == "bop"


class TestArrayConstraint:
    LOCATOR = (
        "#/properties/x/dependencies/include/oneOf/0/properties/financials"
        "/properties/insurers/minItems"
    )

    def test_alternative_trigger_value(self) -> None:
        error = _error("x.financials.insurers", self.LOCATOR)
        data = _financials_data()
        results = analyze_dependency_error(
            error, data, _financials_ui_schema(), _financials_schema()
        )

        assert len(results) == 1
        result = results[0]
        assert result.type == ResultType.simple
        assert result.current_value == []
        assert result.current_value is not data["x"]["financials"]["insurers"]
        assert [s.field for s in result.suggestions] == ["x.include"]
        assert result.suggestions[0].allowed_values == [False]
        assert result.suggestions[0].current_value == "true"

    def test_sibling_requirements_become_forward_result(self) -> None:
        error = _error("x.financials.insurers", self.LOCATOR)
        results = analyze_dependency_error(
            error,
            _financials_data(),
            _financials_ui_schema(),
            _financials_schema(with_broker=True),
        )

        assert [r.type for r in results] == [ResultType.dependency, ResultType.simple]
        forward = results[0]
        assert forward.trigger_field == "x.include"
        assert [s.field for s in forward.suggestions] == ["x.financials.broker"]
        assert forward.suggestions[0].allowed_values == ["<a string>"]


class TestInvariants:
    def test_no_self_referencing_suggestions(self, ui_schema: dict, schema: dict) -> None:
        errors = [
            _error("segment", SEGMENT_LOCATOR),
            _error("industry", "#/dependencies/industry/oneOf/1/properties/industry/enum"),
        ]
        output = analyze_validation_errors(errors, _scenario_d_data(), ui_schema, schema)

        assert output.analyses
        for analysis in output.analyses:
            assert all(s.field != analysis.error_field for s in analysis.suggestions)

    def test_one_result_per_error_field_and_type(
        self, ui_schema: dict, schema: dict
    ) -> None:
        errors = [
            _error("segment", SEGMENT_LOCATOR),
            _error("segment", "#/dependencies/industry/oneOf/2/properties/segment/enum"),
        ]
        output = analyze_validation_errors(errors, _scenario_d_data(), ui_schema, schema)

        keys = [(a.error_field, a.type) for a in output.analyses]
        assert len(keys) == len(set(keys))
        assert keys == [("segment", ResultType.simple)]

    def test_non_dependency_error_yields_nothing(self, ui_schema: dict, schema: dict) -> None:
        output = analyze_validation_errors(
            [_error("employees", "#/properties/employees/type")],
            _scenario_d_data(),
            ui_schema,
            schema,
        )
        assert output.analyses == []

    def test_non_ascii_digit_path_yields_nothing(
        self, ui_schema: dict, schema: dict
    ) -> None:
        output = analyze_validation_errors(
            [_error("segment.²", SEGMENT_LOCATOR)], _scenario_d_data(), ui_schema, schema
        )
        assert output.analyses == []

    def test_missing_current_value_is_not_set(self) -> None:
        schema = _financials_schema()
        data = {"x": {"include": True}}
        error = _error(
            "x.financials",
            "#/properties/x/dependencies/include/oneOf/0/required",
        )
        results = analyze_dependency_error(error, data, _financials_ui_schema(), schema)

        assert results
        assert results[0].current_value == NOT_SET


class TestSchemaPreconditions:
    def test_ref_in_schema_gives_empty_output(self, ui_schema: dict, schema: dict) -> None:
        schema["properties"]["segment"] = {"$ref": "#/definitions/segment"}
        output = analyze_validation_errors(
            [_error("segment", SEGMENT_LOCATOR)], _scenario_d_data(), ui_schema, schema
        )
        assert output.analyses == []
        assert output.missing_in_flattened_schema == []

    @pytest.mark.parametrize("empty", [None, {}])
    def test_empty_schema_gives_empty_output(self, ui_schema: dict, empty) -> None:
        output = analyze_validation_errors(
            [_error("segment", SEGMENT_LOCATOR)], _scenario_d_data(), ui_schema, empty
        )
        assert output.analyses == []


class TestAnalysisEngine:
    def test_default_mode(self) -> None:
        assert AnalysisEngine().dedup_mode == DedupMode.basic

    def test_actionable_report(self, ui_schema: dict, schema: dict) -> None:
        engine = AnalysisEngine()
        errors = [_error("segment", SEGMENT_LOCATOR)]
        report = engine.analyze_actionable(errors, _scenario_d_data(), ui_schema, schema)

        assert report.warnings == []
        assert [e.field_path for e in report.validation_errors] == ["segment"]
        assert len(report.analysis_output.analyses) == 1

    def test_actionable_report_carries_warnings(self, ui_schema: dict, schema: dict) -> None:
        schema["definitions"] = {"a": {"$ref": "#/definitions/b"}}
        engine = AnalysisEngine(dedup_mode=DedupMode.enhanced)
        report = engine.analyze_actionable(
            [_error("segment", SEGMENT_LOCATOR)], _scenario_d_data(), ui_schema, schema
        )

        assert any("$ref" in w for w in report.warnings)
        assert report.analysis_output.analyses == []
        assert report.validation_errors == []

    def test_schema_checked_once_per_call(
        self, ui_schema: dict, schema: dict, monkeypatch
    ) -> None:
        calls = []

        def counting_check(value):
            calls.append(value)
            return check_schema(value)

        monkeypatch.setattr(engine_module, "check_schema", counting_check)
        schema["definitions"] = {"a": {"$ref": "#/definitions/b"}}
        report = AnalysisEngine().analyze_actionable(
            [_error("segment", SEGMENT_LOCATOR)], _scenario_d_data(), ui_schema, schema
        )

        assert len(calls) == 1
        assert any("$ref" in w for w in report.warnings)

    def test_analyze_with_warnings(self, ui_schema: dict, schema: dict) -> None:
        output, warnings = analyze_with_warnings(
            [_error("segment", SEGMENT_LOCATOR)], _scenario_d_data(), ui_schema, schema
        )
        assert warnings == []
        assert len(output.analyses) == 1

    def test_unreachable_fields_are_dropped(self) -> None:
        engine = AnalysisEngine()
        schema = {
            "dependencies": {
                "kind": {
                    "oneOf": [
                        {
                            "properties": {"kind": {"enum": ["a"]}, "p": {"type": "string"}},
                            "required": ["p"],
                        }
                    ]
                }
            }
        }
        ui_schema = {"properties": {"kind": {"type": "string"}}}
        report = engine.analyze_actionable(
            [_error("kind", "#/dependencies/kind/oneOf/0/required")],
            {"kind": "a"},
            ui_schema,
            schema,
        )

        assert report.analysis_output.analyses == []
        assert report.validation_errors == []
