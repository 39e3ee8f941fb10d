"""模型输出解析测试"""

import json

import pytest
from langchain_core.exceptions import OutputParserException

from snippet_reviewer.languages import FALLBACK_LANGUAGE, Language
from snippet_reviewer.models.review_result import ConfidenceLevel
from snippet_reviewer.parsers.review_parser import detection_parser, extract_json, review_parser


class TestExtractJson:
    def test_plain_json(self):
        assert extract_json('  {"a": 1}  ') == {"a": 1}

    def test_fenced_json(self):
        assert extract_json('说明\n```json\n{"a": [1, 2]}\n```\n') == {"a": [1, 2]}

    def test_embedded_object(self):
        assert extract_json('结果如下: {"a": null} 完毕') == {"a": None}

    def test_garbage_raises(self):
        with pytest.raises(OutputParserException):
            extract_json("not json at all")


class TestReviewOutputParser:
    def test_round_trip(self):
        source = {
            "review": {"summary": "s", "points": [{"topic": "t", "feedback": "**f**"}]},
            "suggestedCode": None,
        }

        result = review_parser.parse(json.dumps(source))

        assert result.model_dump(by_alias=True) == source

    def test_missing_suggested_code_means_null(self):
        result = review_parser.parse(json.dumps({"review": {"summary": "s", "points": []}}))

        assert result.suggested_code is None

    def test_non_object_raises(self):
        with pytest.raises(OutputParserException):
            review_parser.parse("[1, 2, 3]")

    def test_wrong_point_shape_raises(self):
        with pytest.raises(OutputParserException):
            review_parser.parse(json.dumps({"review": {"summary": "s", "points": ["just text"]}}))

    def test_has_changes_ignores_whitespace(self):
        result = review_parser.parse(
            json.dumps({"review": {"summary": "s", "points": []}, "suggestedCode": "x = 1\n"})
        )

        assert result.has_changes("  x = 1") is False
        assert result.has_changes("x = 2") is True


class TestLanguageDetectionParser:
    def test_valid(self):
        result = detection_parser.parse('{"language": "rust", "confidence": "medium"}')

        assert result.language == Language.RUST
        assert result.confidence == ConfidenceLevel.MEDIUM
        assert result.model_dump(mode="json") == {"language": "rust", "confidence": "medium"}

    def test_normalizes_case(self):
        result = detection_parser.parse('{"language": "Python", "confidence": "HIGH"}')

        assert result.language == Language.PYTHON
        assert result.confidence == ConfidenceLevel.HIGH

    def test_unknown_language_falls_back(self):
        result = detection_parser.parse('{"language": "auto", "confidence": "high"}')

        assert result.language == FALLBACK_LANGUAGE
        assert result.confidence == ConfidenceLevel.LOW

    def test_non_object_raises(self):
        with pytest.raises(OutputParserException):
            detection_parser.parse('"python"')
