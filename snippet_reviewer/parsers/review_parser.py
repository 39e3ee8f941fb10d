"""模型输出解析器"""

import json
import logging
import re
from typing import Any

from langchain_core.exceptions import OutputParserException
from langchain_core.output_parsers import BaseOutputParser
from pydantic import ValidationError

from ..languages import FALLBACK_LANGUAGE, Language
from ..models.review_result import CodeReview, ConfidenceLevel, LanguageDetectionResult

logger = logging.getLogger(__name__)


def extract_json(text: str) -> Any:
    """从文本中提取并解析 JSON

    模型已按 schema 约束输出，但部分兼容接口仍会包裹 ``` 代码块，
    因此依次尝试多种方式。

    Raises:
        OutputParserException: 无法提取合法 JSON
    """
    # 方式1: 直接解析
    text = text.strip()
    try:
        return json.loads(text)
    except json.JSONDecodeError:
        pass

    # 方式2: ```json ... ``` 或 ``` ... ``` 中的内容
    code_block = re.search(r"```(?:json)?\s*(.*?)\s*```", text, re.DOTALL)
    if code_block:
        try:
            return json.loads(code_block.group(1))
        except json.JSONDecodeError:
            pass

    # 方式3: 查找 { ... }
    brace_match = re.search(r"\{.*\}", text, re.DOTALL)
    if brace_match:
        try:
            return json.loads(brace_match.group(0))
        except json.JSONDecodeError:
            pass

    raise OutputParserException(
        f"无法从输出中解析 JSON: {text[:200]}...", llm_output=text
    )


class ReviewOutputParser(BaseOutputParser[CodeReview]):
    """评审结果解析器"""

    def parse(self, text: str) -> CodeReview:
        """解析 LLM 输出

        Args:
            text: LLM 返回的文本

        Returns:
            CodeReview: 评审结果

        Raises:
            OutputParserException: JSON 无效或缺少必填字段
        """
        data = extract_json(text)
        if not isinstance(data, dict):
            raise OutputParserException(f"评审结果不是 JSON 对象: {text[:200]}", llm_output=text)

        try:
            return CodeReview.model_validate(data)
        except ValidationError as e:
            raise OutputParserException(f"评审结果结构不符合要求: {e}", llm_output=text)

    @property
    def _type(self) -> str:
        return "code_review"


class LanguageDetectionParser(BaseOutputParser[LanguageDetectionResult]):
    """语言检测解析器

    语言标签或置信度不在允许范围内时不报错，而是返回兜底结果
    （FALLBACK_LANGUAGE + low）。只有 JSON 本身无效时才抛出异常。
    """

    def parse(self, text: str) -> LanguageDetectionResult:
        data = extract_json(text)
        if not isinstance(data, dict):
            raise OutputParserException(f"检测结果不是 JSON 对象: {text[:200]}", llm_output=text)

        language = str(data.get("language", "")).strip().lower()
        confidence = str(data.get("confidence", "")).strip().lower()

        try:
            return LanguageDetectionResult(
                language=Language(language),
                confidence=ConfidenceLevel(confidence),
            )
        except ValueError:
            logger.warning(
                "语言检测返回了无效的值 (language=%r, confidence=%r)，使用兜底结果",
                data.get("language"),
                data.get("confidence"),
            )
            return fallback_detection()

    @property
    def _type(self) -> str:
        return "language_detection"


def fallback_detection() -> LanguageDetectionResult:
    """无法判断语言时的结果"""
    return LanguageDetectionResult(language=FALLBACK_LANGUAGE, confidence=ConfidenceLevel.LOW)


# 单例实例
review_parser = ReviewOutputParser()
detection_parser = LanguageDetectionParser()
