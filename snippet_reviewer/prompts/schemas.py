"""声明给模型的 JSON 输出结构"""

from ..languages import supported_tags
from ..models.review_result import REVIEW_SCHEMA_VERSION, ConfidenceLevel


def detection_schema() -> dict:
    """语言检测的输出结构"""
    return {
        "name": "language_detection",
        "strict": True,
        "schema": {
            "type": "object",
            "properties": {
                "language": {
                    "type": "string",
                    "enum": supported_tags(),
                    "description": "代码片段的编程语言",
                },
                "confidence": {
                    "type": "string",
                    "enum": [level.value for level in ConfidenceLevel],
                    "description": "检测结果的置信度",
                },
            },
            "required": ["language", "confidence"],
            "additionalProperties": False,
        },
    }


def review_schema() -> dict:
    """代码评审的输出结构（summary + points）"""
    return {
        "name": f"code_review_v{REVIEW_SCHEMA_VERSION}",
        "strict": True,
        "schema": {
            "type": "object",
            "properties": {
                "review": {
                    "type": "object",
                    "properties": {
                        "summary": {
                            "type": "string",
                            "description": "对代码整体质量的简短总结",
                        },
                        "points": {
                            "type": "array",
                            "items": {
                                "type": "object",
                                "properties": {
                                    "topic": {
                                        "type": "string",
                                        "description": "简短的主题标签",
                                    },
                                    "feedback": {
                                        "type": "string",
                                        "description": "Markdown 格式的详细意见",
                                    },
                                },
                                "required": ["topic", "feedback"],
                                "additionalProperties": False,
                            },
                        },
                    },
                    "required": ["summary", "points"],
                    "additionalProperties": False,
                },
                "suggestedCode": {
                    "type": ["string", "null"],
                    "description": "应用改进后的完整代码，无需修改时为 null",
                },
            },
            "required": ["review", "suggestedCode"],
            "additionalProperties": False,
        },
    }
