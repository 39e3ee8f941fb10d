"""模型输出解析"""

from .review_parser import (
    LanguageDetectionParser,
    ReviewOutputParser,
    detection_parser,
    extract_json,
    fallback_detection,
    review_parser,
)

__all__ = [
    "LanguageDetectionParser",
    "ReviewOutputParser",
    "detection_parser",
    "extract_json",
    "fallback_detection",
    "review_parser",
]
