"""数据模型定义"""

from .config import LLMConfig, ReviewerConfig
from .review_result import (
    REVIEW_SCHEMA_VERSION,
    CodeReview,
    ConfidenceLevel,
    LanguageDetectionResult,
    ReviewOutcome,
    ReviewPoint,
    ReviewRequest,
    StructuredReview,
)

__all__ = [
    "LLMConfig",
    "ReviewerConfig",
    "REVIEW_SCHEMA_VERSION",
    "CodeReview",
    "ConfidenceLevel",
    "LanguageDetectionResult",
    "ReviewOutcome",
    "ReviewPoint",
    "ReviewRequest",
    "StructuredReview",
]
