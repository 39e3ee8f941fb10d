"""Snippet Reviewer - 基于 LangChain 的代码片段评审工具"""

__version__ = "0.2.0"

from .chains import InferenceClient, ReviewOrchestrator, create_orchestrator
from .cli import main
from .config import load_config
from .errors import (
    ApiError,
    ApiErrorKind,
    LanguageDetectionAborted,
    MissingApiKeyError,
    SnippetValidationError,
)
from .languages import AUTO, Language
from .models import (
    CodeReview,
    ConfidenceLevel,
    LanguageDetectionResult,
    LLMConfig,
    ReviewerConfig,
    ReviewOutcome,
    ReviewPoint,
    ReviewRequest,
    StructuredReview,
)

__all__ = [
    "main",
    "load_config",
    "create_orchestrator",
    "InferenceClient",
    "ReviewOrchestrator",
    "ApiError",
    "ApiErrorKind",
    "LanguageDetectionAborted",
    "MissingApiKeyError",
    "SnippetValidationError",
    "AUTO",
    "Language",
    "LLMConfig",
    "ReviewerConfig",
    "CodeReview",
    "ConfidenceLevel",
    "LanguageDetectionResult",
    "ReviewOutcome",
    "ReviewPoint",
    "ReviewRequest",
    "StructuredReview",
]
