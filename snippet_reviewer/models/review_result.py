"""评审结果数据模型"""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ..languages import AUTO, Language, is_supported


# 评审响应的 schema 版本（结构化 summary + points）
REVIEW_SCHEMA_VERSION = "2"


class ConfidenceLevel(str, Enum):
    """语言检测置信度"""

    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class ReviewRequest(BaseModel):
    """一次评审请求"""

    model_config = ConfigDict(frozen=True)

    code: str = Field(description="待评审的代码片段")
    language: str = Field(default=AUTO, description="语言标签或 auto")
    original_file_name: Optional[str] = Field(None, description="上传的原始文件名")

    @field_validator("language")
    @classmethod
    def check_language(cls, value: str) -> str:
        value = value.strip().lower()
        if value != AUTO and not is_supported(value):
            raise ValueError(f"不支持的语言: {value}")
        return value


class ReviewPoint(BaseModel):
    """单条评审意见"""

    model_config = ConfigDict(frozen=True)

    topic: str = Field(description="简短主题")
    feedback: str = Field(description="Markdown 格式的意见")


class StructuredReview(BaseModel):
    """结构化评审：摘要 + 意见列表"""

    model_config = ConfigDict(frozen=True)

    summary: str = Field(description="评审摘要")
    points: list[ReviewPoint] = Field(default_factory=list, description="按返回顺序排列的意见")


class CodeReview(BaseModel):
    """代码评审结果"""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    review: StructuredReview = Field(description="评审内容")
    suggested_code: Optional[str] = Field(
        None, alias="suggestedCode", description="完整的替换代码，null 表示无需修改"
    )

    def has_changes(self, original_code: str) -> bool:
        """建议代码是否与原代码不同（决定是否可以“应用修改”）"""
        if self.suggested_code is None:
            return False
        return self.suggested_code.strip() != original_code.strip()


class LanguageDetectionResult(BaseModel):
    """语言检测结果"""

    model_config = ConfigDict(frozen=True)

    language: Language = Field(description="检测到的语言")
    confidence: ConfidenceLevel = Field(description="置信度")

    @property
    def is_confident(self) -> bool:
        return self.confidence != ConfidenceLevel.LOW


class ReviewOutcome(BaseModel):
    """review_snippet 的完整结果"""

    model_config = ConfigDict(frozen=True)

    language: Language = Field(description="实际用于评审的语言")
    detection: Optional[LanguageDetectionResult] = Field(
        None, description="自动检测结果（仅在 auto 时存在）"
    )
    review: CodeReview = Field(description="评审结果")
