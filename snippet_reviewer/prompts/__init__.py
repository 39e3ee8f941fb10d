"""提示词构建"""

from .templates import Operation, PreparedRequest, PromptFactory

__all__ = ["Operation", "PreparedRequest", "PromptFactory"]
