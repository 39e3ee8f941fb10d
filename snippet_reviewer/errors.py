"""错误分类"""

import asyncio
import json
from enum import Enum
from typing import Optional

import openai
from langchain_core.exceptions import OutputParserException


class ApiErrorKind(str, Enum):
    """调用模型失败的类别"""

    API_KEY = "API_KEY"
    NETWORK = "NETWORK"
    RESPONSE_PARSING = "RESPONSE_PARSING"
    BAD_REQUEST = "BAD_REQUEST"
    UNKNOWN = "UNKNOWN"


# 展示给用户的提示
USER_MESSAGES = {
    ApiErrorKind.API_KEY: "API Key 无效或缺失，请检查配置文件或 SNIPPET_REVIEWER_API_KEY 环境变量。",
    ApiErrorKind.NETWORK: "网络错误，无法连接到模型服务，请检查网络后重试。",
    ApiErrorKind.RESPONSE_PARSING: "模型返回的内容无法解析，请重试。",
    ApiErrorKind.BAD_REQUEST: "请求格式错误，模型服务拒绝了该请求。",
    ApiErrorKind.UNKNOWN: "与模型服务通信时发生未知错误。",
}


class ApiError(Exception):
    """模型调用错误"""

    def __init__(self, kind: ApiErrorKind, message: Optional[str] = None):
        self.kind = kind
        self.message = message or USER_MESSAGES[kind]
        super().__init__(self.message)

    @property
    def user_message(self) -> str:
        return USER_MESSAGES[self.kind]


class MissingApiKeyError(ValueError):
    """未配置 API Key，无法创建客户端"""


class SnippetValidationError(ValueError):
    """本地校验失败，不会发起请求"""


class LanguageDetectionAborted(SnippetValidationError):
    """自动检测置信度过低，需要用户手动选择语言"""

    def __init__(self, detection):
        self.detection = detection
        super().__init__(
            "无法可靠地识别代码语言，请手动选择语言后重试。"
        )


# 各类别在错误消息中的关键字（无类型信息时使用）
_KEYWORDS = [
    (ApiErrorKind.API_KEY, ("api key", "api_key", "apikey", "401", "403", "unauthorized", "permission")),
    (ApiErrorKind.NETWORK, ("network", "fetch", "connection", "timed out", "timeout")),
    (ApiErrorKind.BAD_REQUEST, ("400", "bad request", "invalid request")),
]


def classify_error(error: BaseException) -> ApiError:
    """将底层异常归类为 ApiError

    优先使用 openai SDK 的异常类型，否则退回到消息关键字匹配。

    Args:
        error: 原始异常

    Returns:
        ApiError: 带类别的错误
    """
    if isinstance(error, ApiError):
        return error

    kind = _classify_by_type(error)
    if kind is None:
        kind = _classify_by_message(str(error))

    detail = str(error)
    message = USER_MESSAGES[kind]
    if detail:
        message = f"{message} ({detail})"
    return ApiError(kind, message)


def _classify_by_type(error: BaseException) -> Optional[ApiErrorKind]:
    if isinstance(error, (openai.AuthenticationError, openai.PermissionDeniedError)):
        return ApiErrorKind.API_KEY
    # APITimeoutError 是 APIConnectionError 的子类
    if isinstance(error, (openai.APIConnectionError, asyncio.TimeoutError, TimeoutError, ConnectionError)):
        return ApiErrorKind.NETWORK
    if isinstance(error, openai.BadRequestError):
        return ApiErrorKind.BAD_REQUEST
    if isinstance(error, (OutputParserException, json.JSONDecodeError)):
        return ApiErrorKind.RESPONSE_PARSING
    return None


def _classify_by_message(message: str) -> ApiErrorKind:
    lowered = message.lower()
    for kind, keywords in _KEYWORDS:
        if any(keyword in lowered for keyword in keywords):
            return kind
    return ApiErrorKind.UNKNOWN
