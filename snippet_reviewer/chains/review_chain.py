"""评审流程编排"""

import logging
from typing import Optional

from langchain_core.exceptions import OutputParserException

from ..config import load_config
from ..errors import LanguageDetectionAborted, SnippetValidationError, classify_error
from ..languages import AUTO, Language, is_supported
from ..models.config import ReviewerConfig
from ..models.review_result import (
    CodeReview,
    LanguageDetectionResult,
    ReviewOutcome,
    ReviewPoint,
    ReviewRequest,
)
from ..parsers.review_parser import detection_parser, fallback_detection, review_parser
from ..prompts.templates import PromptFactory
from .inference import InferenceClient

# 配置日志
logger = logging.getLogger(__name__)


def setup_debug_logging(verbose: bool = False, log_file: str | None = None):
    """设置调试日志

    Args:
        verbose: 是否输出到控制台
        log_file: 日志文件路径（可选）
    """
    handlers = []

    if verbose:
        # 控制台输出
        console_handler = logging.StreamHandler()
        console_handler.setLevel(logging.DEBUG)
        console_handler.setFormatter(logging.Formatter("\n[DEBUG] %(message)s"))
        handlers.append(console_handler)

    if log_file:
        # 文件输出
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(logging.Formatter("%(asctime)s - %(name)s - %(message)s"))
        handlers.append(file_handler)

    if handlers:
        # 挂在包级 logger 上，覆盖 chains / parsers / history 等子模块
        package_logger = logging.getLogger("snippet_reviewer")
        package_logger.setLevel(logging.DEBUG)
        for handler in handlers:
            package_logger.addHandler(handler)


def require_code(code: str) -> None:
    if not code or not code.strip():
        raise SnippetValidationError("请输入需要评审的代码。")


def _require_language(language: str) -> str:
    tag = (language or "").strip().lower()
    if tag == AUTO:
        raise SnippetValidationError("评审前必须确定具体的语言，auto 需要先进行语言检测。")
    if not is_supported(tag):
        raise SnippetValidationError(f"不支持的语言: {language}")
    return tag


class ReviewOrchestrator:
    """串联 请求构建 -> 模型调用 -> 结果解析

    三个操作互相独立，每次只有一个请求在进行中。
    """

    def __init__(self, client: InferenceClient, config: ReviewerConfig | None = None):
        self.client = client
        self.config = config or ReviewerConfig()

    async def detect_language(self, code: str) -> LanguageDetectionResult:
        """检测代码语言

        过短或为空的片段直接返回兜底结果（low），不调用模型。

        Raises:
            ApiError: 调用或解析失败
        """
        if len(code.strip()) < self.config.min_detection_length:
            logger.debug("代码片段过短 (%d 字符)，跳过语言检测", len(code.strip()))
            return fallback_detection()

        request = PromptFactory.build_detect(code, self.config.detection_prefix_length)
        raw = await self.client.complete(request)

        try:
            result = detection_parser.parse(raw)
        except OutputParserException as e:
            raise classify_error(e) from e

        logger.debug("语言检测结果: %s (%s)", result.language.value, result.confidence.value)
        return result

    async def review_code(
        self, code: str, language: str, original_file_name: Optional[str] = None
    ) -> CodeReview:
        """评审代码

        Raises:
            SnippetValidationError: 代码为空或语言无效（不会发起请求）
            ApiError: 调用或解析失败
        """
        require_code(code)
        tag = _require_language(language)

        request = PromptFactory.build_review(code, tag, original_file_name)
        raw = await self.client.complete(request)

        try:
            result = review_parser.parse(raw)
        except OutputParserException as e:
            raise classify_error(e) from e

        logger.debug(
            "评审完成: %d 条意见, suggestedCode=%s",
            len(result.review.points),
            "null" if result.suggested_code is None else f"{len(result.suggested_code)} 字符",
        )
        return result

    async def explain_further(self, code: str, language: str, point: ReviewPoint) -> str:
        """对单条评审意见给出更详细的 Markdown 解释

        Raises:
            SnippetValidationError: 代码为空或语言无效
            ApiError: 调用失败
        """
        require_code(code)
        tag = _require_language(language)

        request = PromptFactory.build_explain(code, tag, point)
        return await self.client.complete(request)

    async def review_snippet(self, request: ReviewRequest) -> ReviewOutcome:
        """完整流程：language 为 auto 时先检测语言，再评审

        Raises:
            SnippetValidationError: 代码为空
            LanguageDetectionAborted: 检测置信度为 low，需要手动选择语言
            ApiError: 调用或解析失败
        """
        require_code(request.code)

        detection = None
        language = request.language
        if language == AUTO:
            detection = await self.detect_language(request.code)
            if not detection.is_confident:
                raise LanguageDetectionAborted(detection)
            language = detection.language.value

        review = await self.review_code(request.code, language, request.original_file_name)
        return ReviewOutcome(language=Language(language), detection=detection, review=review)


def create_orchestrator(
    config: ReviewerConfig | None = None, client: InferenceClient | None = None
) -> ReviewOrchestrator:
    """创建评审编排器

    Args:
        config: 配置对象，如果为 None 则自动加载
        client: 模型客户端，如果为 None 则根据配置创建

    Raises:
        MissingApiKeyError: 未配置 API Key
    """
    if config is None:
        config = load_config()
    if client is None:
        client = InferenceClient(config.llm)
    return ReviewOrchestrator(client, config)
