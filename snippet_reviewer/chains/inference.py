"""远程模型调用"""

import asyncio
import logging
from typing import Optional

from langchain_core.language_models import BaseChatModel
from langchain_core.output_parsers import StrOutputParser

from ..errors import ApiError, ApiErrorKind, MissingApiKeyError, classify_error
from ..models.config import LLMConfig
from ..prompts.templates import PreparedRequest

logger = logging.getLogger(__name__)


def create_chat_model(config: LLMConfig) -> BaseChatModel:
    """根据配置创建 ChatOpenAI（不重试）"""
    from langchain_openai import ChatOpenAI

    return ChatOpenAI(
        model=config.model,
        api_key=config.api_key,
        base_url=config.base_url,
        temperature=config.temperature,
        max_tokens=config.max_tokens,
        timeout=config.timeout,
        max_retries=0,
    )


class InferenceClient:
    """发送请求并返回模型的原始文本

    Args:
        config: LLM 配置，api_key 不能为空
        llm: 可选的聊天模型，默认根据配置创建 ChatOpenAI

    Raises:
        MissingApiKeyError: 未配置 API Key
    """

    def __init__(self, config: LLMConfig, llm: Optional[BaseChatModel] = None):
        if not config.api_key or not config.api_key.strip():
            raise MissingApiKeyError(
                "未配置 API Key，请在配置文件的 [llm] 中设置 api_key 或设置 SNIPPET_REVIEWER_API_KEY 环境变量"
            )

        self.config = config
        self._llm = llm if llm is not None else create_chat_model(config)

    @property
    def model_name(self) -> str:
        return self.config.model

    async def complete(self, request: PreparedRequest) -> str:
        """调用模型

        Args:
            request: 构建好的请求，带 schema 时要求 JSON 输出

        Returns:
            模型返回的原始文本

        Raises:
            ApiError: 调用失败（超时归类为 NETWORK）
        """
        runnable = self._llm
        if request.schema is not None:
            runnable = runnable.bind(
                response_format={"type": "json_schema", "json_schema": request.schema}
            )
        chain = runnable | StrOutputParser()

        logger.debug("=" * 80)
        logger.debug("【调用 LLM API】 operation=%s model=%s", request.operation.value, self.config.model)
        logger.debug("=" * 80)
        for i, msg in enumerate(request.messages, 1):
            logger.debug("--- Message %d (%s) ---", i, type(msg).__name__)
            logger.debug(msg.content)

        try:
            result = await asyncio.wait_for(chain.ainvoke(request.messages), timeout=self.config.timeout)
        except asyncio.TimeoutError as e:
            raise ApiError(
                ApiErrorKind.NETWORK, f"模型服务在 {self.config.timeout} 秒内没有响应"
            ) from e
        except Exception as e:
            logger.debug("LLM 调用失败: %r", e)
            raise classify_error(e) from e

        logger.debug("=" * 80)
        logger.debug("【LLM 原始响应】")
        logger.debug("=" * 80)
        logger.debug(result)

        return result
