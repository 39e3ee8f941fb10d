"""测试公共 fixture"""

import asyncio
import json
from typing import Any, Optional

import pytest
from langchain_core.language_models import BaseChatModel
from langchain_core.messages import AIMessage, BaseMessage
from langchain_core.outputs import ChatGeneration, ChatResult
from pydantic import Field

from snippet_reviewer.chains.review_chain import ReviewOrchestrator
from snippet_reviewer.models.config import LLMConfig, ReviewerConfig


class FakeInferenceClient:
    """按顺序返回预设响应，记录收到的请求"""

    def __init__(self, responses: Optional[list] = None):
        self.responses = list(responses or [])
        self.requests = []

    async def complete(self, request):
        self.requests.append(request)
        item = self.responses.pop(0)
        if isinstance(item, BaseException):
            raise item
        return item


class RecordingChatModel(BaseChatModel):
    """记录调用参数的聊天模型"""

    responses: list[str] = Field(default_factory=list)
    calls: list[dict] = Field(default_factory=list)
    delay: float = 0.0
    error: Any = None

    @property
    def _llm_type(self) -> str:
        return "recording"

    def _generate(
        self,
        messages: list[BaseMessage],
        stop: Optional[list[str]] = None,
        run_manager: Any = None,
        **kwargs: Any,
    ) -> ChatResult:
        self.calls.append({"messages": messages, "kwargs": kwargs})
        if self.error is not None:
            raise self.error
        text = self.responses.pop(0)
        return ChatResult(generations=[ChatGeneration(message=AIMessage(content=text))])

    async def _agenerate(
        self,
        messages: list[BaseMessage],
        stop: Optional[list[str]] = None,
        run_manager: Any = None,
        **kwargs: Any,
    ) -> ChatResult:
        if self.delay:
            await asyncio.sleep(self.delay)
        return self._generate(messages, stop=stop, **kwargs)


def review_json(summary="代码整体清晰", points=None, suggested_code=None) -> str:
    if points is None:
        points = [{"topic": "可读性", "feedback": "建议为函数添加 **类型注解**。"}]
    return json.dumps(
        {"review": {"summary": summary, "points": points}, "suggestedCode": suggested_code},
        ensure_ascii=False,
    )


def detection_json(language="python", confidence="high") -> str:
    return json.dumps({"language": language, "confidence": confidence})


@pytest.fixture
def llm_config():
    return LLMConfig(model="test-model", api_key="sk-test", timeout=5)


@pytest.fixture
def reviewer_config(llm_config, tmp_path):
    return ReviewerConfig(llm=llm_config, history_file=str(tmp_path / "history.json"))


@pytest.fixture
def fake_client():
    return FakeInferenceClient()


@pytest.fixture
def orchestrator(fake_client, reviewer_config):
    return ReviewOrchestrator(fake_client, reviewer_config)
