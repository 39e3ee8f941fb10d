"""模型客户端测试"""

import httpx
import openai
import pytest

from conftest import RecordingChatModel, review_json
from snippet_reviewer.chains.inference import InferenceClient
from snippet_reviewer.errors import ApiError, ApiErrorKind, MissingApiKeyError
from snippet_reviewer.models.config import LLMConfig
from snippet_reviewer.models.review_result import ReviewPoint
from snippet_reviewer.prompts.templates import PromptFactory


class TestConstruction:
    @pytest.mark.parametrize("api_key", ["", "   "])
    def test_missing_api_key(self, api_key):
        with pytest.raises(MissingApiKeyError):
            InferenceClient(LLMConfig(api_key=api_key), llm=RecordingChatModel())

    def test_default_model_is_chat_openai(self, llm_config):
        from langchain_openai import ChatOpenAI

        client = InferenceClient(llm_config)

        assert isinstance(client._llm, ChatOpenAI)
        assert client._llm.max_retries == 0
        assert client.model_name == "test-model"


class TestComplete:
    @pytest.mark.asyncio
    async def test_schema_is_bound_as_response_format(self, llm_config):
        llm = RecordingChatModel(responses=[review_json()])
        client = InferenceClient(llm_config, llm=llm)
        request = PromptFactory.build_review("print(1)", "python")

        raw = await client.complete(request)

        assert raw == review_json()
        response_format = llm.calls[0]["kwargs"]["response_format"]
        assert response_format == {"type": "json_schema", "json_schema": request.schema}
        assert llm.calls[0]["messages"][-1].content == request.instruction

    @pytest.mark.asyncio
    async def test_explain_has_no_response_format(self, llm_config):
        llm = RecordingChatModel(responses=["## 解释"])
        client = InferenceClient(llm_config, llm=llm)
        request = PromptFactory.build_explain("print(1)", "python", ReviewPoint(topic="t", feedback="f"))

        raw = await client.complete(request)

        assert raw == "## 解释"
        assert "response_format" not in llm.calls[0]["kwargs"]

    @pytest.mark.asyncio
    async def test_timeout_is_network_error(self):
        config = LLMConfig(api_key="sk-test", timeout=0.05)
        client = InferenceClient(config, llm=RecordingChatModel(responses=["{}"], delay=1.0))

        with pytest.raises(ApiError) as exc_info:
            await client.complete(PromptFactory.build_detect("print('hello world')"))

        assert exc_info.value.kind == ApiErrorKind.NETWORK

    @pytest.mark.asyncio
    async def test_transport_error_is_classified(self, llm_config):
        response = httpx.Response(401, request=httpx.Request("POST", "https://api.example.com"))
        error = openai.AuthenticationError("Incorrect API key provided", response=response, body=None)
        client = InferenceClient(llm_config, llm=RecordingChatModel(error=error))

        with pytest.raises(ApiError) as exc_info:
            await client.complete(PromptFactory.build_review("print(1)", "python"))

        assert exc_info.value.kind == ApiErrorKind.API_KEY
