"""LangChain 提示词模板"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from langchain_core.messages import BaseMessage
from langchain_core.prompts import ChatPromptTemplate

from ..languages import FALLBACK_LANGUAGE, supported_tags
from ..models.review_result import ReviewPoint
from .schemas import detection_schema, review_schema


class Operation(str, Enum):
    """三种模型调用"""

    DETECT = "detect"
    REVIEW = "review"
    EXPLAIN = "explain"


# 通用系统提示
SYSTEM_PROMPT = """你是一名资深的代码评审专家，熟悉各种主流编程语言的惯用写法、性能特征和安全风险。
回答要具体、可执行，避免空泛的建议。"""


DETECT_PROMPT = """请判断下面代码片段使用的编程语言。

只能从以下语言标签中选择一个：
{languages}

输出格式要求（严格遵守）：
{{
  "language": "语言标签",
  "confidence": "high/medium/low"
}}

如果无法确定语言，或者片段太短无法判断，confidence 必须为 "low"，language 使用 "{fallback}"。

代码片段：
```
{code}
```
"""


REVIEW_PROMPT = """请评审下面这段 {language} 代码。{file_context}

评审重点：
1. **正确性与错误**：逻辑错误、潜在 bug、未处理的边界情况
2. **最佳实践与可读性**：是否符合 {language} 的惯用写法和约定，是否清晰、简洁、易于维护
3. **性能**：潜在的性能瓶颈，更高效的实现方式
4. **安全性**：明显的安全漏洞
5. **改进建议**：具体、可执行的修改建议

输出格式要求（严格遵守）：
{{
  "review": {{
    "summary": "对代码整体质量的简短总结",
    "points": [
      {{"topic": "简短主题", "feedback": "Markdown 格式的详细意见"}}
    ]
  }},
  "suggestedCode": "应用改进后的完整代码，或 null"
}}

关于 suggestedCode：
- 返回应用所有改进后的完整代码，必须可以直接替换原代码
- 如果不需要任何修改，suggestedCode 必须为 null

代码：
```{language}
{code}
```
"""


EXPLAIN_PROMPT = """下面是一段 {language} 代码，以及针对它的一条评审意见。
请用 Markdown 更深入地解释这条意见：说明问题的原因、可能造成的影响以及如何修复。
如果适用，请给出修改前后的对比示例代码。

评审意见主题：{topic}

评审意见内容：
{feedback}

原始代码：
```{language}
{code}
```
"""


@dataclass(frozen=True)
class PreparedRequest:
    """发送给模型的请求"""

    operation: Operation
    messages: list[BaseMessage]
    schema: Optional[dict] = None

    @property
    def instruction(self) -> str:
        """用户指令文本（最后一条消息）"""
        return self.messages[-1].content


class PromptFactory:
    """根据操作类型构建提示词"""

    _prompts = {
        Operation.DETECT: DETECT_PROMPT,
        Operation.REVIEW: REVIEW_PROMPT,
        Operation.EXPLAIN: EXPLAIN_PROMPT,
    }

    @classmethod
    def get_prompt(cls, operation: Operation) -> ChatPromptTemplate:
        """获取指定操作的 prompt 模板

        Args:
            operation: 操作类型

        Returns:
            ChatPromptTemplate: 提示词模板
        """
        return ChatPromptTemplate.from_messages(
            [("system", SYSTEM_PROMPT), ("human", cls._prompts[operation])]
        )

    @classmethod
    def build_detect(cls, code: str, prefix_length: int = 2000) -> PreparedRequest:
        """语言检测请求，只发送代码前缀"""
        messages = cls.get_prompt(Operation.DETECT).format_messages(
            code=code[:prefix_length],
            languages=", ".join(supported_tags()),
            fallback=FALLBACK_LANGUAGE.value,
        )
        return PreparedRequest(Operation.DETECT, messages, detection_schema())

    @classmethod
    def build_review(
        cls, code: str, language: str, original_file_name: Optional[str] = None
    ) -> PreparedRequest:
        """代码评审请求，总是发送完整代码"""
        file_context = ""
        if original_file_name:
            file_context = f"代码来自文件 `{original_file_name}`。"

        messages = cls.get_prompt(Operation.REVIEW).format_messages(
            code=code,
            language=language,
            file_context=file_context,
        )
        return PreparedRequest(Operation.REVIEW, messages, review_schema())

    @classmethod
    def build_explain(cls, code: str, language: str, point: ReviewPoint) -> PreparedRequest:
        """针对单条意见的深入解释请求，无输出结构"""
        messages = cls.get_prompt(Operation.EXPLAIN).format_messages(
            code=code,
            language=language,
            topic=point.topic,
            feedback=point.feedback,
        )
        return PreparedRequest(Operation.EXPLAIN, messages)
