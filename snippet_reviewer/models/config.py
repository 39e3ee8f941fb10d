"""配置数据模型"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class LLMConfig(BaseModel):
    """LLM 配置"""

    model: str = Field(default="gpt-4o", description="模型名称，三种操作共用")
    api_key: str = Field(default="", description="API Key")
    base_url: Optional[str] = Field(None, description="Base URL，支持 ollama 等兼容接口")
    temperature: float = Field(default=0.1, description="温度参数")
    max_tokens: int = Field(default=4000, description="最大 token 数")
    timeout: float = Field(default=60, description="超时时间（秒）")


class ReviewerConfig(BaseModel):
    """评审器配置"""

    model_config = ConfigDict(extra="ignore")

    llm: LLMConfig = Field(default_factory=LLMConfig, description="LLM 配置")
    min_detection_length: int = Field(
        default=20, description="短于此长度（去除空白）的片段不调用模型检测语言"
    )
    detection_prefix_length: int = Field(
        default=2000, description="语言检测只发送代码的前 N 个字符"
    )
    history_file: Optional[str] = Field(
        ".snippet-review-history.json", description="评审历史文件，为空则不记录"
    )
    max_history_entries: int = Field(default=50, description="最多保留的历史条数")
