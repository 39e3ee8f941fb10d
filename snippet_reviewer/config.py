"""配置加载模块"""

import os
from pathlib import Path

import toml

from .models.config import LLMConfig, ReviewerConfig


DEFAULT_CONFIG_PATH = ".snippet-reviewer.toml"
DEFAULT_CONFIG_CONTENT = """# Snippet Reviewer 配置文件

[llm]
model = "gpt-4o"
api_key = ""  # 也可以通过 SNIPPET_REVIEWER_API_KEY 环境变量设置
# base_url = "http://localhost:11434/v1"  # 例如 ollama 等兼容接口
temperature = 0.1
max_tokens = 4000
timeout = 60

[reviewer]
min_detection_length = 20
detection_prefix_length = 2000
history_file = ".snippet-review-history.json"  # 设置为 "" 则不记录历史
max_history_entries = 50
"""


def find_config_file(start_dir: Path | None = None) -> Path | None:
    """从当前目录向上查找配置文件"""
    if start_dir is None:
        start_dir = Path.cwd()

    current = start_dir
    while True:
        config_path = current / DEFAULT_CONFIG_PATH
        if config_path.exists():
            return config_path
        if current == current.parent:
            return None
        current = current.parent


def load_config(config_path: Path | None = None) -> ReviewerConfig:
    """加载配置

    Args:
        config_path: 配置文件路径，如果为 None 则自动查找

    Returns:
        ReviewerConfig: 配置对象

    Raises:
        FileNotFoundError: 配置文件不存在
        ValidationError: 配置格式错误
    """
    if config_path is None:
        config_path = find_config_file()

    if config_path is None or not config_path.exists():
        raise FileNotFoundError(
            f"配置文件不存在: {DEFAULT_CONFIG_PATH}\n"
            f"请创建配置文件或运行: snippet-reviewer init"
        )

    data = toml.load(config_path)

    # 构建 LLM 配置
    llm_data = data.get("llm", {})
    # 支持环境变量覆盖
    llm_data["api_key"] = os.getenv("SNIPPET_REVIEWER_API_KEY", llm_data.get("api_key", ""))
    llm_data["base_url"] = os.getenv("SNIPPET_REVIEWER_BASE_URL", llm_data.get("base_url"))
    if os.getenv("SNIPPET_REVIEWER_MODEL"):
        llm_data["model"] = os.environ["SNIPPET_REVIEWER_MODEL"]

    # 构建评审器配置
    reviewer_data = data.get("reviewer", {})
    if reviewer_data.get("history_file") == "":
        reviewer_data["history_file"] = None
    reviewer_data["llm"] = LLMConfig(**llm_data)

    return ReviewerConfig(**reviewer_data)


def create_default_config(path: Path | None = None) -> Path:
    """创建默认配置文件"""
    if path is None:
        path = Path.cwd() / DEFAULT_CONFIG_PATH

    if path.exists():
        raise FileExistsError(f"配置文件已存在: {path}")

    path.write_text(DEFAULT_CONFIG_CONTENT, encoding="utf-8")
    return path
