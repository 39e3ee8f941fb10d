"""支持的编程语言"""

from enum import Enum
from pathlib import PurePath
from typing import Optional


class Language(str, Enum):
    """可评审的语言标签"""

    JAVASCRIPT = "javascript"
    TYPESCRIPT = "typescript"
    PYTHON = "python"
    JAVA = "java"
    CSHARP = "csharp"
    GO = "go"
    RUST = "rust"
    HTML = "html"
    CSS = "css"
    SQL = "sql"
    JSON = "json"
    CPP = "cpp"
    PHP = "php"
    RUBY = "ruby"
    KOTLIN = "kotlin"
    SWIFT = "swift"
    BASH = "bash"


# 自动检测标签，不是合法的目标语言
AUTO = "auto"

# 检测失败时的兜底语言（下拉列表第一项）
FALLBACK_LANGUAGE = Language.JAVASCRIPT

LANGUAGE_LABELS = {
    Language.JAVASCRIPT: "JavaScript",
    Language.TYPESCRIPT: "TypeScript",
    Language.PYTHON: "Python",
    Language.JAVA: "Java",
    Language.CSHARP: "C#",
    Language.GO: "Go",
    Language.RUST: "Rust",
    Language.HTML: "HTML",
    Language.CSS: "CSS",
    Language.SQL: "SQL",
    Language.JSON: "JSON",
    Language.CPP: "C++",
    Language.PHP: "PHP",
    Language.RUBY: "Ruby",
    Language.KOTLIN: "Kotlin",
    Language.SWIFT: "Swift",
    Language.BASH: "Bash",
}

# 上传文件时根据后缀预选语言
EXTENSION_LANGUAGES = {
    ".js": Language.JAVASCRIPT,
    ".jsx": Language.JAVASCRIPT,
    ".ts": Language.TYPESCRIPT,
    ".tsx": Language.TYPESCRIPT,
    ".py": Language.PYTHON,
    ".java": Language.JAVA,
    ".cs": Language.CSHARP,
    ".go": Language.GO,
    ".rs": Language.RUST,
    ".html": Language.HTML,
    ".css": Language.CSS,
    ".sql": Language.SQL,
    ".json": Language.JSON,
}

# 导出建议代码时使用的默认后缀
LANGUAGE_EXTENSIONS = {
    Language.JAVASCRIPT: ".js",
    Language.TYPESCRIPT: ".ts",
    Language.PYTHON: ".py",
    Language.JAVA: ".java",
    Language.CSHARP: ".cs",
    Language.GO: ".go",
    Language.RUST: ".rs",
    Language.HTML: ".html",
    Language.CSS: ".css",
    Language.SQL: ".sql",
    Language.JSON: ".json",
    Language.CPP: ".cpp",
    Language.PHP: ".php",
    Language.RUBY: ".rb",
    Language.KOTLIN: ".kt",
    Language.SWIFT: ".swift",
    Language.BASH: ".sh",
}


def supported_tags() -> list[str]:
    """所有合法语言标签（不含 auto）"""
    return [language.value for language in Language]


def is_supported(tag: Optional[str]) -> bool:
    return tag in supported_tags()


def language_from_filename(file_name: Optional[str]) -> str:
    """根据文件后缀推断语言

    Args:
        file_name: 文件名或路径

    Returns:
        语言标签，无法识别时返回 "auto"
    """
    if not file_name:
        return AUTO

    suffix = PurePath(file_name).suffix.lower()
    language = EXTENSION_LANGUAGES.get(suffix)
    return language.value if language else AUTO


def extension_for(tag: str) -> str:
    """语言标签对应的文件后缀，未知时为 .txt"""
    try:
        return LANGUAGE_EXTENSIONS[Language(tag)]
    except ValueError:
        return ".txt"
