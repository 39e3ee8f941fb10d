"""将评审结果导出为 Markdown / 代码文件"""

from datetime import datetime
from pathlib import PurePath
from typing import Optional

from .languages import LANGUAGE_LABELS, Language, extension_for
from .models.review_result import CodeReview

TIMESTAMP_FORMAT = "%Y%m%d-%H%M%S"


def insert_suffix(file_name: str, suffix: str, extension: Optional[str] = None) -> str:
    """在扩展名前插入后缀

    >>> insert_suffix("app.py", "_suggested")
    'app_suggested.py'
    >>> insert_suffix("app.py", "_review", ".md")
    'app_review.md'
    """
    path = PurePath(file_name)
    ext = path.suffix if extension is None else extension
    return f"{path.stem}{suffix}{ext}"


def report_filename(original_file_name: Optional[str] = None, now: Optional[datetime] = None) -> str:
    """Markdown 报告的文件名"""
    if original_file_name:
        return insert_suffix(PurePath(original_file_name).name, "_review", ".md")
    now = now or datetime.now()
    return f"code-review-{now.strftime(TIMESTAMP_FORMAT)}.md"


def suggested_code_filename(
    language: str, original_file_name: Optional[str] = None, now: Optional[datetime] = None
) -> str:
    """建议代码的文件名"""
    if original_file_name:
        return insert_suffix(PurePath(original_file_name).name, "_suggested")
    now = now or datetime.now()
    return f"suggested-code-{now.strftime(TIMESTAMP_FORMAT)}{extension_for(language)}"


def _language_label(language: str) -> str:
    try:
        return LANGUAGE_LABELS[Language(language)]
    except ValueError:
        return language


def _fence(code: str, language: str) -> str:
    # 代码本身含有 ``` 时加长围栏
    fence = "```"
    while fence in code:
        fence += "`"
    return f"{fence}{language}\n{code.rstrip()}\n{fence}"


def render_markdown(
    review: CodeReview,
    language: str,
    original_code: Optional[str] = None,
    original_file_name: Optional[str] = None,
    include_code: bool = True,
    generated_at: Optional[datetime] = None,
) -> str:
    """生成 Markdown 报告

    Args:
        review: 评审结果
        language: 语言标签
        original_code: 原始代码
        original_file_name: 原始文件名
        include_code: 是否包含原始代码与建议代码
        generated_at: 报告时间

    Returns:
        Markdown 文本
    """
    generated_at = generated_at or datetime.now()
    lines = ["# 代码评审报告", ""]

    if original_file_name:
        lines.append(f"- 文件: `{original_file_name}`")
    lines.append(f"- 语言: {_language_label(language)}")
    lines.append(f"- 时间: {generated_at.strftime('%Y-%m-%d %H:%M:%S')}")
    lines.extend(["", "## 摘要", "", review.review.summary.strip(), ""])

    if review.review.points:
        lines.extend(["## 评审意见", ""])
        for i, point in enumerate(review.review.points, 1):
            lines.extend([f"### {i}. {point.topic}", "", point.feedback.strip(), ""])

    if include_code:
        if original_code:
            lines.extend(["## 原始代码", "", _fence(original_code, language), ""])
        if review.suggested_code is not None:
            lines.extend(["## 建议代码", "", _fence(review.suggested_code, language), ""])
        else:
            lines.extend(["## 建议代码", "", "无需修改。", ""])

    return "\n".join(lines).rstrip() + "\n"
