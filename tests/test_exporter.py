"""导出测试"""

from datetime import datetime

from snippet_reviewer.exporter import (
    insert_suffix,
    render_markdown,
    report_filename,
    suggested_code_filename,
)
from snippet_reviewer.models.review_result import CodeReview, ReviewPoint, StructuredReview

NOW = datetime(2024, 5, 6, 7, 8, 9)


def make_review(suggested_code=None) -> CodeReview:
    return CodeReview(
        review=StructuredReview(
            summary="整体不错",
            points=[
                ReviewPoint(topic="命名", feedback="使用更有意义的变量名"),
                ReviewPoint(topic="性能", feedback="避免重复计算"),
            ],
        ),
        suggested_code=suggested_code,
    )


class TestFilenames:
    def test_insert_suffix(self):
        assert insert_suffix("app.py", "_suggested") == "app_suggested.py"
        assert insert_suffix("archive.tar.gz", "_x") == "archive.tar_x.gz"
        assert insert_suffix("Makefile", "_review", ".md") == "Makefile_review.md"

    def test_report_filename(self):
        assert report_filename("src/app.py") == "app_review.md"
        assert report_filename(None, now=NOW) == "code-review-20240506-070809.md"

    def test_suggested_code_filename(self):
        assert suggested_code_filename("python", "calc.py") == "calc_suggested.py"
        assert suggested_code_filename("rust", None, now=NOW) == "suggested-code-20240506-070809.rs"


class TestRenderMarkdown:
    def test_contains_summary_and_numbered_points(self):
        text = render_markdown(make_review(), "python", generated_at=NOW)

        assert text.startswith("# 代码评审报告")
        assert "- 语言: Python" in text
        assert "整体不错" in text
        assert text.index("### 1. 命名") < text.index("### 2. 性能")

    def test_includes_code_blocks(self):
        text = render_markdown(
            make_review("print('new')"),
            "python",
            original_code="print('old')",
            original_file_name="app.py",
            generated_at=NOW,
        )

        assert "- 文件: `app.py`" in text
        assert "```python\nprint('old')\n```" in text
        assert "```python\nprint('new')\n```" in text

    def test_null_suggestion(self):
        text = render_markdown(make_review(None), "python", generated_at=NOW)

        assert "无需修改。" in text

    def test_without_code(self):
        text = render_markdown(
            make_review("print('new')"), "python", original_code="print('old')", include_code=False
        )

        assert "print('old')" not in text
        assert "print('new')" not in text

    def test_fence_grows_when_code_has_backticks(self):
        code = "doc = '''\n```\nexample\n```\n'''"

        text = render_markdown(make_review(None), "python", original_code=code, generated_at=NOW)

        assert "````python\n" in text
