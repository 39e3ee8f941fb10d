"""CLI 入口"""

import asyncio
import sys
from contextlib import contextmanager
from pathlib import Path
from typing import Optional

import click

from .chains import ReviewOrchestrator, create_orchestrator, setup_debug_logging
from .chains.review_chain import require_code
from .config import create_default_config, find_config_file, load_config
from .errors import ApiError, LanguageDetectionAborted, MissingApiKeyError, SnippetValidationError
from .exporter import render_markdown, report_filename, suggested_code_filename
from .history import HistoryEntry, HistoryStore
from .languages import AUTO, language_from_filename, supported_tags
from .models.config import ReviewerConfig
from .models.review_result import ConfidenceLevel, ReviewOutcome, ReviewPoint, ReviewRequest

LANGUAGE_CHOICES = [AUTO] + supported_tags()

CONFIDENCE_COLORS = {
    ConfidenceLevel.HIGH: "green",
    ConfidenceLevel.MEDIUM: "yellow",
    ConfidenceLevel.LOW: "red",
}


def print_review_result(outcome: ReviewOutcome, original_code: str, file_name: Optional[str] = None):
    """打印评审结果

    Args:
        outcome: 评审结果
        original_code: 原始代码
        file_name: 文件名
    """
    # 分隔线
    separator = "=" * 60
    review = outcome.review

    click.echo()
    click.echo(separator)
    click.echo("  AI 代码评审报告")
    click.echo(separator)

    if file_name:
        click.echo(f"文件: {file_name}")
    if outcome.detection:
        color = CONFIDENCE_COLORS[outcome.detection.confidence]
        confidence = click.style(outcome.detection.confidence.value, fg=color)
        click.echo(f"语言: {outcome.language.value}（自动检测，置信度 {confidence}）")
    else:
        click.echo(f"语言: {outcome.language.value}")
    click.echo(separator)
    click.echo(f"摘要: {review.review.summary}")
    click.echo(separator)

    if review.review.points:
        click.echo(f"评审意见: {len(review.review.points)} 条")
        click.echo(separator)
        for i, point in enumerate(review.review.points, 1):
            click.echo(f"{i}. {click.style(point.topic, bold=True)}")
            for line in point.feedback.strip().splitlines():
                click.echo(f"   {line}")
            click.echo()
    else:
        click.echo(click.style("没有评审意见", fg="green"))

    if review.has_changes(original_code):
        click.echo(separator)
        click.echo(click.style("建议代码:", fg="cyan", bold=True))
        click.echo(review.suggested_code)
    else:
        click.echo(click.style("无需修改代码", fg="green"))

    click.echo(separator)
    click.echo()


def read_source(path: str) -> tuple[str, Optional[str]]:
    """读取代码，"-" 表示标准输入

    Returns:
        (代码, 文件名)
    """
    if path == "-":
        return click.get_text_stream("stdin").read(), None

    source = Path(path)
    try:
        return source.read_text(encoding="utf-8"), source.name
    except UnicodeDecodeError:
        return source.read_text(encoding="latin-1", errors="ignore"), source.name


def resolve_config(config: Optional[str]) -> ReviewerConfig:
    if config:
        return load_config(Path(config))
    return load_config()


def history_store(cfg: ReviewerConfig) -> Optional[HistoryStore]:
    if not cfg.history_file:
        return None
    return HistoryStore(Path(cfg.history_file), cfg.max_history_entries)


async def _review_and_explain(
    orchestrator: ReviewOrchestrator, request: ReviewRequest, explain_index: Optional[int]
) -> tuple[ReviewOutcome, Optional[str]]:
    # 同一个事件循环内完成所有调用
    outcome = await orchestrator.review_snippet(request)
    if explain_index is None:
        return outcome, None

    points = outcome.review.review.points
    if not 1 <= explain_index <= len(points):
        return outcome, None
    explanation = await orchestrator.explain_further(
        request.code, outcome.language.value, points[explain_index - 1]
    )
    return outcome, explanation


async def _detect_and_explain(
    orchestrator: ReviewOrchestrator, code: str, language: str, point: ReviewPoint
) -> str:
    require_code(code)
    if language == AUTO:
        detection = await orchestrator.detect_language(code)
        if not detection.is_confident:
            raise LanguageDetectionAborted(detection)
        language = detection.language.value
    return await orchestrator.explain_further(code, language, point)


@contextmanager
def handle_errors():
    """统一的错误输出"""
    try:
        yield
    except LanguageDetectionAborted as e:
        click.echo(click.style(f"[中止] {e}", fg="yellow", bold=True), err=True)
        click.echo(f"检测结果: {e.detection.language.value}（置信度 {e.detection.confidence.value}）", err=True)
        click.echo("请使用 --language 指定语言，例如: snippet-reviewer review app.txt --language python", err=True)
        sys.exit(1)
    except SnippetValidationError as e:
        click.echo(click.style(f"[错误] {e}", fg="yellow"), err=True)
        sys.exit(1)
    except MissingApiKeyError as e:
        click.echo(click.style(f"[错误] {e}", fg="red"), err=True)
        sys.exit(1)
    except ApiError as e:
        click.echo(click.style(f"[错误] {e.kind.value}: {e.message}", fg="red"), err=True)
        sys.exit(1)
    except ValueError as e:
        # 配置格式错误（toml / pydantic）
        click.echo(click.style(f"[错误] {e}", fg="red"), err=True)
        sys.exit(1)
    except OSError as e:
        click.echo(click.style(f"[错误] {e}", fg="red"), err=True)
        sys.exit(1)


@click.group()
@click.option("--verbose", "-v", is_flag=True, help="输出调试日志")
@click.option("--log-file", type=click.Path(), help="调试日志文件")
def cli(verbose: bool, log_file: Optional[str]):
    """Snippet Reviewer - 基于 LangChain 的代码片段评审工具"""
    setup_debug_logging(verbose=verbose, log_file=log_file)


@cli.command()
@click.option("--config", "-c", type=click.Path(exists=True), help="配置文件路径")
@click.option(
    "--language", "-l", type=click.Choice(LANGUAGE_CHOICES), help="代码语言，默认根据文件后缀判断，否则自动检测"
)
@click.option("--output", "-o", type=click.Path(), help="将评审报告保存为 Markdown 文件")
@click.option("--export", is_flag=True, help="按文件名自动生成 Markdown 报告")
@click.option("--no-code", is_flag=True, help="报告中不包含原始代码与建议代码")
@click.option("--apply", is_flag=True, help="用建议代码覆盖原文件")
@click.option("--save-suggested", is_flag=True, help="将建议代码另存为新文件")
@click.option("--explain", "explain_index", type=int, help="评审后深入解释第 N 条意见")
@click.argument("path", type=click.Path(exists=True, allow_dash=True))
def review(
    config: Optional[str],
    language: Optional[str],
    output: Optional[str],
    export: bool,
    no_code: bool,
    apply: bool,
    save_suggested: bool,
    explain_index: Optional[int],
    path: str,
):
    """评审代码文件（"-" 从标准输入读取）"""
    with handle_errors():
        cfg = resolve_config(config)
        code, file_name = read_source(path)
        if language is None:
            language = language_from_filename(file_name)

        request = ReviewRequest(code=code, language=language, original_file_name=file_name)
        orchestrator = create_orchestrator(cfg)

        click.echo("[AI 代码评审] 正在分析...")
        outcome, explanation = asyncio.run(_review_and_explain(orchestrator, request, explain_index))
        print_review_result(outcome, code, file_name)

        store = history_store(cfg)
        if store:
            store.add(
                HistoryEntry(
                    language=outcome.language.value,
                    code=code,
                    original_file_name=file_name,
                    review=outcome.review,
                )
            )

        report_path = Path(output) if output else (Path(report_filename(file_name)) if export else None)
        if report_path:
            report_path.write_text(
                render_markdown(
                    outcome.review,
                    outcome.language.value,
                    original_code=code,
                    original_file_name=file_name,
                    include_code=not no_code,
                ),
                encoding="utf-8",
            )
            click.echo(f"评审报告已保存到: {report_path}")

        has_changes = outcome.review.has_changes(code)
        if save_suggested and has_changes:
            target = Path(suggested_code_filename(outcome.language.value, file_name))
            target.write_text(outcome.review.suggested_code, encoding="utf-8")
            click.echo(f"建议代码已保存到: {target}")

        if apply:
            if not has_changes:
                click.echo(click.style("[跳过] 没有可应用的修改", fg="yellow"))
            elif path == "-":
                click.echo(click.style("[跳过] 标准输入无法应用修改，请使用 --save-suggested", fg="yellow"))
            else:
                Path(path).write_text(outcome.review.suggested_code, encoding="utf-8")
                click.echo(click.style(f"[成功] 已应用建议代码: {path}", fg="green"))

        if explain_index is not None and explanation is None:
            click.echo(
                click.style(
                    f"[跳过] 意见编号超出范围: {explain_index}（共 {len(outcome.review.review.points)} 条）",
                    fg="yellow",
                )
            )
        elif explanation is not None:
            point = outcome.review.review.points[explain_index - 1]
            click.echo(click.style(f"[深入解释] {point.topic}", fg="cyan", bold=True))
            click.echo(explanation)


@cli.command()
@click.option("--config", "-c", type=click.Path(exists=True), help="配置文件路径")
@click.argument("path", type=click.Path(exists=True, allow_dash=True))
def detect(config: Optional[str], path: str):
    """检测代码语言"""
    with handle_errors():
        cfg = resolve_config(config)
        code, _ = read_source(path)
        orchestrator = create_orchestrator(cfg)

        result = asyncio.run(orchestrator.detect_language(code))
        color = CONFIDENCE_COLORS[result.confidence]
        click.echo(f"语言: {result.language.value}")
        click.echo(f"置信度: {click.style(result.confidence.value, fg=color)}")


@cli.command()
@click.option("--config", "-c", type=click.Path(exists=True), help="配置文件路径")
@click.option("--language", "-l", type=click.Choice(LANGUAGE_CHOICES), help="代码语言")
@click.option("--topic", required=True, help="评审意见主题")
@click.option("--feedback", required=True, help="评审意见内容")
@click.argument("path", type=click.Path(exists=True, allow_dash=True))
def explain(config: Optional[str], language: Optional[str], topic: str, feedback: str, path: str):
    """深入解释一条评审意见"""
    with handle_errors():
        cfg = resolve_config(config)
        code, file_name = read_source(path)
        orchestrator = create_orchestrator(cfg)

        if language is None:
            language = language_from_filename(file_name)

        point = ReviewPoint(topic=topic, feedback=feedback)
        text = asyncio.run(_detect_and_explain(orchestrator, code, language, point))
        click.echo(text)


@cli.command()
@click.option("--config", "-c", type=click.Path(exists=True), help="配置文件路径")
@click.option("--limit", "-n", default=10, show_default=True, help="显示条数")
@click.option("--show", type=int, help="显示第 N 条记录的完整报告")
@click.option("--clear", is_flag=True, help="清空历史")
def history(config: Optional[str], limit: int, show: Optional[int], clear: bool):
    """查看评审历史"""
    with handle_errors():
        cfg = resolve_config(config)
        store = history_store(cfg)
        if store is None:
            click.echo(click.style("[跳过] 未启用评审历史（history_file 为空）", fg="yellow"))
            return

        if clear:
            store.clear()
            click.echo(click.style("[成功] 评审历史已清空", fg="green"))
            return

        entries = store.load()
        if not entries:
            click.echo("暂无评审历史")
            return

        if show is not None:
            if not 1 <= show <= len(entries):
                raise SnippetValidationError(f"记录编号超出范围: {show}（共 {len(entries)} 条）")
            entry = entries[show - 1]
            click.echo(
                render_markdown(
                    entry.review,
                    entry.language,
                    original_code=entry.code,
                    original_file_name=entry.original_file_name,
                    generated_at=entry.created_at,
                )
            )
            return

        for i, entry in enumerate(entries[:limit], 1):
            summary = entry.review.review.summary.strip().split("\n", 1)[0]
            name = entry.original_file_name or "(粘贴的代码)"
            click.echo(f"{i}. {entry.created_at:%Y-%m-%d %H:%M}  [{entry.language}] {name}")
            click.echo(f"   {summary}")


@cli.command()
@click.option("--path", "-p", type=click.Path(), help="配置文件保存路径")
def init(path: Optional[str]):
    """初始化配置文件"""
    with handle_errors():
        config_path = create_default_config(Path(path) if path else None)
        click.echo(click.style(f"[成功] 配置文件已创建: {config_path}", fg="green", bold=True))
        click.echo("\n请编辑配置文件，设置你的 API Key 等信息。")


@cli.command()
def check():
    """检查配置是否正确"""
    config_path = find_config_file()
    if not config_path:
        click.echo(click.style("[错误] 未找到配置文件", fg="red"), err=True)
        click.echo("请运行: snippet-reviewer init")
        sys.exit(1)

    try:
        click.echo(f"配置文件: {config_path}")
        cfg = load_config(config_path)
        click.echo(f"模型: {cfg.llm.model}")
        click.echo(f"Base URL: {cfg.llm.base_url or '默认'}")
        click.echo(f"超时: {cfg.llm.timeout} 秒")
        click.echo(f"评审历史: {cfg.history_file or '未启用'}")
        if not cfg.llm.api_key:
            click.echo(click.style("[错误] 未配置 API Key", fg="red"), err=True)
            sys.exit(1)
        click.echo(click.style("[成功] 配置有效", fg="green"))

    except Exception as e:
        click.echo(click.style(f"[错误] 配置检查失败: {e}", fg="red"), err=True)
        sys.exit(1)


def main():
    """主入口点"""
    cli()


if __name__ == "__main__":
    main()
