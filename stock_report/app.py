"""台股 AI 智慧分析 - CLI Entry Point"""

import asyncio
import json
import sys
from pathlib import Path
from typing import Optional

import click
from dotenv import load_dotenv
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from .config import ConfigError, get_api_key, load_runtime_config
from .controller import RequestStatus, SearchController
from .providers.base import AnalysisResult
from .providers.gemini import GeminiAnalysisProvider
from .renderer import EXCHANGES, Document, document_to_dicts, render
from .renderer.blocks import BuyStrategyBlock, ContentBlock
from .renderer.sections import DEFAULT_SECTIONS_PATH, load_section_rules
from .utils.logging import get_logger, setup_logging
from .utils.text import slugify, truncate
from .utils.time import format_datetime, get_now
from .writers.page_renderer import render_report_page

# Load environment variables
load_dotenv()

console = Console()
logger = get_logger(__name__)


def block_summary(block: ContentBlock) -> str:
    """單一 block 的簡短描述（console 用）"""
    kind = block.kind
    if kind in ("heading", "paragraph", "bullet"):
        return truncate(block.text.strip())
    if kind == "table":
        return f"{len(block.header_row)} cols × {len(block.body_rows)} rows"
    if kind == "chart_anchor":
        return f"{block.exchange}:{block.symbol}"
    if kind == "chart_data":
        return f"{len(block.series.prices)} points"
    if kind == "buy_strategy":
        return f"{truncate(block.title)} ({len(block.children)} blocks)"
    return ""


def print_document_table(document: Document, title: str = "Document") -> None:
    """以表格列出 Document 結構"""
    table = Table(title=title)
    table.add_column("#", style="dim", justify="right")
    table.add_column("Kind", style="cyan")
    table.add_column("Content", style="green")

    def add_rows(blocks: tuple, prefix: str = "") -> None:
        for i, block in enumerate(blocks, 1):
            marker = " *" if getattr(block, "emphasized", False) else ""
            table.add_row(f"{prefix}{i}", block.kind + marker, block_summary(block))
            if isinstance(block, BuyStrategyBlock):
                add_rows(block.children, prefix=f"{prefix}{i}.")

    add_rows(document)
    console.print(table)


def write_report(
    result: AnalysisResult,
    document: Document,
    output: Optional[Path],
    output_dir: Path,
    output_format: str,
    tz: str,
) -> Path:
    """寫出 HTML 或 JSON 報告檔

    Returns:
        寫出的檔案路徑
    """
    now = get_now(tz)
    if output is None:
        slug = slugify(result.stock_code) or "report"
        output = output_dir / f"{slug}_{format_datetime(now, 'stamp')}.{output_format}"

    output.parent.mkdir(parents=True, exist_ok=True)

    if output_format == "json":
        payload = {
            "analysis": result.to_dict(),
            "document": document_to_dicts(document),
            "generated_at": format_datetime(now, "iso"),
        }
        output.write_text(json.dumps(payload, indent=2, ensure_ascii=False), encoding="utf-8")
    else:
        output.write_text(render_report_page(result, document, generated_at=now), encoding="utf-8")

    return output


def load_config_or_exit(config_path: Optional[str]) -> dict:
    try:
        return load_runtime_config(config_path)
    except ConfigError as e:
        console.print(f"[red]Config error:[/red] {e}")
        sys.exit(1)


@click.group()
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose logging")
@click.option("--log-level", default="INFO", help="Log level")
@click.option("--log-format", type=click.Choice(["rich", "json"]), default="rich", help="Log output format")
def cli(verbose: bool, log_level: str, log_format: str) -> None:
    """台股 AI 智慧分析 - 個股深度研究報告產生器"""
    level = "DEBUG" if verbose else log_level
    setup_logging(level=level, log_format=log_format)


@cli.command()
@click.option("--config", "config_path", default=None, help="Runtime config YAML")
@click.option("--sections", "sections_path", default=None, help="Section rules YAML")
def init(config_path: Optional[str], sections_path: Optional[str]) -> None:
    """Verify configuration and environment"""
    console.print(Panel.fit(
        "[bold blue]台股 AI 智慧分析[/bold blue]\n"
        "Taiwan Stock Intelligence",
        border_style="blue",
    ))

    console.print("\n[bold]Loading runtime configuration...[/bold]")
    runtime = load_config_or_exit(config_path)
    provider = runtime["provider"]
    console.print(f"  ✓ Provider: {provider['name']} ({provider['model']})")
    console.print(f"  ✓ Output dir: {runtime['output']['dir']}")

    console.print("\n[bold]Loading section rules...[/bold]")
    try:
        rules = load_section_rules(sections_path)
    except ConfigError as e:
        console.print(f"  ✗ {e}", style="red")
        sys.exit(1)
    console.print(f"  ✓ {sections_path or DEFAULT_SECTIONS_PATH}")
    console.print(f"  Chart markers: {', '.join(rules.chart_markers)}")
    console.print(f"  Strategy markers: {', '.join(rules.strategy_open_markers)}")

    console.print("\n[bold]Checking environment variables...[/bold]")
    if get_api_key():
        console.print("  ✓ GEMINI_API_KEY is set")
    else:
        console.print("  ✗ GEMINI_API_KEY is NOT set (required for analyze)", style="red")

    console.print("\n[bold green]Initialization complete![/bold green]")


@cli.command()
@click.argument("stock_code")
@click.option("--output-dir", "-o", default=None, help="Output directory")
@click.option("--format", "output_format", type=click.Choice(["html", "json"]), default=None, help="Output format")
@click.option("--config", "config_path", default=None, help="Runtime config YAML")
@click.option("--sections", "sections_path", default=None, help="Section rules YAML")
def analyze(
    stock_code: str,
    output_dir: Optional[str],
    output_format: Optional[str],
    config_path: Optional[str],
    sections_path: Optional[str],
) -> None:
    """Analyze a stock with the LLM provider and write the report"""
    runtime = load_config_or_exit(config_path)

    if not get_api_key():
        console.print("[red]GEMINI_API_KEY is not set[/red]")
        sys.exit(1)

    try:
        rules = load_section_rules(sections_path)
    except ConfigError as e:
        console.print(f"[red]Config error:[/red] {e}")
        sys.exit(1)

    output_format = output_format or runtime["output"]["format"]
    target_dir = Path(output_dir or runtime["output"]["dir"])

    with GeminiAnalysisProvider.from_config(runtime) as provider:
        controller = SearchController(provider, rules=rules)
        with console.status(f"正在生成 {stock_code} 深度分析報告..."):
            asyncio.run(controller.search(stock_code))

        if controller.status is not RequestStatus.SUCCESS:
            console.print(f"[red]無法完成分析：[/red]{controller.error or 'empty stock code'}")
            sys.exit(1)

        result = controller.result
        document = controller.document

    path = write_report(
        result,
        document,
        output=None,
        output_dir=target_dir,
        output_format=output_format,
        tz=runtime["report"]["timezone"],
    )

    print_document_table(document, title=f"{result.stock_code} ({result.exchange})")
    console.print(f"\n[bold]Sources:[/bold] {len(result.source_urls)}")
    console.print(f"[bold green]✓ Report written to {path}[/bold green]")


@cli.command(name="render")
@click.argument("source", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--code", "stock_code", required=True, help="Stock code, e.g. 2330")
@click.option("--exchange", type=click.Choice(EXCHANGES), default="TWSE", show_default=True)
@click.option("--output", "-o", type=click.Path(dir_okay=False, path_type=Path), default=None, help="Output file")
@click.option("--format", "output_format", type=click.Choice(["html", "json"]), default="html", show_default=True)
@click.option("--sections", "sections_path", default=None, help="Section rules YAML")
def render_command(
    source: Path,
    stock_code: str,
    exchange: str,
    output: Optional[Path],
    output_format: str,
    sections_path: Optional[str],
) -> None:
    """Render a saved raw report text file offline"""
    runtime = load_config_or_exit(None)

    try:
        rules = load_section_rules(sections_path)
    except ConfigError as e:
        console.print(f"[red]Config error:[/red] {e}")
        sys.exit(1)

    raw_text = source.read_text(encoding="utf-8")
    result = AnalysisResult(stock_code=stock_code, overview=raw_text, exchange=exchange)
    document = render(raw_text, stock_code, exchange, rules)

    path = write_report(
        result,
        document,
        output=output,
        output_dir=Path(runtime["output"]["dir"]),
        output_format=output_format,
        tz=runtime["report"]["timezone"],
    )
    console.print(f"[bold green]✓ {len(document)} blocks written to {path}[/bold green]")


@cli.command()
@click.argument("source", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--code", "stock_code", required=True, help="Stock code, e.g. 2330")
@click.option("--exchange", type=click.Choice(EXCHANGES), default="TWSE", show_default=True)
@click.option("--sections", "sections_path", default=None, help="Section rules YAML")
def inspect(source: Path, stock_code: str, exchange: str, sections_path: Optional[str]) -> None:
    """Show the block structure of a saved raw report"""
    try:
        rules = load_section_rules(sections_path)
    except ConfigError as e:
        console.print(f"[red]Config error:[/red] {e}")
        sys.exit(1)

    document = render(source.read_text(encoding="utf-8"), stock_code, exchange, rules)
    print_document_table(document, title=f"{stock_code} ({exchange})")


def main() -> None:
    cli()


if __name__ == "__main__":
    main()
