"""命令行入口。"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import List, Optional

import typer
from rich.progress import (
    BarColumn,
    Progress,
    SpinnerColumn,
    TextColumn,
    TimeElapsedColumn,
)

from image_optimize.core.config import DEFAULT_COMMAND, DEFAULT_TIMEOUT_MS, OptimizeConfig
from image_optimize.core.exceptions import BatchFailedError, ImageOptimizeError
from image_optimize.core.models import BatchResult
from image_optimize.core.progress import FileEvent
from image_optimize.processing.pipeline import process_batch
from image_optimize.utils.logging import setup_logging

app = typer.Typer(help="调用 OptiPNG 批量优化图片，失败时按策略回退为直接复制。")


def _build_event_callback(progress: Progress, verbose: bool):
    task_id: Optional[int] = None

    def callback(event: FileEvent) -> None:
        nonlocal task_id
        if event.total == 0:
            return
        if task_id is None:
            task_id = progress.add_task("处理图片", total=event.total)
        progress.update(task_id, completed=event.completed)
        if event.category == "failed":
            progress.log(f"[red]失败[/red] {event.file_name}: {event.message}")
        elif verbose:
            detail = event.message or f"{event.duration_ms} ms"
            progress.log(f"{event.category} {event.file_name} ({detail})")

    return callback


def _echo_counters(result: BatchResult) -> None:
    typer.echo(
        f"已优化 {result.optimized} 个，已复制 {result.copied} 个，"
        f"跳过 {result.skipped} 个，失败 {result.failed} 个，耗时 {result.duration_ms} ms。"
    )


@app.callback()
def main() -> None:
    """图片优化构建步骤。"""


@app.command("run")
def run_cli(  # noqa: PLR0913
    source: Path = typer.Argument(..., help="源图片目录"),
    to_dir: Optional[Path] = typer.Option(None, "--to-dir", "-o", help="输出目录，默认与源目录相同"),
    process: str = typer.Option("yes", "--process", "-p", help="是否优化：yes/true、no/false、try"),
    command: str = typer.Option(DEFAULT_COMMAND, "--command", help="优化器命令"),
    timeout: int = typer.Option(DEFAULT_TIMEOUT_MS, "--timeout", help="单次调用超时（毫秒），0 表示不限制"),
    include: List[str] = typer.Option([], "--include", "-i", help="包含的文件模式，可指定多个"),
    exclude: List[str] = typer.Option([], "--exclude", "-x", help="排除的文件模式，可指定多个"),
    report: Optional[str] = typer.Option(None, "--report", help="在输出目录写入 CSV 报告的文件名"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="输出每个文件的处理详情"),
) -> None:
    """执行批量优化。"""

    setup_logging(verbose)
    logging.getLogger(__name__).debug("CLI 参数解析完成")

    config = OptimizeConfig(
        source_dir=source.expanduser().resolve(),
        dest_dir=to_dir.expanduser().resolve() if to_dir else None,
        process=process,
        command=command,
        timeout_ms=timeout,
        include_patterns=tuple(include),
        exclude_patterns=tuple(exclude),
        report_filename=report,
    )

    progress = Progress(
        SpinnerColumn(),
        TextColumn("[bold blue]{task.description}"),
        BarColumn(),
        TimeElapsedColumn(),
    )

    try:
        with progress:
            result = process_batch(config, event_callback=_build_event_callback(progress, verbose))
    except BatchFailedError as exc:
        _echo_counters(exc.result)
        typer.echo(f"处理失败：{exc}", err=True)
        raise typer.Exit(code=1) from exc
    except ImageOptimizeError as exc:
        typer.echo(f"错误：{exc}", err=True)
        raise typer.Exit(code=2) from exc

    _echo_counters(result)


if __name__ == "__main__":
    app()
