"""
replayt 命令行入口，使用 Typer 实现命令行界面

collect 把目录的文件时间戳保存为快照文件，replay 把快照回放到另一个目录。
不带子命令运行时启动交互式界面。
"""
import os
import sys
from datetime import datetime
from pathlib import Path
from typing import Optional

import typer
from loguru import logger
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from replayt.config import ReplaytConfig, load_config
from replayt.core import engine
from replayt.core.exceptions import ReplaytError
from replayt.core.models import ReplayResult
from replayt.core.rewrite import PathRewrite
from replayt.core.session import SessionOptions
from replayt.core.snapshot import format_timestamp
from replayt.interactive import run_interactive


def setup_logger(app_name="app", log_dir=None, console_output=True):
    """配置 Loguru 日志系统

    Args:
        app_name: 应用名称，用于日志目录
        log_dir: 日志根目录，默认为当前文件所在目录下的 logs
        console_output: 是否输出到控制台，默认为True

    Returns:
        tuple: (logger, config_info)
            - logger: 配置好的 logger 实例
            - config_info: 包含日志配置信息的字典
    """
    if log_dir is None:
        log_dir = Path(__file__).parent.resolve() / "logs"

    # 清除默认处理器
    logger.remove()

    # 有条件地添加控制台处理器（简洁版格式）
    if console_output:
        logger.add(
            sys.stdout,
            level="INFO",
            format="<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <blue>{elapsed}</blue> | <level>{level.icon} {level: <8}</level> | <cyan>{name}:{function}:{line}</cyan> - <level>{message}</level>"
        )

    # 使用 datetime 构建日志路径
    current_time = datetime.now()
    date_str = current_time.strftime("%Y-%m-%d")
    hour_str = current_time.strftime("%H")
    minute_str = current_time.strftime("%M%S")

    # 构建日志目录和文件路径
    log_path = os.path.join(log_dir, app_name, date_str, hour_str)
    os.makedirs(log_path, exist_ok=True)
    log_file = os.path.join(log_path, f"{minute_str}.log")

    # 添加文件处理器
    logger.add(
        log_file,
        level="DEBUG",
        rotation="10 MB",
        retention="30 days",
        compression="zip",
        encoding="utf-8",
        format="{time:YYYY-MM-DD HH:mm:ss} | {elapsed} | {level.icon} {level: <8} | {name}:{function}:{line} - {message}",
        enqueue=True,
    )

    config_info = {
        'log_file': log_file,
    }

    logger.info(f"日志系统已初始化，应用名称: {app_name}")
    return logger, config_info


app = typer.Typer(help="文件日期回放工具 - 收集文件的创建/修改时间并回放到另一个目录")
console = Console()


def report_error(error: ReplaytError) -> None:
    """错误输出：分类 + 说明"""
    logger.error(f"{error.category}: {error}")
    console.print(f"[red]{escape(error.category)}[/red]: {escape(str(error))}")


def print_status(name: str, collected: int, replayed: int) -> None:
    console.print(Panel.fit(
        f"[cyan]集合: {escape(name)}[/cyan]\n"
        f"[green]已收集: {collected}[/green]\n"
        f"[blue]已回放: {replayed}[/blue]",
        title="📊 状态",
        border_style="green"
    ))


def print_replay_result(result: ReplayResult) -> None:
    if not result.failed_items:
        return
    table = Table(title="写入失败的文件", show_header=True)
    table.add_column("文件", style="yellow")
    table.add_column("错误", style="red")
    for file_path, error in result.failed_items:
        table.add_row(escape(str(file_path)), escape(error))
    console.print(table)


def _config(ctx: typer.Context) -> ReplaytConfig:
    return ctx.obj if isinstance(ctx.obj, ReplaytConfig) else ReplaytConfig()


@app.command()
def collect(
    ctx: typer.Context,
    directory: Path = typer.Argument(..., help="要收集时间戳的目录"),
    out: Path = typer.Option(..., "--out", "-o", help="快照文件保存路径"),
    recursive: bool = typer.Option(False, "--recursive", "-r", help="处理子文件夹（配置文件中开启时总是处理）"),
):
    """收集目录中文件的时间戳并保存为快照文件"""
    config = _config(ctx)
    recursive = recursive or config.recursive

    try:
        result = engine.collect(directory, recursive)
        engine.save_file(result.snapshot, out)
    except ReplaytError as e:
        report_error(e)
        raise typer.Exit(code=1)

    console.print(f"[green]已保存 {result.count} 条记录到 {escape(str(out))}[/green]")
    print_status(result.name, result.count, 0)


@app.command()
def replay(
    ctx: typer.Context,
    directory: Path = typer.Argument(..., help="要回放时间戳的目录"),
    snapshot_file: Path = typer.Option(..., "--in", "-i", help="快照文件路径"),
    recursive: bool = typer.Option(False, "--recursive", "-r", help="处理子文件夹（配置文件中开启时总是处理）"),
    pattern: Optional[str] = typer.Option(None, "--pattern", help="相对路径查找正则"),
    replace: Optional[str] = typer.Option(None, "--replace", help="替换文本"),
    continue_on_error: bool = typer.Option(False, "--continue-on-error", help="写入失败时继续处理其他文件"),
    preview: bool = typer.Option(False, "--preview", "-p", help="预览模式，只统计匹配的文件"),
):
    """把快照文件中的时间戳回放到目录中相对路径匹配的文件"""
    config = _config(ctx)
    recursive = recursive or config.recursive
    continue_on_error = continue_on_error or config.continue_on_error
    rewrite = PathRewrite.from_options(
        config.pattern if pattern is None else pattern,
        config.replacement if replace is None else replace,
    )

    try:
        loaded = engine.load_file(snapshot_file)
        result = engine.replay(
            directory,
            loaded.snapshot,
            recursive=recursive,
            rewrite=rewrite,
            continue_on_error=continue_on_error,
            dry_run=preview,
        )
    except ReplaytError as e:
        report_error(e)
        raise typer.Exit(code=1)

    if preview:
        console.print(f"[yellow]预览模式：{result.replayed} 个文件将被回放（但实际未执行）[/yellow]")
    print_replay_result(result)
    print_status(loaded.name, loaded.count, result.replayed)

    if result.failed_items:
        raise typer.Exit(code=1)


@app.command()
def show(
    snapshot_file: Path = typer.Argument(..., help="快照文件路径"),
    limit: int = typer.Option(20, "--limit", "-n", help="最多显示的记录数，0 表示全部"),
):
    """显示快照文件的内容"""
    try:
        loaded = engine.load_file(snapshot_file)
    except ReplaytError as e:
        report_error(e)
        raise typer.Exit(code=1)

    table = Table(title=escape(loaded.name), show_header=True)
    table.add_column("相对路径", style="cyan")
    table.add_column("创建时间", style="green")
    table.add_column("修改时间", style="yellow")

    for index, (relative_path, pair) in enumerate(loaded.snapshot.items()):
        if limit and index >= limit:
            table.add_row("...", "...", "...")
            break
        table.add_row(escape(relative_path), format_timestamp(pair.created), format_timestamp(pair.modified))

    console.print(table)
    console.print(f"[cyan]共 {loaded.count} 条记录[/cyan]")


@app.callback(invoke_without_command=True)
def main(
    ctx: typer.Context,
    config_file: Optional[Path] = typer.Option(None, "--config", help="配置文件路径"),
    log_dir: Optional[Path] = typer.Option(None, "--log-dir", help="日志目录"),
    quiet: bool = typer.Option(False, "--quiet", "-q", help="不在控制台输出日志"),
):
    """文件日期回放工具主入口"""
    try:
        config = load_config(config_file)
    except ReplaytError as e:
        report_error(e)
        raise typer.Exit(code=1)

    if log_dir is not None:
        config.log_dir = str(log_dir)
    setup_logger(app_name="replayt", log_dir=config.log_dir, console_output=not quiet)
    ctx.obj = config

    if ctx.invoked_subcommand is None:
        # 如果没有指定子命令，启动交互式界面
        run_interactive(SessionOptions(
            recursive=config.recursive,
            pattern=config.pattern,
            replacement=config.replacement,
            continue_on_error=config.continue_on_error,
        ))


if __name__ == "__main__":
    app()
