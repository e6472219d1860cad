"""
replayt 的交互式界面模块

菜单对应收集、打开、保存、回放、新建和选项，所有操作都调用 Session。
"""
from pathlib import Path
from typing import Optional

import pyperclip
from loguru import logger
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.prompt import Confirm, Prompt
from rich.table import Table

from .core.exceptions import ReplaytError
from .core.session import Session, SessionOptions

MENU = [
    ("1", "从文件夹收集"),
    ("2", "打开快照文件"),
    ("3", "保存快照文件"),
    ("4", "回放到文件夹"),
    ("5", "新建（清空当前集合）"),
    ("6", "选项"),
    ("0", "退出"),
]


class InteractiveUI:
    """交互式用户界面类"""

    def __init__(self, session: Session, console: Console = None):
        self.session = session
        self.console = console or Console()

    def read_clipboard_path(self) -> Optional[str]:
        """取剪贴板第一行作为路径"""
        try:
            content = pyperclip.paste()
        except pyperclip.PyperclipException as e:
            self.console.print(f"[red]从剪贴板读取失败[/red]: {escape(str(e))}")
            return None
        for line in (content or "").splitlines():
            if line := line.strip().strip('"').strip("'"):
                return line
        self.console.print("[yellow]剪贴板中没有路径[/yellow]")
        return None

    def ask_path(self, prompt: str) -> Optional[Path]:
        """询问路径，留空表示取消，输入 c 从剪贴板读取"""
        answer = Prompt.ask(f"{prompt}（留空取消，c 读取剪贴板）", default="", show_default=False)
        answer = answer.strip().strip('"').strip("'")
        if answer.lower() == "c":
            answer = self.read_clipboard_path() or ""
        if not answer:
            self.console.print("[yellow]已取消[/yellow]")
            return None
        return Path(answer)

    def show_error(self, error: ReplaytError) -> None:
        logger.error(f"{error.category}: {error}")
        self.console.print(Panel.fit(escape(str(error)), title=escape(error.category), border_style="red"))

    def show_status(self) -> None:
        status = self.session.status()
        options = self.session.options
        self.console.print(Panel.fit(
            f"[cyan]集合: {escape(status['collection_name'])}[/cyan]\n"
            f"[green]已收集: {status['collected_count']}[/green]\n"
            f"[blue]已回放: {status['replayed_count']}[/blue]\n"
            f"[dim]子文件夹: {'是' if options.recursive else '否'} | "
            f"查找: {escape(options.pattern) or '-'} | 替换: {escape(options.replacement) or '-'}[/dim]",
            title="📊 状态",
            border_style="green"
        ))

    def show_menu(self) -> str:
        table = Table(show_header=False)
        table.add_column("选项", style="cyan", width=5)
        table.add_column("说明", style="white")
        for key, label in MENU:
            table.add_row(key, label)
        self.console.print(table)
        return Prompt.ask("请选择操作", choices=[key for key, _ in MENU], default="0")

    def do_collect(self) -> None:
        directory = self.ask_path("请输入要收集的文件夹")
        if directory is None:
            return
        count = self.session.collect(directory)
        self.console.print(f"[green]已收集 {count} 个文件的时间戳[/green]")

    def do_open(self) -> None:
        file_path = self.ask_path("请输入快照文件路径")
        if file_path is None:
            return
        count = self.session.open(file_path)
        self.console.print(f"[green]已加载 {count} 条记录[/green]")

    def do_save(self) -> None:
        if self.session.is_empty:
            self.console.print(Panel.fit("请先收集或打开一个快照再保存", title="Empty collection", border_style="yellow"))
            return
        file_path = self.ask_path("请输入保存路径")
        if file_path is None:
            return
        count = self.session.save(file_path)
        self.console.print(f"[green]已保存 {count} 条记录到 \"{escape(file_path.name)}\"[/green]")

    def do_replay(self) -> None:
        if self.session.is_empty:
            self.console.print(Panel.fit("请先收集或打开一个快照再回放", title="Empty collection", border_style="yellow"))
            return
        directory = self.ask_path("请输入要回放的文件夹")
        if directory is None:
            return
        preview = self.session.replay(directory, dry_run=True)
        self.console.print(f"[cyan]匹配 {preview.replayed} 个文件，未匹配 {preview.missed} 个[/cyan]")
        if not preview.replayed:
            return
        if not Confirm.ask("确认回放这些文件的时间戳？", default=True):
            self.console.print("[yellow]操作已取消[/yellow]")
            return
        result = self.session.replay(directory)
        self.console.print(f"[green]已回放 {result.replayed} 个文件[/green]")
        for file_path, error in result.failed_items:
            self.console.print(f"[red]✗ {escape(str(file_path))}: {escape(error)}[/red]")

    def do_options(self) -> None:
        options = self.session.options
        options.recursive = Confirm.ask("处理子文件夹？", default=options.recursive)
        options.pattern = Prompt.ask("相对路径查找正则（留空不替换）", default=options.pattern)
        options.replacement = Prompt.ask("替换文本（留空不替换）", default=options.replacement)
        options.continue_on_error = Confirm.ask("写入失败时继续？", default=options.continue_on_error)
        if options.rewrite is not None:
            options.rewrite.validate()
        logger.info(f"选项已更新: {options}")

    def run(self) -> None:
        actions = {
            "1": self.do_collect,
            "2": self.do_open,
            "3": self.do_save,
            "4": self.do_replay,
            "5": self.session.reset,
            "6": self.do_options,
        }
        self.console.print("[bold blue]== 文件日期回放 ==[/bold blue]")
        while True:
            self.show_status()
            choice = self.show_menu()
            if choice == "0":
                break
            try:
                actions[choice]()
            except ReplaytError as e:
                self.show_error(e)


def run_interactive(options: SessionOptions = None, console: Console = None) -> None:
    """启动交互式界面"""
    ui = InteractiveUI(Session(options=options or SessionOptions()), console)
    try:
        ui.run()
    except KeyboardInterrupt:
        ui.console.print("\n操作已取消")
