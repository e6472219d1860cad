"""会话：持有当前快照和状态栏显示的数据"""
from dataclasses import dataclass, field
from typing import Optional

from loguru import logger

from . import engine
from .models import UNNAMED_COLLECTION, ReplayResult
from .rewrite import PathRewrite
from .snapshot import Snapshot


@dataclass
class SessionOptions:
    """会话选项"""
    recursive: bool = False  # 处理子文件夹
    pattern: str = ""
    replacement: str = ""
    continue_on_error: bool = False

    @property
    def rewrite(self) -> Optional[PathRewrite]:
        return PathRewrite.from_options(self.pattern, self.replacement)


@dataclass
class Session:
    """
    一次使用过程中的状态

    collect/open 成功时整体替换快照，失败时保留原来的快照。
    """
    options: SessionOptions = field(default_factory=SessionOptions)
    snapshot: Snapshot = field(default_factory=Snapshot)
    name: str = UNNAMED_COLLECTION
    replayed: int = 0

    @property
    def collected(self) -> int:
        return len(self.snapshot)

    @property
    def is_empty(self) -> bool:
        return not len(self.snapshot)

    def status(self) -> dict:
        return {
            "collection_name": self.name,
            "collected_count": self.collected,
            "replayed_count": self.replayed,
        }

    def collect(self, directory) -> int:
        result = engine.collect(directory, self.options.recursive)
        self.snapshot = result.snapshot
        self.name = result.name
        return result.count

    def open(self, file_path) -> int:
        result = engine.load_file(file_path)
        self.snapshot = result.snapshot
        self.name = result.name
        return result.count

    def save(self, file_path) -> int:
        return engine.save_file(self.snapshot, file_path)

    def replay(self, directory, dry_run: bool = False) -> ReplayResult:
        result = engine.replay(
            directory,
            self.snapshot,
            recursive=self.options.recursive,
            rewrite=self.options.rewrite,
            continue_on_error=self.options.continue_on_error,
            dry_run=dry_run,
        )
        self.replayed = result.replayed
        return result

    def reset(self) -> None:
        """清空快照、计数和重命名规则"""
        self.snapshot = Snapshot()
        self.name = UNNAMED_COLLECTION
        self.replayed = 0
        self.options.pattern = ""
        self.options.replacement = ""
        logger.info("会话已重置")
