"""replayt 数据模型"""

from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import TYPE_CHECKING, List, Tuple

if TYPE_CHECKING:
    from .snapshot import Snapshot

# 新建会话时显示的集合名称
UNNAMED_COLLECTION = "Open or collect..."


@dataclass(frozen=True)
class TimestampPair:
    """一个文件的创建时间和修改时间（UTC）"""
    created: datetime
    modified: datetime


@dataclass
class CollectResult:
    """收集或加载的结果"""
    snapshot: "Snapshot"
    name: str = ""  # 集合名称：目录名或快照文件名

    @property
    def count(self) -> int:
        return len(self.snapshot)


@dataclass
class ReplayResult:
    """回放结果"""
    replayed: int = 0
    missed: int = 0
    failed_items: List[Tuple[Path, str]] = field(default_factory=list)  # (文件, 错误)

    @property
    def failed(self) -> int:
        return len(self.failed_items)
