"""
文件日期回放工具包

收集目录中文件的创建/修改时间，保存为快照，之后回放到另一个目录中相对路径相同的文件。
"""
from .core.engine import collect, load, load_file, replay, save, save_file
from .core.models import CollectResult, ReplayResult, TimestampPair
from .core.rewrite import PathRewrite, rewrite_path
from .core.session import Session, SessionOptions
from .core.snapshot import Snapshot

__all__ = [
    'collect', 'replay', 'load', 'save', 'load_file', 'save_file',
    'CollectResult', 'ReplayResult', 'TimestampPair',
    'PathRewrite', 'rewrite_path', 'Session', 'SessionOptions', 'Snapshot',
]
