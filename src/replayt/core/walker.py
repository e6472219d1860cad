"""目录遍历：列出根目录下的文件及其相对路径"""
import os
from pathlib import Path
from typing import Iterator, Tuple

from loguru import logger

from .exceptions import DirectoryAccessError


def relative_key(file_path: Path, root: Path) -> str:
    """文件相对根目录的路径，统一使用 / 分隔"""
    return file_path.relative_to(root).as_posix()


def iter_files(root, recursive: bool = False) -> Iterator[Tuple[Path, str]]:
    """
    遍历根目录下的文件

    Args:
        root: 根目录
        recursive: 是否递归扫描子目录

    Yields:
        (文件完整路径, 相对路径)，同一目录内按名称排序

    Raises:
        DirectoryAccessError: 根目录不存在或任一目录无法读取
    """
    root = Path(root)
    if not root.is_dir():
        raise DirectoryAccessError(f"目录不存在或不是目录: {root}")

    if recursive:
        def _raise(error: OSError):
            raise DirectoryAccessError(f"无法访问目录 {error.filename}: {error.strerror}") from error

        for current, dirs, files in os.walk(root, onerror=_raise):
            dirs.sort()
            for filename in sorted(files):
                file_path = Path(current) / filename
                # 与顶层扫描一致：跳过悬空链接、管道等非普通文件
                if not os.path.isfile(file_path):
                    continue
                yield file_path, relative_key(file_path, root)
    else:
        try:
            entries = sorted(os.scandir(root), key=lambda entry: entry.name)
        except OSError as e:
            raise DirectoryAccessError(f"无法访问目录 {root}: {e.strerror}") from e
        for entry in entries:
            if entry.is_file():
                file_path = Path(entry.path)
                yield file_path, relative_key(file_path, root)

    logger.debug(f"遍历完成: {root} (递归: {recursive})")
