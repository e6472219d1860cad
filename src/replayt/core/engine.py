"""
收集与回放引擎

collect 扫描目录生成快照，replay 把快照中的时间戳写回目标目录里相对路径匹配的文件。
load/save 是快照文本格式的直通接口，load_file/save_file 负责快照文件读写。
"""
from pathlib import Path
from typing import Optional

from loguru import logger

from .exceptions import (
    DirectoryAccessError,
    EmptyCollectionError,
    FileWriteError,
    SnapshotFileError,
)
from .filetime import read_file_times, write_file_times
from .models import CollectResult, ReplayResult
from .rewrite import PathRewrite
from .snapshot import Snapshot
from .walker import iter_files


def collect(root, recursive: bool = False) -> CollectResult:
    """
    扫描目录，为每个文件记录创建时间和修改时间

    Args:
        root: 要收集的目录
        recursive: 是否包含子目录

    Returns:
        CollectResult，name 为目录名

    Raises:
        DirectoryAccessError: 目录或其中的文件无法读取
        DuplicateKeyError: 两个文件得到相同的相对路径
    """
    root = Path(root)
    logger.info(f"开始收集: {root} (递归: {recursive})")

    snapshot = Snapshot()
    for file_path, relative_path in iter_files(root, recursive):
        try:
            pair = read_file_times(file_path)
        except OSError as e:
            raise DirectoryAccessError(f"无法读取文件时间 {file_path}: {e}") from e
        snapshot.put(relative_path, pair)
        logger.debug(f"已收集 {relative_path}: {pair.created} / {pair.modified}")

    logger.info(f"收集完成，共 {len(snapshot)} 个文件")
    return CollectResult(snapshot=snapshot, name=root.name or str(root))


def replay(
    target,
    snapshot: Snapshot,
    recursive: bool = False,
    rewrite: Optional[PathRewrite] = None,
    continue_on_error: bool = False,
    dry_run: bool = False,
) -> ReplayResult:
    """
    把快照中的时间戳写回目标目录中相对路径匹配的文件

    Args:
        target: 目标目录
        snapshot: 要回放的快照（只读）
        recursive: 是否包含子目录
        rewrite: 查找前对相对路径做的正则替换
        continue_on_error: 写入失败时记录并继续，默认第一次失败就中止
        dry_run: 只统计匹配，不修改文件

    Raises:
        EmptyCollectionError: 快照为空
        DirectoryAccessError: 目标目录无法遍历
        FileWriteError: 写入时间戳失败（continue_on_error 为 False 时）
    """
    if not len(snapshot):
        raise EmptyCollectionError("请先收集或打开一个快照再回放")

    if rewrite is not None and rewrite.enabled:
        rewrite.validate()
    else:
        rewrite = None

    target = Path(target)
    logger.info(f"开始回放: {target} (递归: {recursive}, 预览: {dry_run})")

    result = ReplayResult()
    for file_path, relative_path in iter_files(target, recursive):
        key = rewrite.apply(relative_path) if rewrite else relative_path
        pair = snapshot.get(key)
        if pair is None:
            result.missed += 1
            logger.debug(f"未匹配: {relative_path}")
            continue

        if dry_run:
            result.replayed += 1
            logger.debug(f"预览匹配: {relative_path} -> {key}")
            continue

        try:
            write_file_times(file_path, pair)
        except OSError as e:
            if not continue_on_error:
                logger.error(f"写入时间戳失败 {file_path}: {e}")
                raise FileWriteError(file_path, f"无法写入 {file_path} 的时间戳: {e}") from e
            logger.warning(f"写入时间戳失败，继续处理 {file_path}: {e}")
            result.failed_items.append((file_path, str(e)))
            continue

        result.replayed += 1
        logger.debug(f"已回放 {relative_path}: {pair.created} / {pair.modified}")

    logger.info(f"回放完成: 成功 {result.replayed}, 未匹配 {result.missed}, 失败 {result.failed}")
    return result


def load(text: str) -> Snapshot:
    return Snapshot.deserialize(text)


def save(snapshot: Snapshot) -> str:
    return snapshot.serialize()


def load_file(file_path) -> CollectResult:
    """读取快照文件，name 为文件名（不含扩展名）"""
    file_path = Path(file_path)
    logger.info(f"打开快照: {file_path}")
    try:
        with open(file_path, "r", encoding="utf-8-sig") as f:
            text = f.read()
    except OSError as e:
        raise SnapshotFileError(file_path, f"打开 \"{file_path.name}\" 失败: {e}") from e

    snapshot = load(text)
    logger.info(f"已加载 {len(snapshot)} 条记录")
    return CollectResult(snapshot=snapshot, name=file_path.stem)


def save_file(snapshot: Snapshot, file_path) -> int:
    """把快照写入文件，返回写入的记录数"""
    if not len(snapshot):
        raise EmptyCollectionError("请先收集或打开一个快照再保存")

    file_path = Path(file_path)
    try:
        with open(file_path, "w", encoding="utf-8") as f:
            f.write(save(snapshot))
    except OSError as e:
        raise SnapshotFileError(file_path, f"保存到 \"{file_path.name}\" 失败: {e}", "Save file error") from e

    logger.info(f"已保存 {len(snapshot)} 条记录到 {file_path}")
    return len(snapshot)
