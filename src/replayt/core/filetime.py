"""
读取和写入文件的创建时间、修改时间

创建时间优先取 st_birthtime，平台没有时取 st_ctime（Windows 上即创建时间）。
只有 Windows 能写入创建时间，其他平台只写修改时间，访问时间保持不变。
"""
import os
import sys
from datetime import datetime, timedelta, timezone
from pathlib import Path

from loguru import logger

from .models import TimestampPair

EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)
# Windows FILETIME 起点 1601-01-01 到 Unix 纪元之间的 100 纳秒间隔数
FILETIME_EPOCH_OFFSET = 116444736000000000


def ns_to_datetime(ns: int) -> datetime:
    """纳秒时间戳转 UTC datetime，精度截断到微秒"""
    return EPOCH + timedelta(microseconds=ns // 1000)


def datetime_to_ns(dt: datetime) -> int:
    """UTC datetime 转纳秒时间戳，无时区的值按 UTC 处理"""
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return (dt - EPOCH) // timedelta(microseconds=1) * 1000


def read_file_times(file_path: Path) -> TimestampPair:
    """直接从文件系统读取时间戳（不使用缓存）"""
    stat = os.stat(file_path)
    birthtime = getattr(stat, "st_birthtime_ns", None)
    if birthtime is None:
        birthtime_seconds = getattr(stat, "st_birthtime", None)
        if birthtime_seconds is not None:
            birthtime = int(birthtime_seconds * 1_000_000) * 1000
        else:
            birthtime = stat.st_ctime_ns
    return TimestampPair(
        created=ns_to_datetime(birthtime),
        modified=ns_to_datetime(stat.st_mtime_ns),
    )


def write_file_times(file_path: Path, pair: TimestampPair) -> None:
    """
    把时间戳写回文件

    失败时抛出 OSError，由调用方决定中止还是继续。
    """
    if sys.platform == "win32":
        _set_creation_time_windows(file_path, pair.created)
    else:
        logger.debug(f"当前平台不支持写入创建时间，仅写入修改时间: {file_path}")

    atime_ns = os.stat(file_path).st_atime_ns
    os.utime(file_path, ns=(atime_ns, datetime_to_ns(pair.modified)))


def _set_creation_time_windows(file_path: Path, created: datetime) -> None:
    """通过 SetFileTime 写入创建时间"""
    import ctypes
    from ctypes import wintypes

    kernel32 = ctypes.WinDLL("kernel32", use_last_error=True)
    kernel32.CreateFileW.restype = wintypes.HANDLE

    filetime = datetime_to_ns(created) // 100 + FILETIME_EPOCH_OFFSET

    handle = kernel32.CreateFileW(
        str(file_path),
        wintypes.DWORD(0x00000100),  # FILE_WRITE_ATTRIBUTES
        wintypes.DWORD(0x00000001 | 0x00000002),  # FILE_SHARE_READ | FILE_SHARE_WRITE
        None,
        wintypes.DWORD(3),  # OPEN_EXISTING
        wintypes.DWORD(0x80),  # FILE_ATTRIBUTE_NORMAL
        None,
    )
    if handle == wintypes.HANDLE(-1).value:
        raise ctypes.WinError(ctypes.get_last_error())

    try:
        creation_ft = ctypes.c_ulonglong(filetime)
        if not kernel32.SetFileTime(handle, ctypes.byref(creation_ft), None, None):
            raise ctypes.WinError(ctypes.get_last_error())
    finally:
        kernel32.CloseHandle(handle)
