"""
快照存储

相对路径 -> (创建时间, 修改时间) 的映射，以及它的文本格式：
每行一条记录，``相对路径<TAB>创建时间<TAB>修改时间``，时间一律为 UTC。
"""
from datetime import datetime, timezone
from typing import Dict, Iterator, Optional, Tuple

from dateutil import parser
from loguru import logger

from .exceptions import DuplicateKeyError, ParseError
from .models import TimestampPair

FIELD_SEPARATOR = "\t"
LINE_TERMINATOR = "\n"
# 旧版工具按 M/d/yyyy 写出的时间
LEGACY_FORMATS = ("%m/%d/%Y %I:%M:%S %p", "%m/%d/%Y %H:%M:%S")


def format_timestamp(dt: datetime) -> str:
    """把时间格式化为 ISO 8601 UTC 文本，有亚秒部分时保留微秒"""
    if dt.tzinfo is not None:
        dt = dt.astimezone(timezone.utc)
    text = dt.strftime("%Y-%m-%dT%H:%M:%S")
    if dt.microsecond:
        text += f".{dt.microsecond:06d}"
    return text + "Z"


def parse_timestamp(text: str) -> datetime:
    """
    解析时间文本，结果总是 UTC

    没有时区的值按 UTC 处理，带时区的值换算到 UTC。
    先按 ISO 8601 解析（本工具写出的格式），再尝试旧版工具的
    ``1/2/2021 3:04:05 PM`` 或 ``01/02/2021 15:04:05`` 格式。
    缺少日期或时间字段的文本一律拒绝，不会用当天日期补齐。
    """
    text = text.strip()
    try:
        dt = parser.isoparse(text)
    except ValueError:
        dt = _parse_legacy(text)
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def _parse_legacy(text: str) -> datetime:
    for fmt in LEGACY_FORMATS:
        try:
            return datetime.strptime(text, fmt)
        except ValueError:
            continue
    raise ValueError(f"无法识别的时间格式: {text!r}")


class Snapshot:
    """相对路径到时间戳对的有序映射"""

    def __init__(self):
        self._entries: Dict[str, TimestampPair] = {}

    def clear(self) -> None:
        self._entries.clear()

    def put(self, relative_path: str, pair: TimestampPair) -> None:
        """插入一条记录，相对路径已存在时抛出 DuplicateKeyError"""
        if not relative_path:
            raise ValueError("相对路径不能为空")
        if relative_path in self._entries:
            raise DuplicateKeyError(relative_path)
        self._entries[relative_path] = pair

    def get(self, relative_path: str) -> Optional[TimestampPair]:
        return self._entries.get(relative_path)

    def count(self) -> int:
        return len(self._entries)

    def items(self) -> Iterator[Tuple[str, TimestampPair]]:
        return iter(self._entries.items())

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, relative_path) -> bool:
        return relative_path in self._entries

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)

    def __eq__(self, other) -> bool:
        if not isinstance(other, Snapshot):
            return NotImplemented
        return self._entries == other._entries

    def __repr__(self) -> str:
        return f"Snapshot({len(self._entries)} entries)"

    def serialize(self) -> str:
        """序列化为文本，最后一行也带换行符"""
        lines = []
        for relative_path, pair in self._entries.items():
            lines.append(FIELD_SEPARATOR.join((
                relative_path,
                format_timestamp(pair.created),
                format_timestamp(pair.modified),
            )) + LINE_TERMINATOR)
        return "".join(lines)

    @classmethod
    def deserialize(cls, text: str) -> "Snapshot":
        """
        从文本构建一个新的快照

        任意一行格式错误都会抛出 ParseError，调用方不会拿到只解析了一半的快照。
        只按换行符分行（每行去掉一个结尾的回车符），文件名中的其他控制字符原样保留。
        空行被忽略。
        """
        snapshot = cls()
        for line_number, line in enumerate(text.split(LINE_TERMINATOR), 1):
            if line.endswith("\r"):
                line = line[:-1]
            if not line:
                continue

            columns = line.split(FIELD_SEPARATOR)
            if len(columns) != 3:
                raise ParseError(line_number, f"需要 3 个制表符分隔的字段，实际为 {len(columns)} 个")

            relative_path, created_text, modified_text = columns
            if not relative_path:
                raise ParseError(line_number, "相对路径为空")

            try:
                pair = TimestampPair(
                    created=parse_timestamp(created_text),
                    modified=parse_timestamp(modified_text),
                )
            except (ValueError, OverflowError) as e:
                raise ParseError(line_number, f"无法解析时间: {e}") from e

            if relative_path in snapshot:
                raise DuplicateKeyError(relative_path, "Open file error")
            snapshot.put(relative_path, pair)

        logger.debug(f"解析快照完成，共 {len(snapshot)} 条记录")
        return snapshot
