"""回放前对相对路径做正则替换"""
import re
from dataclasses import dataclass
from typing import Optional

from .exceptions import RewritePatternError


def rewrite_path(text: str, pattern: str, replacement: str) -> str:
    """
    对文本做一次正则替换（替换所有不重叠的匹配）

    pattern 或 replacement 为空时原样返回。
    """
    if not pattern or not replacement:
        return text
    try:
        return re.sub(pattern, replacement, text)
    except re.error as e:
        raise RewritePatternError(f"无效的正则表达式 '{pattern}': {e}") from e


@dataclass(frozen=True)
class PathRewrite:
    """重命名规则：查找模式 + 替换文本"""
    pattern: str = ""
    replacement: str = ""

    @property
    def enabled(self) -> bool:
        return bool(self.pattern) and bool(self.replacement)

    def validate(self) -> None:
        """提前编译模式，无效时抛出 RewritePatternError"""
        if not self.enabled:
            return
        try:
            re.compile(self.pattern)
        except re.error as e:
            raise RewritePatternError(f"无效的正则表达式 '{self.pattern}': {e}") from e

    def apply(self, relative_path: str) -> str:
        return rewrite_path(relative_path, self.pattern, self.replacement)

    @classmethod
    def from_options(cls, pattern: Optional[str], replacement: Optional[str]) -> Optional["PathRewrite"]:
        """两项都非空时返回规则，否则返回 None"""
        rewrite = cls(pattern or "", replacement or "")
        return rewrite if rewrite.enabled else None
