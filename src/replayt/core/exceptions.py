"""replayt 异常定义

每个异常带一个 category，命令行和交互界面按它显示错误标题。
"""


class ReplaytError(Exception):
    """所有 replayt 错误的基类"""

    category = "Error"


class DirectoryAccessError(ReplaytError):
    """目录不存在、不是目录或遍历过程中无法读取"""

    category = "Directory error"


class FileWriteError(ReplaytError):
    """回放时写入文件时间戳失败"""

    category = "Replay error"

    def __init__(self, path, message: str):
        super().__init__(message)
        self.path = path


class ParseError(ReplaytError):
    """快照文本格式错误"""

    category = "Open file error"

    def __init__(self, line_number: int, message: str):
        super().__init__(f"第 {line_number} 行: {message}")
        self.line_number = line_number


class DuplicateKeyError(ReplaytError):
    """同一个相对路径被插入两次"""

    def __init__(self, key: str, category: str = "Collect error"):
        super().__init__(f"重复的相对路径: {key}")
        self.key = key
        self.category = category


class EmptyCollectionError(ReplaytError):
    """快照为空时执行回放或保存"""

    category = "Empty collection"


class SnapshotFileError(ReplaytError):
    """快照文件读写失败"""

    def __init__(self, path, message: str, category: str = "Open file error"):
        super().__init__(message)
        self.path = path
        self.category = category


class RewritePatternError(ReplaytError):
    """重命名正则表达式无效"""

    category = "Pattern error"


class ConfigError(ReplaytError):
    """配置文件内容无效"""

    category = "Config error"
