"""
程序配置模块

从 TOML 文件的 [replayt] 表读取默认选项，命令行参数优先于配置文件。
"""
import os
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Dict, Optional

import tomli
from loguru import logger

from .core.exceptions import ConfigError


def default_config_path() -> Path:
    if os.name == 'nt':  # Windows
        return Path(os.environ.get('APPDATA', '')) / 'replayt' / 'config.toml'
    return Path.home() / '.config' / 'replayt' / 'config.toml'


# 默认日志目录
DEFAULT_LOG_DIR = Path.home() / ".replayt" / "logs"


@dataclass
class ReplaytConfig:
    recursive: bool = False
    pattern: str = ""
    replacement: str = ""
    continue_on_error: bool = False
    log_dir: str = str(DEFAULT_LOG_DIR)


def _check_type(key: str, value: Any, expected: type) -> None:
    if not isinstance(value, expected):
        raise ConfigError(f"配置项 {key} 应为 {expected.__name__}，实际为 {type(value).__name__}")


def config_from_dict(data: Dict[str, Any]) -> ReplaytConfig:
    """从 [replayt] 表构建配置，未知键只记录警告"""
    known = {f.name for f in fields(ReplaytConfig)}
    values = {}
    for key, value in data.items():
        if key not in known:
            logger.warning(f"忽略未知配置项: {key}")
            continue
        expected = bool if key in ("recursive", "continue_on_error") else str
        _check_type(key, value, expected)
        values[key] = value
    return ReplaytConfig(**values)


def load_config(config_path: Optional[Path] = None) -> ReplaytConfig:
    """
    加载配置文件

    Args:
        config_path: 配置文件路径，None 时使用默认位置

    Returns:
        配置对象；默认位置的文件不存在时返回默认配置
    """
    explicit = config_path is not None
    config_path = Path(config_path) if explicit else default_config_path()

    if not config_path.exists():
        if explicit:
            raise ConfigError(f"配置文件不存在: {config_path}")
        return ReplaytConfig()

    try:
        with open(config_path, 'rb') as f:
            data = tomli.load(f)
    except tomli.TOMLDecodeError as e:
        raise ConfigError(f"配置文件格式错误 {config_path}: {e}") from e
    except OSError as e:
        raise ConfigError(f"无法读取配置文件 {config_path}: {e}") from e

    section = data.get('replayt', {})
    if not isinstance(section, dict):
        raise ConfigError("[replayt] 必须是一个表")

    logger.debug(f"已加载配置: {config_path}")
    return config_from_dict(section)
