"""
配置模块
=======

包含协议常量定义和配置管理功能。
"""

from .constants import *
from .settings import *

__all__ = [
    # 常量
    "DecoderState",
    "PREAMBLE",
    "FLAG",
    "ESCAPE",
    "LEN_PREAMBLE",
    "LEN_HEADER",
    "LEN_CRC",
    "DEFAULT_BAUDRATE",
    "DEFAULT_TIMEOUT",
    "DEFAULT_BUFFER_SIZE",
    "MIN_BUFFER_SIZE",
    # 配置
    "SerialConfig",
    "LinkConfig",
]
