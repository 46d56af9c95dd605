"""
TinyLink
========

面向不可靠串行链路（UART、无线模块）的轻量级帧协议。

主要功能：
- 前导码同步，噪声或丢字节后自动重新同步
- 帧头和帧体的字节填充
- 帧头异或校验 + 整帧CRC32校验
- 固定大小缓冲区，逐字节解码，适合轮询循环

作者: lanford
版本: 1.0.0
"""

__version__ = "1.0.0"
__author__ = "lanford"
__email__ = ""
__description__ = "面向串行链路的轻量级帧协议"

# 导出主要类
from .core.frame_handler import Frame, TinyLink, encode_frame
from .core.stream import Stream, MemoryStream
from .core.serial_manager import SerialManager
from .config.settings import SerialConfig, LinkConfig

__all__ = [
    "Frame",
    "TinyLink",
    "encode_frame",
    "Stream",
    "MemoryStream",
    "SerialManager",
    "SerialConfig",
    "LinkConfig",
]
