"""
核心模块
========

包含校验算法、数据流接口、串口管理和帧编解码等核心功能。
"""

from .checksum import crc32, crc32_byte, checksum_header, checksum_frame
from .stream import Stream, MemoryStream
from .serial_manager import SerialManager
from .frame_handler import Frame, TinyLink, escape, encode_frame

__all__ = [
    "crc32",
    "crc32_byte",
    "checksum_header",
    "checksum_frame",
    "Stream",
    "MemoryStream",
    "SerialManager",
    "Frame",
    "TinyLink",
    "escape",
    "encode_frame",
]
