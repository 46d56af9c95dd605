"""
协议常量定义
============

定义TinyLink帧协议中使用的各种常量。
"""

from enum import IntEnum
import struct
from typing import Final


class DecoderState(IntEnum):
    """解码状态机状态枚举"""

    WAITING_FOR_PREAMBLE = 1  # 搜索前导码
    WAITING_FOR_HEADER = 2  # 读取帧头
    WAITING_FOR_BODY = 3  # 读取帧体(负载 + CRC)


# 前导码，用于帧同步，发送时不做转义
PREAMBLE: Final[int] = 0xAA55AA55

# 字节填充使用的转义字符
FLAG: Final[int] = 0xAA
ESCAPE: Final[int] = 0x1B

# 数据帧格式定义（全部为小端）
PREAMBLE_FORMAT: Final[str] = "<I"  # 前导码(4字节)
HEADER_FORMAT: Final[str] = "<HHB"  # 标志位(2字节) + 负载长度(2字节) + 头校验(1字节)
CRC_FORMAT: Final[str] = "<I"  # 帧CRC(4字节)

# 帧大小计算，请勿修改
LEN_PREAMBLE: Final[int] = struct.calcsize(PREAMBLE_FORMAT)
LEN_HEADER: Final[int] = struct.calcsize(HEADER_FORMAT)
LEN_CRC: Final[int] = struct.calcsize(CRC_FORMAT)
LEN_BODY: Final[int] = LEN_CRC

# 帧头长度检查在算术下限之外额外保留1字节
LENGTH_MARGIN: Final[int] = 1
FRAME_OVERHEAD: Final[int] = LEN_HEADER + LEN_BODY + LENGTH_MARGIN

# 16位字段上限
MAX_FIELD_VALUE: Final[int] = 0xFFFF

# CRC32多项式（反射形式，逐位计算）
CRC32_POLYNOMIAL: Final[int] = 0xEDB88320

# 缓冲区配置默认值
DEFAULT_BUFFER_SIZE: Final[int] = 256  # 默认解码缓冲区大小
MIN_BUFFER_SIZE: Final[int] = FRAME_OVERHEAD  # 能容纳空负载帧的最小缓冲区

# 串口配置默认值
DEFAULT_BAUDRATE: Final[int] = 115200  # 默认波特率
DEFAULT_TIMEOUT: Final[float] = 0.1  # 默认超时时间(秒)
