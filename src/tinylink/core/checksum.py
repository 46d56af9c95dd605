"""
校验算法模块
============

提供帧协议使用的校验算法实现：
- 逐位计算的CRC32（无查表、无最终异或），支持链式种子
- 帧头使用的1字节异或校验
"""

from typing import Union

from ..config.constants import CRC32_POLYNOMIAL, MAX_FIELD_VALUE

BytesLike = Union[bytes, bytearray, memoryview]


def _check_bytes(data) -> None:
    if not isinstance(data, (bytes, bytearray, memoryview)):
        raise TypeError("输入数据必须是bytes类型")


def crc32(data: BytesLike, initial: int = 0) -> int:
    """
    计算数据的CRC32校验值

    多项式为0xEDB88320，逐位计算。与以太网CRC32不同，这里既不对初值取反，
    也不对结果做最终异或，返回的就是运行中的寄存器值。因此可以链式调用：
    crc32(B, crc32(A, seed)) == crc32(A + B, seed)。

    Args:
        data: 需要计算CRC的字节数据
        initial: 初始值（种子），默认为0

    Returns:
        CRC32校验值，32位无符号整数

    Raises:
        TypeError: 当输入不是bytes类型时抛出

    Examples:
        >>> hex(crc32(b'123456789'))
        '0x2dfd2d88'
        >>> crc32(b'')
        0
    """
    _check_bytes(data)

    crc = initial & 0xFFFFFFFF
    for byte in data:
        crc ^= byte
        for _ in range(8):
            if crc & 1:
                crc = (crc >> 1) ^ CRC32_POLYNOMIAL
            else:
                crc >>= 1

    return crc


def crc32_byte(value: int, initial: int = 0) -> int:
    """对单个字节计算CRC32"""
    if not 0 <= value <= 0xFF:
        raise ValueError("value必须在0到255之间")
    return crc32(bytes((value,)), initial)


def checksum_header(flags: int, length: int) -> int:
    """
    计算帧头校验

    将flags和length按小端拆成4个字节后逐个异或，
    用于在读取帧体之前快速过滤损坏的帧头。

    Args:
        flags: 16位标志位
        length: 16位负载长度

    Returns:
        1字节异或校验值
    """
    flags &= MAX_FIELD_VALUE
    length &= MAX_FIELD_VALUE

    return (flags & 0xFF) ^ (flags >> 8) ^ (length & 0xFF) ^ (length >> 8)


def checksum_frame(header: BytesLike, payload: BytesLike) -> int:
    """计算整帧CRC：先算帧头，再以其结果为种子算负载"""
    return crc32(payload, crc32(header))
