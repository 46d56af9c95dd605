"""
数据帧处理模块
==============

负责TinyLink帧的封装（编码）和逐字节解析（解码）。

数据帧格式：
| 前导码(4B) | 标志位(2B) | 负载长度(2B) | 头校验(1B) | 负载(NB) | CRC32(4B) |

前导码固定为 55 AA 55 AA，原样发送；其后所有字节都做字节填充：
0xAA 发送为 1B AA，0x1B 发送为 1B 1B。多字节字段均为小端。
"""

import struct
from dataclasses import dataclass
from typing import Optional

from ..config.constants import (
    DecoderState,
    PREAMBLE,
    FLAG,
    ESCAPE,
    PREAMBLE_FORMAT,
    HEADER_FORMAT,
    CRC_FORMAT,
    LEN_PREAMBLE,
    LEN_HEADER,
    LEN_CRC,
    FRAME_OVERHEAD,
    MAX_FIELD_VALUE,
)
from ..config.settings import LinkConfig
from .checksum import BytesLike, checksum_header, checksum_frame
from .stream import Stream
from ..utils.logger import get_logger

logger = get_logger(__name__)

_PREAMBLE_BYTES = struct.pack(PREAMBLE_FORMAT, PREAMBLE)


@dataclass
class Frame:
    """
    一个数据帧

    解码得到的帧，其payload是解码器内部缓冲区的memoryview，
    只在下一次调用read_frame()之前有效，之后缓冲区会被覆盖。
    需要保留数据时请立即复制：bytes(frame.payload)。
    """

    flags: int  # 16位标志位，对编解码器不透明
    length: int  # 负载长度
    payload: BytesLike  # 负载数据


def escape(data: BytesLike) -> bytes:
    """
    对数据做字节填充

    Args:
        data: 原始字节

    Returns:
        填充后的字节，FLAG和ESCAPE前都插入ESCAPE
    """
    escaped = bytearray()
    for byte in bytes(data):
        if byte == FLAG or byte == ESCAPE:
            escaped.append(ESCAPE)
        escaped.append(byte)
    return bytes(escaped)


def encode_frame(flags: int, payload: BytesLike) -> bytes:
    """
    将标志位和负载编码为完整的线路字节序列

    不检查长度上限，调用者负责保证负载长度不超过16位。

    Args:
        flags: 16位标志位
        payload: 负载数据

    Returns:
        包含前导码、帧头、负载和CRC的字节序列

    Examples:
        >>> encode_frame(0x1234, b'\\x10\\xaa\\x1b').hex(' ')
        '55 aa 55 aa 34 12 03 00 25 10 1b aa 1b 1b 3d c3 15 22'
    """
    length = len(payload)
    header = struct.pack(HEADER_FORMAT, flags, length, checksum_header(flags, length))
    crc = checksum_frame(header, payload)

    return (
        _PREAMBLE_BYTES +
        escape(header) +
        escape(payload) +
        escape(struct.pack(CRC_FORMAT, crc))
    )


class TinyLink:
    """
    TinyLink帧编解码器

    写入路径无状态；读取路径是一个逐字节推进的状态机，
    所有未完成的帧都保存在构造时分配的固定大小缓冲区中。

    同一实例不可在多个线程中同时使用，每条链路使用一个实例。
    """

    def __init__(self, stream: Stream, config: Optional[LinkConfig] = None):
        """
        初始化编解码器

        Args:
            stream: 底层数据流
            config: 链路配置，None表示使用默认配置
        """
        self.stream = stream
        self.config = config or LinkConfig()

        self._buffer = bytearray(self.config.buffer_size)
        self._index = 0
        self._unescaping = False
        self._state = DecoderState.WAITING_FOR_PREAMBLE

    @property
    def state(self) -> DecoderState:
        """当前解码状态"""
        return self._state

    @property
    def buffer_size(self) -> int:
        """解码缓冲区大小"""
        return len(self._buffer)

    @property
    def max_payload_length(self) -> int:
        """能够解码的最大负载长度"""
        return self.config.max_payload_length

    def reset(self) -> None:
        """丢弃未完成的帧，重新开始搜索前导码"""
        self._state = DecoderState.WAITING_FOR_PREAMBLE
        self._index = 0
        self._unescaping = False

    def write(self, flags: int, payload: BytesLike, length: Optional[int] = None) -> bool:
        """
        编码并发送一帧

        Args:
            flags: 16位标志位
            payload: 负载数据
            length: 发送的负载字节数，None表示整个payload

        Returns:
            成功返回True；长度超出缓冲区或参数非法时返回False，且不写入任何字节
        """
        if length is None:
            length = len(payload)

        if not 0 <= flags <= MAX_FIELD_VALUE:
            logger.error(f"标志位超出16位范围: {flags}")
            return False

        if not 0 <= length <= len(payload):
            logger.error(f"负载长度不足: 声明长度={length}, 实际长度={len(payload)}")
            return False

        if length > self.buffer_size or length > MAX_FIELD_VALUE:
            logger.error(f"负载过长: {length} > {self.buffer_size}")
            return False

        frame = encode_frame(flags, memoryview(payload)[:length])
        self.stream.write_bytes(frame)

        return True

    def write_frame(self, frame: Frame) -> bool:
        """发送一个Frame对象"""
        return self.write(frame.flags, frame.payload, frame.length)

    def read_frame(self) -> Optional[Frame]:
        """
        从数据流读取一个字节并推进状态机

        前置条件：数据流中已有可读字节，或数据流的读取是阻塞的。
        本方法不检查可读性；数据流返回的-1会被当作0xFF处理。
        非阻塞数据流请使用poll()。

        Returns:
            本次调用恰好完成一个校验通过的帧时返回Frame，否则返回None。
            Frame.payload在下一次调用前有效。
        """
        byte = self.stream.read_byte() & 0xFF

        # 帧头和帧体中的字节需要去除填充
        if self._state != DecoderState.WAITING_FOR_PREAMBLE:
            if self._unescaping:
                # 覆盖掉上一个转义字符
                self._index -= 1
                self._unescaping = False
            elif byte == ESCAPE:
                self._unescaping = True

        self._buffer[self._index] = byte
        self._index += 1

        if self._unescaping:
            return None

        if self._state == DecoderState.WAITING_FOR_PREAMBLE:
            self._seek_preamble()
        elif self._state == DecoderState.WAITING_FOR_HEADER:
            self._check_header()
        else:
            return self._check_body()

        return None

    def _seek_preamble(self) -> None:
        if self._index < LEN_PREAMBLE:
            return

        start = self._index - LEN_PREAMBLE
        (preamble,) = struct.unpack_from(PREAMBLE_FORMAT, self._buffer, start)

        if preamble == PREAMBLE:
            self._state = DecoderState.WAITING_FOR_HEADER
            self._index = 0
        elif self._index == len(self._buffer):
            # 缓冲区已满：保留最后4个字节，下一个字节可能与其中3个组成前导码
            self._buffer[:LEN_PREAMBLE] = self._buffer[start:self._index]
            self._index = LEN_PREAMBLE

    def _check_header(self) -> None:
        if self._index != LEN_HEADER:
            return

        flags, length, checksum = struct.unpack_from(HEADER_FORMAT, self._buffer)

        if checksum != checksum_header(flags, length):
            logger.debug(
                f'帧头校验错误: 接收={hex(checksum)}, 计算={hex(checksum_header(flags, length))}'
            )
            self.reset()
        elif length > len(self._buffer) - FRAME_OVERHEAD:
            logger.debug(f'帧长度超出缓冲区: {length}')
            self.reset()
        else:
            self._state = DecoderState.WAITING_FOR_BODY

    def _check_body(self) -> Optional[Frame]:
        flags, length, _ = struct.unpack_from(HEADER_FORMAT, self._buffer)

        end = LEN_HEADER + length
        if self._index != end + LEN_CRC:
            return None

        (received_crc,) = struct.unpack_from(CRC_FORMAT, self._buffer, end)

        # 无论校验是否通过，该帧都只处理一次
        self.reset()

        view = memoryview(self._buffer)
        calculated_crc = checksum_frame(view[:LEN_HEADER], view[LEN_HEADER:end])
        if received_crc != calculated_crc:
            logger.warning(
                f'帧CRC错误: 接收={hex(received_crc)}, 计算={hex(calculated_crc)}'
            )
            return None

        return Frame(flags=flags, length=length, payload=view[LEN_HEADER:end])

    def read(self, buffer: bytearray, length: Optional[int] = None) -> bool:
        """
        读取一个字节并在得到帧时把负载复制到buffer

        标志位被忽略。如果目标容量不足，已解码的帧会被丢弃。

        Args:
            buffer: 目标缓冲区
            length: 目标容量，None表示len(buffer)

        Returns:
            成功复制负载返回True，否则返回False
        """
        frame = self.read_frame()
        if frame is None:
            return False

        capacity = len(buffer) if length is None else min(length, len(buffer))
        if frame.length > capacity:
            logger.error(f'目标缓冲区太小: 需要={frame.length}, 容量={capacity}')
            return False

        buffer[:frame.length] = frame.payload
        return True

    def poll(self, max_bytes: Optional[int] = None) -> Optional[Frame]:
        """
        在数据流有可读字节时持续推进状态机，返回遇到的第一个帧

        Args:
            max_bytes: 本次最多处理的字节数，None表示不限

        Returns:
            解析到的帧，没有则返回None
        """
        count = 0
        while self.stream.available() > 0:
            if max_bytes is not None and count >= max_bytes:
                break
            count += 1

            frame = self.read_frame()
            if frame is not None:
                return frame

        return None
