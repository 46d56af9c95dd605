"""
数据流接口模块
==============

定义帧编解码器所依赖的字节流接口，以及一个内存实现。

编解码器只需要单字节读写和可读字节数这几项能力，
串口、无线模块或测试替身只要实现这些方法即可接入。
"""

from abc import ABC, abstractmethod
from collections import deque
from typing import Iterable, Union


class Stream(ABC):
    """双向字节流接口"""

    @abstractmethod
    def write_byte(self, value: int) -> int:
        """
        写入单个字节

        Args:
            value: 要写入的字节值(0-255)

        Returns:
            实际写入的字节数，成功为1
        """

    def write_bytes(self, data: Union[bytes, bytearray, memoryview]) -> int:
        """
        写入多个字节

        默认逐字节调用write_byte，子类可以覆盖为批量写入。

        Returns:
            实际写入的字节数
        """
        written = 0
        for value in bytes(data):
            written += self.write_byte(value)
        return written

    @abstractmethod
    def available(self) -> int:
        """返回当前可读的字节数"""

    @abstractmethod
    def read_byte(self) -> int:
        """
        读取单个字节

        Returns:
            读取到的字节值，没有数据时返回-1
        """

    @abstractmethod
    def peek(self) -> int:
        """查看下一个字节但不取出，没有数据时返回-1"""

    @abstractmethod
    def flush(self) -> None:
        """等待发送完成"""


class MemoryStream(Stream):
    """
    内存字节流

    写出的数据累积在written中，feed()放入的数据按顺序供读取。
    主要用于测试以及在同一进程内回环验证。
    """

    def __init__(self, incoming: Iterable[int] = b""):
        self.written = bytearray()
        self._incoming: deque = deque(incoming)

    def write_byte(self, value: int) -> int:
        self.written.append(value)
        return 1

    def write_bytes(self, data: Union[bytes, bytearray, memoryview]) -> int:
        self.written.extend(data)
        return len(data)

    def available(self) -> int:
        return len(self._incoming)

    def read_byte(self) -> int:
        if not self._incoming:
            return -1
        return self._incoming.popleft()

    def peek(self) -> int:
        if not self._incoming:
            return -1
        return self._incoming[0]

    def flush(self) -> None:
        pass

    def feed(self, data: Iterable[int]) -> None:
        """放入待读取的数据"""
        self._incoming.extend(data)

    def clear(self) -> None:
        """清空收发缓存"""
        self.written.clear()
        self._incoming.clear()
