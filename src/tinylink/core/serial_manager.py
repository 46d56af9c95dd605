"""
串口管理模块
============

基于pyserial实现Stream接口，提供串口的打开、关闭和单字节读写。
"""

import serial
from serial.tools import list_ports
from typing import List, Optional, Dict, Union
from contextlib import contextmanager

from ..config.settings import SerialConfig
from ..utils.logger import get_logger
from .stream import Stream

logger = get_logger(__name__)


class SerialManager(Stream):
    """串口管理器，可直接作为TinyLink的数据流使用"""

    def __init__(self, config: SerialConfig):
        """
        初始化串口管理器

        Args:
            config: 串口配置对象
        """
        self.config = config
        self._port: Optional[serial.Serial] = None
        # pyserial没有peek，用一个字节的预读槽模拟
        self._peeked: Optional[int] = None

    @property
    def port(self) -> Optional[serial.Serial]:
        """获取串口对象"""
        return self._port

    @property
    def is_open(self) -> bool:
        """检查串口是否已打开"""
        return self._port is not None and self._port.is_open

    def open(self) -> bool:
        """
        打开串口连接

        Returns:
            成功返回True，失败返回False
        """
        try:
            if self.is_open:
                logger.warning(f"串口 {self.config.port} 已经打开")
                return True

            self._port = serial.Serial(**self.config.to_serial_kwargs())
            self._peeked = None

            logger.info(f"成功打开串口 {self.config.port}")
            return True

        except (serial.SerialException, OSError, ValueError) as e:
            logger.error(f"打开串口失败: {e}")
            self._port = None
            return False

    def close(self) -> None:
        """关闭串口连接"""
        try:
            if self._port and self._port.is_open:
                self._port.close()
                logger.info(f"已关闭串口 {self.config.port}")
        except (serial.SerialException, OSError) as e:
            logger.error(f"关闭串口失败: {e}")
        finally:
            self._port = None
            self._peeked = None

    def write_byte(self, value: int) -> int:
        return self.write_bytes(bytes((value,)))

    def write_bytes(self, data: Union[bytes, bytearray, memoryview]) -> int:
        """
        向串口写入数据

        Args:
            data: 要写入的字节数据

        Returns:
            实际写入的字节数，失败时返回0
        """
        try:
            if not self.is_open:
                logger.error("串口未打开，无法写入数据")
                return 0

            return self._port.write(bytes(data)) or 0

        except (serial.SerialException, OSError) as e:
            logger.error(f"写入数据失败: {e}")
            return 0

    def available(self) -> int:
        """返回可读字节数（包括预读槽中的字节）"""
        pending = 0 if self._peeked is None else 1
        try:
            if not self.is_open:
                return pending
            return pending + self._port.in_waiting
        except (serial.SerialException, OSError) as e:
            logger.error(f"查询可读字节数失败: {e}")
            return pending

    def read_byte(self) -> int:
        """
        读取一个字节

        串口超时或未打开时返回-1。

        Returns:
            读取到的字节值，或-1
        """
        if self._peeked is not None:
            value, self._peeked = self._peeked, None
            return value

        try:
            if not self.is_open:
                logger.error("串口未打开，无法读取数据")
                return -1

            data = self._port.read(1)
            if not data:
                return -1
            return data[0]

        except (serial.SerialException, OSError) as e:
            logger.error(f"读取数据失败: {e}")
            return -1

    def peek(self) -> int:
        if self._peeked is None:
            value = self.read_byte()
            if value < 0:
                return -1
            self._peeked = value
        return self._peeked

    def flush(self) -> None:
        try:
            if self.is_open:
                self._port.flush()
        except (serial.SerialException, OSError) as e:
            logger.error(f"刷新串口失败: {e}")

    @contextmanager
    def connection(self):
        """
        上下文管理器，自动管理串口连接

        Examples:
            >>> config = SerialConfig(port='COM1')
            >>> manager = SerialManager(config)
            >>> with manager.connection():
            ...     link = TinyLink(manager)
        """
        try:
            if not self.open():
                raise RuntimeError(f"无法打开串口 {self.config.port}")
            yield self
        finally:
            self.close()

    @staticmethod
    def list_available_ports() -> List[Dict[str, str]]:
        """
        获取系统可用的串口列表

        Returns:
            串口信息列表，每个元素包含device、description等字段
        """
        try:
            ports = []
            for port_info in list_ports.comports():
                ports.append({
                    'device': port_info.device,
                    'description': port_info.description or '未知设备',
                    'hwid': port_info.hwid or '未知硬件ID'
                })
            return ports
        except OSError as e:
            logger.error(f"获取串口列表失败: {e}")
            return []

    def __enter__(self):
        """支持with语句"""
        if not self.open():
            raise RuntimeError(f"无法打开串口 {self.config.port}")
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """支持with语句"""
        self.close()
