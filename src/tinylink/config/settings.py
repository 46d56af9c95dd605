"""
配置管理
========

提供串口和链路相关的配置类。
"""

from dataclasses import dataclass
import serial

from .constants import (
    DEFAULT_BAUDRATE,
    DEFAULT_TIMEOUT,
    DEFAULT_BUFFER_SIZE,
    MIN_BUFFER_SIZE,
    FRAME_OVERHEAD,
)


@dataclass
class SerialConfig:
    """串口配置类"""

    port: str  # 串口号
    baudrate: int = DEFAULT_BAUDRATE  # 波特率
    bytesize: int = serial.EIGHTBITS  # 数据位
    parity: str = serial.PARITY_NONE  # 校验位
    stopbits: float = serial.STOPBITS_ONE  # 停止位
    timeout: float = DEFAULT_TIMEOUT  # 读超时时间

    def __post_init__(self):
        """参数验证"""
        if not self.port:
            raise ValueError("port不能为空")
        if self.baudrate <= 0:
            raise ValueError("baudrate必须大于0")
        if self.timeout is not None and self.timeout < 0:
            raise ValueError("timeout不能为负数")

    def to_serial_kwargs(self) -> dict:
        """转换为serial.Serial的参数字典"""
        return {
            "port": self.port,
            "baudrate": self.baudrate,
            "bytesize": self.bytesize,
            "parity": self.parity,
            "stopbits": self.stopbits,
            "timeout": self.timeout,
        }


@dataclass
class LinkConfig:
    """帧链路配置类"""

    buffer_size: int = DEFAULT_BUFFER_SIZE  # 解码缓冲区大小(字节)

    def __post_init__(self):
        """参数验证"""
        if self.buffer_size < MIN_BUFFER_SIZE:
            raise ValueError(f"buffer_size不能小于{MIN_BUFFER_SIZE}")

    @property
    def max_payload_length(self) -> int:
        """解码端能接收的最大负载长度"""
        return self.buffer_size - FRAME_OVERHEAD
