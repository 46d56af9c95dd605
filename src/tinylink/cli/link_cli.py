"""
帧链路命令行接口
================

在真实串口上发送和监听TinyLink帧，便于联调。
"""

import time
from typing import Optional

from ..config.settings import LinkConfig
from ..core.frame_handler import Frame, TinyLink
from ..core.serial_manager import SerialManager
from ..core.stream import Stream
from ..utils.logger import get_logger

logger = get_logger(__name__)


class LinkCLI:
    """帧链路命令行接口"""

    @staticmethod
    def show_available_ports() -> bool:
        """显示可用的串口"""
        ports = SerialManager.list_available_ports()

        if not ports:
            print("没有找到可用的串口。")
            return False

        print("可用的串口：")
        for port in ports:
            print(f"  {port['device']} - {port['description']}")
        return True

    @staticmethod
    def parse_payload(text: Optional[str] = None, hex_string: Optional[str] = None) -> bytes:
        """
        解析命令行给出的负载

        Args:
            text: UTF-8文本负载
            hex_string: 十六进制负载，允许空格分隔，如 "10 aa 1b"

        Returns:
            负载字节

        Raises:
            ValueError: 十六进制格式错误或同时给出两种负载时抛出
        """
        if text is not None and hex_string is not None:
            raise ValueError("--text 和 --hex 只能指定一个")
        if hex_string is not None:
            return bytes.fromhex(hex_string)
        if text is not None:
            return text.encode("utf-8")
        return b""

    @staticmethod
    def format_frame(frame: Frame) -> str:
        """格式化一个帧用于显示"""
        return (
            f"flags=0x{frame.flags:04X} length={frame.length} "
            f"payload={bytes(frame.payload).hex(' ')}"
        )

    @staticmethod
    def send(stream: Stream, flags: int, payload: bytes, config: Optional[LinkConfig] = None) -> bool:
        """
        发送一帧

        Returns:
            发送成功返回True
        """
        link = TinyLink(stream, config)
        if not link.write(flags, payload):
            print(f"❌ 发送失败：负载 {len(payload)} 字节，缓冲区 {link.buffer_size} 字节")
            return False

        stream.flush()
        print(f"✅ 已发送 flags=0x{flags:04X} length={len(payload)}")
        return True

    @staticmethod
    def listen(
        stream: Stream,
        count: Optional[int] = None,
        config: Optional[LinkConfig] = None,
        idle_timeout: Optional[float] = None,
        poll_interval: float = 0.01,
    ) -> int:
        """
        监听并打印收到的帧

        Args:
            stream: 数据流
            count: 收到多少帧后退出，None表示一直监听
            config: 链路配置
            idle_timeout: 连续空闲多少秒后退出，None表示不限
            poll_interval: 无数据时的轮询间隔(秒)

        Returns:
            收到的帧数
        """
        link = TinyLink(stream, config)
        received = 0
        last_activity = time.monotonic()

        while count is None or received < count:
            if stream.available() == 0:
                if idle_timeout is not None and time.monotonic() - last_activity >= idle_timeout:
                    logger.info(f"空闲超过 {idle_timeout} 秒，停止监听")
                    break
                time.sleep(poll_interval)
                continue

            last_activity = time.monotonic()
            frame = link.poll()
            if frame is not None:
                received += 1
                print(LinkCLI.format_frame(frame))

        return received
