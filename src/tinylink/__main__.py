#!/usr/bin/env python3
"""
TinyLink - 模块CLI入口
======================

支持通过 python -m tinylink 调用
"""

import sys
import argparse
import logging

from . import __version__
from .cli.link_cli import LinkCLI
from .config.constants import DEFAULT_BAUDRATE, DEFAULT_BUFFER_SIZE
from .config.settings import SerialConfig, LinkConfig
from .core.serial_manager import SerialManager
from .utils.logger import get_logger, set_level

logger = get_logger(__name__)

PROGRAM_NAME = "TinyLink 串口帧工具"


def _int_auto(value: str) -> int:
    """支持 0x 前缀的整数参数"""
    return int(value, 0)


def create_parser():
    """创建命令行参数解析器"""
    parser = argparse.ArgumentParser(
        prog="tinylink",
        description=f"{PROGRAM_NAME} v{__version__}",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
使用示例：
  # 列出串口
  python -m tinylink ports

  # 发送一帧
  python -m tinylink send --port COM1 --flags 0x1234 --hex "10 aa 1b"

  # 监听帧
  python -m tinylink listen --port /dev/ttyUSB0 --count 10
        """,
    )

    parser.add_argument(
        "--version", action="version", version=f"{PROGRAM_NAME} v{__version__}"
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="输出调试日志")

    subparsers = parser.add_subparsers(dest="command", help="可用命令")

    subparsers.add_parser("ports", help="列出可用串口")

    def add_link_arguments(sub):
        sub.add_argument("--port", required=True, help="串口号（如 COM1, /dev/ttyUSB0）")
        sub.add_argument("--baudrate", type=int, default=DEFAULT_BAUDRATE,
                         help=f"波特率（默认{DEFAULT_BAUDRATE}）")
        sub.add_argument("--buffer-size", type=int, default=DEFAULT_BUFFER_SIZE,
                         help=f"帧缓冲区大小（默认{DEFAULT_BUFFER_SIZE}）")

    send_parser = subparsers.add_parser("send", help="发送一帧")
    add_link_arguments(send_parser)
    send_parser.add_argument("--flags", type=_int_auto, default=0, help="16位标志位，支持0x前缀")
    payload_group = send_parser.add_mutually_exclusive_group()
    payload_group.add_argument("--text", help="UTF-8文本负载")
    payload_group.add_argument("--hex", help="十六进制负载，如 \"10 aa 1b\"")

    listen_parser = subparsers.add_parser("listen", help="监听并打印帧")
    add_link_arguments(listen_parser)
    listen_parser.add_argument("--count", type=int, default=None, help="收到指定帧数后退出")
    listen_parser.add_argument("--idle-timeout", type=float, default=None,
                               help="空闲指定秒数后退出")

    return parser


def run(args) -> bool:
    """执行解析后的命令"""
    if args.command == "ports":
        return LinkCLI.show_available_ports()

    link_config = LinkConfig(buffer_size=args.buffer_size)
    manager = SerialManager(SerialConfig(port=args.port, baudrate=args.baudrate))

    with manager.connection():
        if args.command == "send":
            payload = LinkCLI.parse_payload(args.text, args.hex)
            return LinkCLI.send(manager, args.flags, payload, link_config)

        received = LinkCLI.listen(
            manager,
            count=args.count,
            config=link_config,
            idle_timeout=args.idle_timeout,
        )
        return args.count is None or received >= args.count


def main(argv=None):
    """主函数"""
    parser = create_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return

    if args.verbose:
        set_level(logging.DEBUG)

    try:
        success = run(args)
    except KeyboardInterrupt:
        print("\n👋 用户中断程序，退出")
        sys.exit(1)
    except (ValueError, RuntimeError) as e:
        logger.error(f"程序异常: {e}")
        print(f"\n💥 程序异常: {e}")
        sys.exit(1)

    sys.exit(0 if success else 1)


if __name__ == "__main__":
    main()
