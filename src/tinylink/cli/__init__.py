"""
命令行接口模块
==============

提供发送帧、监听帧和列出串口的命令行接口。
"""

from .link_cli import LinkCLI

__all__ = [
    "LinkCLI"
]
