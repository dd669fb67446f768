"""UNO命令行工具."""

from .main import cli, main

__all__ = ['cli', 'main']
