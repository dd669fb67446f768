"""
UNO - 确定性的UNO规则引擎

core提供规则引擎本身，application提供面向宿主的命令/查询服务，
cli提供命令行模拟工具.
"""

__version__ = "1.0.0"
