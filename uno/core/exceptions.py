"""
UNO规则引擎异常定义

所有异常都是同步抛出、不重试的，由宿主层负责翻译成面向用户的信息.
"""

from typing import List, Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from .invariant.types import InvariantViolation

__all__ = [
    'UnoGameError',
    'ValidationError',
    'IllegalActionError',
    'StateInvariantError',
    'GameConfigError',
]


class UnoGameError(Exception):
    """UNO引擎基础异常类"""
    pass


class ValidationError(UnoGameError):
    """快照数据格式错误：缺少必填字段、未知牌种类等"""
    pass


class IllegalActionError(UnoGameError):
    """非法行动：回合已结束、索引越界、出牌不合法、王牌颜色无效等"""
    pass


class StateInvariantError(UnoGameError):
    """快照恢复时的跨字段不变量违反"""

    def __init__(self, message: str, violations: Optional[List['InvariantViolation']] = None):
        super().__init__(message)
        self.violations = list(violations or [])


class GameConfigError(UnoGameError):
    """游戏配置错误：玩家数量、目标分数、每人手牌数无效"""
    pass
