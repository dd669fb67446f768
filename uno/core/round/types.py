"""
回合状态机类型定义

定义回合阶段、出牌方向、效果结算结果和回合结束结果.
"""

from dataclasses import dataclass
from enum import Enum, auto
from typing import Callable, Optional

__all__ = [
    'RoundPhase',
    'Direction',
    'EffectResolution',
    'RoundResult',
    'EndListener',
    'BeforeEndHook',
]


class RoundPhase(Enum):
    """回合阶段枚举，只能从IN_PROGRESS单向转换到ENDED"""
    IN_PROGRESS = auto()
    ENDED = auto()


class Direction(Enum):
    """出牌方向"""
    CLOCKWISE = "clockwise"
    COUNTERCLOCKWISE = "counterclockwise"

    @property
    def sign(self) -> int:
        """座位步进的符号：顺时针+1，逆时针-1"""
        return 1 if self is Direction.CLOCKWISE else -1

    def reversed(self) -> 'Direction':
        """返回相反方向"""
        if self is Direction.CLOCKWISE:
            return Direction.COUNTERCLOCKWISE
        return Direction.CLOCKWISE


@dataclass(frozen=True)
class EffectResolution:
    """一张牌的效果结算结果

    Attributes:
        direction: 结算后的方向
        next_player: 下一个行动座位
        penalty_seat: 需要罚摸的座位
        penalty_count: 罚摸张数
    """
    direction: Direction
    next_player: int
    penalty_seat: Optional[int] = None
    penalty_count: int = 0


@dataclass(frozen=True)
class RoundResult:
    """回合结束结果，传给所有结束监听器"""
    winner: int
    score: int


EndListener = Callable[[RoundResult], None]
# 回合即将结束时、状态变更之前调用；抛出异常会让这次出牌不生效
BeforeEndHook = Callable[[], None]
