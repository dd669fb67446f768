"""
不变量检查器类型定义

定义回合不变量检查相关的基础类型和枚举.
"""

from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Any, Dict, List, Optional, Tuple

from ..deck.card import Card
from ..deck.types import Color

__all__ = [
    'InvariantType',
    'InvariantViolation',
    'InvariantCheckResult',
    'RoundState',
]


class InvariantType(Enum):
    """不变量类型枚举"""
    CARD_CONSERVATION = auto()      # 牌数守恒
    TURN_CONSISTENCY = auto()       # 行动座位与结束状态一致


@dataclass(frozen=True)
class RoundState:
    """
    检查器使用的回合状态视图

    既可以由快照恢复前的数据构造，也可以由运行中的回合导出.
    """
    player_count: int
    hands: Tuple[Tuple[Card, ...], ...]
    draw_pile: Tuple[Card, ...]
    discard_pile: Tuple[Card, ...]
    current_color: Optional[Color]
    dealer: int
    player_in_turn: Optional[int]

    def all_cards(self) -> List[Card]:
        """手牌、摸牌堆和弃牌堆中的全部牌"""
        cards: List[Card] = []
        for hand in self.hands:
            cards.extend(hand)
        cards.extend(self.draw_pile)
        cards.extend(self.discard_pile)
        return cards


@dataclass(frozen=True)
class InvariantViolation:
    """不变量违反记录"""
    invariant_type: InvariantType
    description: str
    context: Dict[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        if not self.description:
            raise ValueError("description不能为空")


@dataclass(frozen=True)
class InvariantCheckResult:
    """不变量检查结果"""
    invariant_type: InvariantType
    is_valid: bool
    violations: List[InvariantViolation]

    def __post_init__(self):
        if not self.is_valid and len(self.violations) == 0:
            raise ValueError("检查失败时必须提供违反记录")

    @classmethod
    def create_success(cls, invariant_type: InvariantType) -> 'InvariantCheckResult':
        """创建成功的检查结果"""
        return cls(invariant_type=invariant_type, is_valid=True, violations=[])

    @classmethod
    def create_failure(cls, invariant_type: InvariantType,
                       violations: List[InvariantViolation]) -> 'InvariantCheckResult':
        """创建失败的检查结果"""
        return cls(invariant_type=invariant_type, is_valid=False, violations=violations)
