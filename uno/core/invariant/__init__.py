"""
Invariant Module - 回合不变量

该模块实现UNO回合的不变量检查，包括：
- 牌数守恒验证（108张牌的构成不变）
- 行动座位与结束状态的一致性检查

Classes:
    RoundInvariants: 回合不变量检查器
    CardConservationChecker: 牌数守恒检查器
    TurnConsistencyChecker: 行动一致性检查器
    BaseInvariantChecker: 不变量检查器基类
"""

from .types import (
    InvariantType,
    InvariantViolation,
    InvariantCheckResult,
    RoundState,
)
from .base_checker import BaseInvariantChecker
from .card_conservation_checker import CardConservationChecker
from .turn_consistency_checker import TurnConsistencyChecker
from .round_invariants import RoundInvariants

__all__ = [
    # 主要接口
    'RoundInvariants',

    # 具体检查器
    'CardConservationChecker',
    'TurnConsistencyChecker',
    'BaseInvariantChecker',

    # 类型定义
    'InvariantType',
    'InvariantViolation',
    'InvariantCheckResult',
    'RoundState',
]
