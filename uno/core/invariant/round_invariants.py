"""
回合不变量检查器

整合所有不变量检查器，提供统一的检查接口.
"""

from typing import Dict, List

from ..exceptions import StateInvariantError
from .card_conservation_checker import CardConservationChecker
from .turn_consistency_checker import TurnConsistencyChecker
from .types import InvariantCheckResult, InvariantType, InvariantViolation, RoundState

__all__ = ['RoundInvariants']


class RoundInvariants:
    """回合不变量检查器

    快照恢复时用它拒绝不一致的数据；测试中用它验证每一步之后的状态.
    """

    def __init__(self):
        self.card_checker = CardConservationChecker()
        self.turn_checker = TurnConsistencyChecker()

        self._checkers = {
            InvariantType.CARD_CONSERVATION: self.card_checker,
            InvariantType.TURN_CONSISTENCY: self.turn_checker,
        }

    def check_all(self, state: RoundState,
                  raise_on_violation: bool = False) -> Dict[InvariantType, InvariantCheckResult]:
        """检查所有不变量

        Args:
            state: 回合状态视图
            raise_on_violation: 是否在违反时抛出异常

        Returns:
            Dict[InvariantType, InvariantCheckResult]: 检查结果字典

        Raises:
            StateInvariantError: 当raise_on_violation=True且有违反时
        """
        results = {}
        all_violations: List[InvariantViolation] = []

        for invariant_type, checker in self._checkers.items():
            result = checker.check(state)
            results[invariant_type] = result
            if not result.is_valid:
                all_violations.extend(result.violations)

        if raise_on_violation and all_violations:
            descriptions = "; ".join(v.description for v in all_violations)
            raise StateInvariantError(
                f"发现{len(all_violations)}个不变量违反: {descriptions}",
                all_violations
            )

        return results

    def is_valid_state(self, state: RoundState) -> bool:
        """检查回合状态是否有效"""
        results = self.check_all(state)
        return all(result.is_valid for result in results.values())
