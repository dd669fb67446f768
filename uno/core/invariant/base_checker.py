"""
不变量检查器基础类

定义不变量检查器的抽象基类和通用功能.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, List

from .types import InvariantCheckResult, InvariantType, InvariantViolation, RoundState

__all__ = ['BaseInvariantChecker']


class BaseInvariantChecker(ABC):
    """不变量检查器基础抽象类"""

    def __init__(self, invariant_type: InvariantType):
        """初始化检查器

        Args:
            invariant_type: 不变量类型
        """
        self.invariant_type = invariant_type
        self._violations: List[InvariantViolation] = []

    @abstractmethod
    def _perform_check(self, state: RoundState) -> bool:
        """执行具体的不变量检查逻辑

        Args:
            state: 回合状态视图

        Returns:
            bool: 检查是否通过
        """
        pass

    def check(self, state: RoundState) -> InvariantCheckResult:
        """执行不变量检查

        检查过程中出现的异常也记为违反，不向外抛出.

        Args:
            state: 回合状态视图

        Returns:
            InvariantCheckResult: 检查结果
        """
        self._violations.clear()

        try:
            is_valid = self._perform_check(state)
        except Exception as e:
            self._violations.clear()
            self._create_violation(
                description=f"检查过程中发生异常: {str(e)}",
                context={'exception_type': type(e).__name__}
            )
            is_valid = False

        if is_valid:
            return InvariantCheckResult.create_success(self.invariant_type)
        return InvariantCheckResult.create_failure(self.invariant_type, self._violations.copy())

    def _create_violation(self, description: str, context: Dict[str, Any] = None) -> InvariantViolation:
        """创建违反记录

        Args:
            description: 违反描述
            context: 上下文信息

        Returns:
            InvariantViolation: 违反记录
        """
        violation = InvariantViolation(
            invariant_type=self.invariant_type,
            description=description,
            context=context or {}
        )
        self._violations.append(violation)
        return violation
