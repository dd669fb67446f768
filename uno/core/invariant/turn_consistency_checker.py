"""
行动一致性检查器

验证座位相关字段在范围内，并且"有当前行动座位"与"回合已结束"恰好成立一个.
"""

from .base_checker import BaseInvariantChecker
from .types import InvariantType, RoundState

__all__ = ['TurnConsistencyChecker']


class TurnConsistencyChecker(BaseInvariantChecker):
    """行动一致性检查器"""

    def __init__(self):
        super().__init__(InvariantType.TURN_CONSISTENCY)

    def _perform_check(self, state: RoundState) -> bool:
        is_valid = True
        player_count = state.player_count

        if len(state.hands) != player_count:
            self._create_violation(
                f"手牌数量({len(state.hands)})与玩家数量({player_count})不一致",
                context={'hands': len(state.hands), 'players': player_count}
            )
            is_valid = False

        if not 0 <= state.dealer < player_count:
            self._create_violation(f"庄家座位{state.dealer}超出范围", context={'dealer': state.dealer})
            is_valid = False

        if not state.discard_pile:
            self._create_violation("弃牌堆不能为空")
            is_valid = False
        elif state.current_color is None:
            self._create_violation("当前颜色不能为空")
            is_valid = False
        else:
            top = state.discard_pile[0]
            if not top.is_wild and top.color is not state.current_color:
                self._create_violation(
                    f"当前颜色{state.current_color.value}与弃牌堆顶部{top}不一致",
                    context={'top': str(top), 'current_color': state.current_color.value}
                )
                is_valid = False

        empty_seats = [seat for seat, hand in enumerate(state.hands) if not hand]
        if len(empty_seats) > 1:
            self._create_violation(f"多个座位没有手牌: {empty_seats}", context={'empty_seats': empty_seats})
            is_valid = False

        if state.player_in_turn is None:
            if len(empty_seats) != 1:
                self._create_violation("没有当前行动座位，但回合并未结束", context={'empty_seats': empty_seats})
                is_valid = False
        else:
            if not 0 <= state.player_in_turn < player_count:
                self._create_violation(
                    f"当前行动座位{state.player_in_turn}超出范围",
                    context={'player_in_turn': state.player_in_turn}
                )
                is_valid = False
            if empty_seats:
                self._create_violation(
                    "回合已结束，但仍有当前行动座位",
                    context={'empty_seats': empty_seats, 'player_in_turn': state.player_in_turn}
                )
                is_valid = False

        return is_valid
