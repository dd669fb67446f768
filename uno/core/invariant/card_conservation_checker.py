"""
牌数守恒检查器

验证手牌、摸牌堆和弃牌堆中的牌恰好组成一副完整的108张牌.
"""

from collections import Counter

from ..deck.deck import create_initial_deck
from ..deck.types import FULL_DECK_SIZE
from .base_checker import BaseInvariantChecker
from .types import InvariantType, RoundState

__all__ = ['CardConservationChecker']


class CardConservationChecker(BaseInvariantChecker):
    """牌数守恒检查器

    不仅检查总数为108，还检查每种牌的张数与完整牌组一致.
    """

    def __init__(self):
        super().__init__(InvariantType.CARD_CONSERVATION)
        self._expected = Counter(create_initial_deck())

    def _perform_check(self, state: RoundState) -> bool:
        cards = state.all_cards()
        is_valid = True

        if len(cards) != FULL_DECK_SIZE:
            self._create_violation(
                f"牌总数应为{FULL_DECK_SIZE}，实际为{len(cards)}",
                context={'total': len(cards)}
            )
            is_valid = False

        actual = Counter(cards)
        missing = self._expected - actual
        extra = actual - self._expected
        if missing or extra:
            self._create_violation(
                "牌的构成与完整牌组不一致",
                context={
                    'missing': {str(card): count for card, count in missing.items()},
                    'extra': {str(card): count for card, count in extra.items()},
                }
            )
            is_valid = False

        return is_valid
