"""
UNO牌组管理.

定义Deck类：有序的牌序列，从前端发牌，通过注入的洗牌函数原地洗牌，
支持过滤和快照导出/导入.
"""

import logging
from typing import Any, Callable, Dict, Iterable, Iterator, List, Optional

from ..random_utils import Shuffler
from .card import Card
from .records import card_records, records_to_cards
from .types import get_all_colors

__all__ = ['Deck', 'create_initial_deck']

logger = logging.getLogger(__name__)


class Deck:
    """
    表示一叠有序的UNO牌.

    发牌从序列前端取牌（先进先出）. 洗牌不依赖全局随机数生成器，
    而是由调用方注入洗牌函数，以支持确定性测试和重放.

    Attributes:
        _cards: 当前牌组中的牌列表，下标0为顶部

    Examples:
        >>> deck = create_initial_deck()
        >>> len(deck)
        108
        >>> card = deck.deal()
        >>> deck.size
        107
    """

    def __init__(self, cards: Optional[Iterable[Card]] = None) -> None:
        """
        初始化牌组.

        Args:
            cards: 初始牌序列，会被复制；为None时创建空牌组
        """
        self._cards: List[Card] = list(cards) if cards is not None else []

    @property
    def size(self) -> int:
        """牌组中剩余的牌数."""
        return len(self._cards)

    @property
    def is_empty(self) -> bool:
        """牌组是否为空."""
        return not self._cards

    @property
    def cards(self) -> List[Card]:
        """牌序列的副本."""
        return list(self._cards)

    def deal(self) -> Card:
        """
        发出顶部的一张牌.

        Returns:
            Card: 发出的牌

        Raises:
            IndexError: 当牌组为空时
        """
        if not self._cards:
            raise IndexError("Cannot deal from empty deck")
        return self._cards.pop(0)

    def deal_or_none(self) -> Optional[Card]:
        """发出顶部的一张牌，牌组为空时返回None."""
        if not self._cards:
            return None
        return self._cards.pop(0)

    def peek(self) -> Optional[Card]:
        """
        查看顶部的牌但不发出.

        Returns:
            Optional[Card]: 顶部的牌，如果牌组为空则返回None
        """
        if not self._cards:
            return None
        return self._cards[0]

    def push_front(self, card: Card) -> None:
        """把一张牌放到顶部，弃牌堆出牌时使用."""
        self._cards.insert(0, card)

    def append(self, card: Card) -> None:
        """把一张牌放到底部."""
        self._cards.append(card)

    def shuffle(self, shuffler: Shuffler) -> None:
        """
        洗牌.

        Args:
            shuffler: 原地打乱列表的函数，如seeded_shuffler(42)
        """
        shuffler(self._cards)

    def filter(self, predicate: Callable[[Card], bool]) -> 'Deck':
        """
        返回只包含满足条件的牌的新牌组，原牌组不变.

        Args:
            predicate: 判断函数
        """
        return Deck(card for card in self._cards if predicate(card))

    def to_snapshot(self) -> List[Dict[str, Any]]:
        """
        导出为有序的普通字典记录列表.

        Returns:
            List[Dict[str, Any]]: 顶部在前的记录列表
        """
        return card_records(self._cards)

    @classmethod
    def from_snapshot(cls, records: Any) -> 'Deck':
        """
        从记录列表恢复牌组.

        Args:
            records: to_snapshot()导出的记录列表

        Returns:
            Deck: 恢复的牌组

        Raises:
            ValidationError: 当任意记录格式不合法时
        """
        return cls(records_to_cards(records))

    def __len__(self) -> int:
        return len(self._cards)

    def __iter__(self) -> Iterator[Card]:
        return iter(list(self._cards))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Deck):
            return NotImplemented
        return self._cards == other._cards

    def __str__(self) -> str:
        return f"Deck({len(self._cards)} cards remaining)"

    def __repr__(self) -> str:
        return f"Deck(size={len(self._cards)})"


def create_initial_deck() -> Deck:
    """
    创建未洗过的完整108张牌组.

    每种颜色：一张0，1-9各两张，跳过、反转、加二各两张；
    另有王牌和王牌加四各四张.

    Returns:
        Deck: 按固定顺序排列的完整牌组
    """
    cards: List[Card] = []

    for color in get_all_colors():
        cards.append(Card.numbered(color, 0))
        for number in range(1, 10):
            cards.append(Card.numbered(color, number))
            cards.append(Card.numbered(color, number))

    for color in get_all_colors():
        for _ in range(2):
            cards.append(Card.skip(color))
            cards.append(Card.reverse(color))
            cards.append(Card.draw(color))

    for _ in range(4):
        cards.append(Card.wild())
        cards.append(Card.wild_draw())

    logger.debug("创建初始牌组，共%d张", len(cards))
    return Deck(cards)
