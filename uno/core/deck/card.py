"""
UNO牌数据结构.

定义不可变的Card类. 六种牌以CardType为标签组成封闭联合，
不使用子类，所有按种类的分支都在这里穷举.
"""

from dataclasses import dataclass
from typing import Any, Dict, Optional

from .types import (
    Color, CardType, NUMBER_TYPES, ACTION_TYPES, WILD_TYPES,
    ACTION_CARD_POINTS, WILD_CARD_POINTS
)

__all__ = ['Card']


@dataclass(frozen=True)
class Card:
    """
    表示一张UNO牌.

    Attributes:
        card_type: 牌的种类
        color: 颜色，王牌为None
        number: 点数0-9，仅数字牌有

    Examples:
        >>> card = Card.numbered(Color.RED, 7)
        >>> str(card)
        'RED 7'
        >>> card.points
        7
    """

    card_type: CardType
    color: Optional[Color] = None
    number: Optional[int] = None

    def __post_init__(self) -> None:
        """
        验证牌的字段与种类一致.

        Raises:
            TypeError: 当字段类型无效时
            ValueError: 当字段与种类不匹配时
        """
        if not isinstance(self.card_type, CardType):
            raise TypeError(f"种类必须是CardType类型，实际: {type(self.card_type)}")

        if self.card_type in WILD_TYPES:
            if self.color is not None or self.number is not None:
                raise ValueError(f"{self.card_type.value}牌不能有颜色或点数")
            return

        if not isinstance(self.color, Color):
            raise TypeError(f"{self.card_type.value}牌的颜色必须是Color类型，实际: {type(self.color)}")

        if self.card_type in NUMBER_TYPES:
            if isinstance(self.number, bool) or not isinstance(self.number, int):
                raise TypeError(f"数字牌的点数必须是int，实际: {type(self.number)}")
            if not 0 <= self.number <= 9:
                raise ValueError(f"数字牌的点数必须在0-9之间，实际: {self.number}")
        elif self.number is not None:
            raise ValueError(f"{self.card_type.value}牌不能有点数")

    @classmethod
    def numbered(cls, color: Color, number: int) -> 'Card':
        """创建数字牌."""
        return cls(CardType.NUMBERED, color, number)

    @classmethod
    def skip(cls, color: Color) -> 'Card':
        """创建跳过牌."""
        return cls(CardType.SKIP, color)

    @classmethod
    def reverse(cls, color: Color) -> 'Card':
        """创建反转牌."""
        return cls(CardType.REVERSE, color)

    @classmethod
    def draw(cls, color: Color) -> 'Card':
        """创建加二牌."""
        return cls(CardType.DRAW, color)

    @classmethod
    def wild(cls) -> 'Card':
        """创建王牌."""
        return cls(CardType.WILD)

    @classmethod
    def wild_draw(cls) -> 'Card':
        """创建王牌加四."""
        return cls(CardType.WILD_DRAW)

    @property
    def is_wild(self) -> bool:
        """是否为王牌（WILD或WILD DRAW）."""
        return self.card_type in WILD_TYPES

    @property
    def is_action(self) -> bool:
        """是否为有颜色的功能牌."""
        return self.card_type in ACTION_TYPES

    @property
    def points(self) -> int:
        """
        回合结束时这张牌在输家手中的分值.

        Returns:
            int: 数字牌为点数，功能牌20分，王牌50分
        """
        if self.card_type is CardType.NUMBERED:
            return self.number
        if self.card_type in (CardType.SKIP, CardType.REVERSE, CardType.DRAW):
            return ACTION_CARD_POINTS
        if self.card_type in (CardType.WILD, CardType.WILD_DRAW):
            return WILD_CARD_POINTS
        raise AssertionError(f"未处理的牌种类: {self.card_type}")

    @classmethod
    def from_record(cls, record: Any) -> 'Card':
        """
        从快照记录创建牌.

        Raises:
            ValidationError: 记录格式不合法时
        """
        from .records import record_to_card
        return record_to_card(record)

    def has_color(self, color: Color) -> bool:
        """判断这张牌是否为指定颜色，王牌永远返回False."""
        return self.color is color

    def to_record(self) -> Dict[str, Any]:
        """
        导出为快照使用的普通字典记录.

        Returns:
            Dict[str, Any]: 形如{"type", "color"?, "number"?}的记录
        """
        if self.card_type is CardType.NUMBERED:
            return {'type': self.card_type.value, 'color': self.color.value, 'number': self.number}
        if self.card_type in (CardType.SKIP, CardType.REVERSE, CardType.DRAW):
            return {'type': self.card_type.value, 'color': self.color.value}
        if self.card_type in (CardType.WILD, CardType.WILD_DRAW):
            return {'type': self.card_type.value}
        raise AssertionError(f"未处理的牌种类: {self.card_type}")

    def __str__(self) -> str:
        if self.card_type is CardType.NUMBERED:
            return f"{self.color.value} {self.number}"
        if self.is_wild:
            return self.card_type.value
        return f"{self.color.value} {self.card_type.value}"

    def __repr__(self) -> str:
        if self.card_type is CardType.NUMBERED:
            return f"Card({self.card_type.name}, {self.color.name}, {self.number})"
        if self.is_wild:
            return f"Card({self.card_type.name})"
        return f"Card({self.card_type.name}, {self.color.name})"
