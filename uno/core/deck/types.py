"""
UNO牌组相关类型定义.

定义牌的颜色、种类等基础枚举类型，以及整副牌的构成常量.
"""

from enum import Enum
from typing import List

__all__ = [
    'Color',
    'CardType',
    'NUMBER_TYPES',
    'ACTION_TYPES',
    'WILD_TYPES',
    'FULL_DECK_SIZE',
    'ACTION_CARD_POINTS',
    'WILD_CARD_POINTS',
    'get_all_colors',
]


class Color(Enum):
    """
    牌的颜色枚举.

    枚举值即快照记录中使用的字符串.
    """

    BLUE = "BLUE"
    GREEN = "GREEN"
    RED = "RED"
    YELLOW = "YELLOW"


class CardType(Enum):
    """
    牌的种类枚举.

    六种种类构成封闭的标签联合，合法性判断、计分和序列化都按种类穷举匹配.
    """

    NUMBERED = "NUMBERED"
    SKIP = "SKIP"
    REVERSE = "REVERSE"
    DRAW = "DRAW"            # 加二
    WILD = "WILD"
    WILD_DRAW = "WILD DRAW"  # 王牌加四


NUMBER_TYPES = frozenset({CardType.NUMBERED})
ACTION_TYPES = frozenset({CardType.SKIP, CardType.REVERSE, CardType.DRAW})
WILD_TYPES = frozenset({CardType.WILD, CardType.WILD_DRAW})

FULL_DECK_SIZE = 108
ACTION_CARD_POINTS = 20
WILD_CARD_POINTS = 50


def get_all_colors() -> List[Color]:
    """
    获取所有颜色.

    Returns:
        List[Color]: 按BLUE、GREEN、RED、YELLOW顺序排列的颜色列表
    """
    return list(Color)
