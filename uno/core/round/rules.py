"""
出牌规则模块

实现出牌合法性判断、座位计算、牌效果结算和计分.
所有按牌种类的分支都穷举CardType，新增种类时这里会直接报错.
"""

from typing import Any, Optional, Sequence

from ..deck.card import Card
from ..deck.types import CardType, Color
from ..exceptions import IllegalActionError
from .types import Direction, EffectResolution

__all__ = [
    'can_play',
    'next_seat',
    'resolve_effect',
    'hand_points',
    'round_score',
    'parse_color',
]


def can_play(card: Card, top: Card, current_color: Color) -> bool:
    """
    判断一张牌能否打在弃牌堆顶部之上

    王牌总是合法；其他牌需要颜色与当前颜色相同，
    或数字牌点数相同，或功能牌符号相同.

    Args:
        card: 要打出的牌
        top: 弃牌堆顶部的牌
        current_color: 当前颜色（王牌之后为所选颜色）

    Returns:
        bool: 是否合法
    """
    if card.is_wild:
        return True
    if card.color is current_color:
        return True
    if card.card_type is CardType.NUMBERED:
        return top.card_type is CardType.NUMBERED and top.number == card.number
    return top.card_type is card.card_type


def next_seat(seat: int, step: int, direction: Direction, player_count: int) -> int:
    """
    计算座位：(seat + step * sign) mod player_count

    Args:
        seat: 起始座位
        step: 前进的座位数
        direction: 方向
        player_count: 玩家数量
    """
    return (seat + step * direction.sign) % player_count


def resolve_effect(card: Card, seat: int, direction: Direction, player_count: int) -> EffectResolution:
    """
    结算座位seat打出card后的效果

    回合开始时翻开的第一张牌也按"庄家刚打出"来结算.

    Args:
        card: 打出的牌
        seat: 打出牌的座位
        direction: 打出前的方向
        player_count: 玩家数量

    Returns:
        EffectResolution: 新方向、下一个座位和罚摸信息
    """
    card_type = card.card_type

    if card_type in (CardType.NUMBERED, CardType.WILD):
        return EffectResolution(direction, next_seat(seat, 1, direction, player_count))

    if card_type is CardType.SKIP:
        return EffectResolution(direction, next_seat(seat, 2, direction, player_count))

    if card_type is CardType.REVERSE:
        # 两人局反转没有可见效果，按跳过处理
        if player_count == 2:
            return EffectResolution(direction, next_seat(seat, 2, direction, player_count))
        reversed_direction = direction.reversed()
        return EffectResolution(reversed_direction, next_seat(seat, 1, reversed_direction, player_count))

    if card_type in (CardType.DRAW, CardType.WILD_DRAW):
        penalty = 2 if card_type is CardType.DRAW else 4
        return EffectResolution(
            direction,
            next_seat(seat, 2, direction, player_count),
            penalty_seat=next_seat(seat, 1, direction, player_count),
            penalty_count=penalty
        )

    raise AssertionError(f"未处理的牌种类: {card_type}")


def hand_points(hand: Sequence[Card]) -> int:
    """手牌的总分值"""
    return sum(card.points for card in hand)


def round_score(hands: Sequence[Sequence[Card]], winner: int) -> int:
    """
    回合得分：除赢家外所有手牌的分值之和

    Args:
        hands: 各座位手牌
        winner: 赢家座位
    """
    return sum(hand_points(hand) for seat, hand in enumerate(hands) if seat != winner)


def parse_color(value: Any) -> Optional[Color]:
    """
    解析王牌所选颜色

    接受Color枚举或其字符串值，None表示未选择.

    Raises:
        IllegalActionError: 不是四种颜色之一时
    """
    if value is None or isinstance(value, Color):
        return value
    if isinstance(value, str):
        try:
            return Color(value)
        except ValueError:
            pass
    raise IllegalActionError(f"无效的颜色: {value!r}，必须是BLUE、GREEN、RED或YELLOW")
