"""
测试辅助函数

构造任意指定局面的回合快照：给定手牌和弃牌堆，
其余的牌按完整牌组的固定顺序补到摸牌堆（或弃牌堆、某个座位的手牌），
保证108张牌守恒.
"""

from collections import Counter
from typing import Any, Callable, Dict, List, Optional, Sequence, Union

from uno.core.deck import Card, Color, create_initial_deck

RED = Color.RED
BLUE = Color.BLUE
GREEN = Color.GREEN
YELLOW = Color.YELLOW


def remaining_cards(used: Sequence[Card]) -> List[Card]:
    """完整牌组按固定顺序去掉used之后剩下的牌"""
    pending = Counter(used)
    rest = []
    for card in create_initial_deck():
        if pending[card] > 0:
            pending[card] -= 1
        else:
            rest.append(card)
    leftover = +pending
    if leftover:
        raise ValueError(f"使用的牌超过了完整牌组: {dict(leftover)}")
    return rest


def round_snapshot(hands: Sequence[Sequence[Card]], discard: Sequence[Card],
                   current_color: Optional[Color] = None,
                   player_in_turn: Optional[int] = 0,
                   direction: str = 'clockwise',
                   dealer: int = 0,
                   players: Optional[Sequence[str]] = None,
                   leftover: Union[str, int] = 'draw') -> Dict[str, Any]:
    """
    构造回合快照

    Args:
        hands: 每个座位的手牌
        discard: 弃牌堆，顶部在前
        current_color: 当前颜色，None时取弃牌堆顶部的颜色
        player_in_turn: 当前行动座位
        direction: 方向
        dealer: 庄家座位
        players: 玩家名称，None时自动生成
        leftover: 其余的牌放到哪里：'draw'、'discard'或某个座位
    """
    hands = [list(hand) for hand in hands]
    discard = list(discard)
    rest = remaining_cards([card for hand in hands for card in hand] + discard)

    draw_pile: List[Card] = []
    if leftover == 'draw':
        draw_pile = rest
    elif leftover == 'discard':
        discard.extend(rest)
    else:
        hands[leftover].extend(rest)

    if current_color is None:
        current_color = discard[0].color

    return {
        'players': list(players) if players else [f"p{seat}" for seat in range(len(hands))],
        'hands': [[card.to_record() for card in hand] for hand in hands],
        'draw_pile': [card.to_record() for card in draw_pile],
        'discard_pile': [card.to_record() for card in discard],
        'current_color': current_color.value,
        'current_direction': direction,
        'dealer': dealer,
        'player_in_turn': player_in_turn,
    }


def place_at(card: Card, index: int) -> Callable[[List[Card]], None]:
    """返回把card的第一张移到index位置的洗牌函数"""

    def shuffle(items: List[Card]) -> None:
        items.remove(card)
        items.insert(index, card)

    return shuffle


def staged_shuffler(*stages: Callable[[List[Card]], None]) -> Callable[[List[Card]], None]:
    """依次使用给定的洗牌函数，用完之后不再改变顺序"""
    pending = list(stages)

    def shuffle(items: List[Card]) -> None:
        if pending:
            pending.pop(0)(items)

    return shuffle


class EndRecorder:
    """记录回合结束通知的监听器"""

    def __init__(self):
        self.results = []

    def __call__(self, result):
        self.results.append(result)
