"""
UNO回合状态机

Round负责一回合内的全部规则：发牌、翻开起始牌、出牌合法性、
功能牌效果、方向反转、摸牌与弃牌堆回收、uno声明与抓uno罚牌、
回合结束计分，以及快照导出/恢复.

所有变更操作都先完成全部校验（包括回合结束前的准备函数）再修改状态，
校验之后不会再失败，所以外部永远看不到部分修改的状态.
"""

import logging
from typing import Any, Dict, List, Optional, Sequence, Tuple

from ..deck.card import Card
from ..deck.deck import Deck, create_initial_deck
from ..deck.types import FULL_DECK_SIZE, Color
from ..exceptions import GameConfigError, IllegalActionError
from ..invariant import RoundInvariants, RoundState
from ..random_utils import Shuffler, standard_shuffler
from ..snapshot.types import parse_round_snapshot
from .rules import can_play, next_seat, parse_color, resolve_effect, round_score
from .types import BeforeEndHook, Direction, EffectResolution, EndListener, RoundPhase, RoundResult

__all__ = ['Round', 'MAX_DEALT_CARDS', 'UNO_PENALTY']

logger = logging.getLogger(__name__)

# 发完牌后摸牌堆里至少要留下一张非王牌用于翻开
MAX_DEALT_CARDS = FULL_DECK_SIZE - 8 - 1
UNO_PENALTY = 2


class Round:
    """
    一回合UNO

    Attributes:
        _players: 按座位排列的玩家名称
        _hands: 每个座位的手牌
        _draw_pile: 摸牌堆，顶部在前
        _discard_pile: 弃牌堆，最近打出的在前
        _current_color: 当前颜色
        _direction: 当前方向
        _player_in_turn: 当前行动座位，回合结束后为None
        _uno_declared: 每个座位是否已声明uno
        _uno_exposed: 每个座位是否可以被抓uno

    Examples:
        >>> from uno.core.random_utils import seeded_shuffler
        >>> round_ = Round(['a', 'b', 'c'], dealer=0, shuffler=seeded_shuffler(1))
        >>> round_.hand_size(1)
        7
    """

    def __init__(self, players: Sequence[str], dealer: int,
                 shuffler: Shuffler = standard_shuffler,
                 cards_per_player: int = 7) -> None:
        """
        创建并开始一个新回合

        洗牌、从庄家下家开始逐张轮流发牌、翻开起始牌，并按"庄家打出"结算起始牌效果.

        Args:
            players: 玩家名称，至少两人
            dealer: 庄家座位
            shuffler: 洗牌函数
            cards_per_player: 每人发牌数

        Raises:
            GameConfigError: 参数无效时
        """
        players = list(players)
        if len(players) < 2:
            raise GameConfigError(f"至少需要2名玩家，实际: {len(players)}")
        if any(not isinstance(name, str) for name in players):
            raise GameConfigError("玩家名称必须是字符串")
        if isinstance(dealer, bool) or not isinstance(dealer, int) or not 0 <= dealer < len(players):
            raise GameConfigError(f"庄家座位{dealer!r}超出范围")
        if isinstance(cards_per_player, bool) or not isinstance(cards_per_player, int) or cards_per_player < 1:
            raise GameConfigError(f"每人发牌数必须是正整数，实际: {cards_per_player!r}")
        if cards_per_player * len(players) > MAX_DEALT_CARDS:
            raise GameConfigError(
                f"{len(players)}名玩家每人{cards_per_player}张牌超过了可发牌数{MAX_DEALT_CARDS}"
            )

        self._init_fields(players, dealer, shuffler)

        self._draw_pile = create_initial_deck()
        self._draw_pile.shuffle(shuffler)
        self._deal(cards_per_player)
        self._start()

        logger.info("回合开始: %d名玩家，庄家座位%d，起始牌%s，座位%d先行动",
                    len(players), dealer, self.discard_top(), self._player_in_turn)

    def _init_fields(self, players: List[str], dealer: int, shuffler: Shuffler) -> None:
        self._players = players
        self._dealer = dealer
        self._shuffler = shuffler
        self._hands: List[List[Card]] = [[] for _ in players]
        self._draw_pile = Deck()
        self._discard_pile = Deck()
        self._current_color: Optional[Color] = None
        self._direction = Direction.CLOCKWISE
        self._player_in_turn: Optional[int] = None
        self._phase = RoundPhase.IN_PROGRESS
        self._result: Optional[RoundResult] = None
        self._uno_declared = [False] * len(players)
        self._uno_exposed = [False] * len(players)
        self._end_listeners: List[EndListener] = []
        self._before_end_hooks: List[BeforeEndHook] = []

    def _deal(self, cards_per_player: int) -> None:
        player_count = len(self._players)
        seat = next_seat(self._dealer, 1, Direction.CLOCKWISE, player_count)
        for _ in range(cards_per_player * player_count):
            self._hands[seat].append(self._draw_pile.deal())
            seat = next_seat(seat, 1, Direction.CLOCKWISE, player_count)

    def _flip_start_card(self) -> Card:
        """翻开起始牌，王牌放回底部重新洗牌再翻"""
        attempts = 0
        top = self._draw_pile.deal()
        while top.is_wild:
            self._draw_pile.append(top)
            attempts += 1
            if attempts > FULL_DECK_SIZE:
                # 洗牌函数始终把王牌放在顶部，直接取第一张非王牌
                cards = self._draw_pile.cards
                index = next(i for i, card in enumerate(cards) if not card.is_wild)
                top = cards.pop(index)
                self._draw_pile = Deck(cards)
                break
            self._draw_pile.shuffle(self._shuffler)
            top = self._draw_pile.deal()
        return top

    def _start(self) -> None:
        top = self._flip_start_card()
        self._discard_pile.push_front(top)
        self._current_color = top.color
        resolution = resolve_effect(top, self._dealer, self._direction, len(self._players))
        self._apply_resolution(resolution)

    # ==================== 查询 ====================

    def player_in_turn(self) -> Optional[int]:
        """当前行动座位，回合结束后为None"""
        return self._player_in_turn

    @property
    def phase(self) -> RoundPhase:
        return self._phase

    def has_ended(self) -> bool:
        return self._phase is RoundPhase.ENDED

    def winner(self) -> Optional[int]:
        """赢家座位，回合未结束时为None"""
        return self._result.winner if self._result else None

    def score(self) -> Optional[int]:
        """回合得分，回合未结束时为None"""
        return self._result.score if self._result else None

    def result(self) -> Optional[RoundResult]:
        return self._result

    @property
    def player_count(self) -> int:
        return len(self._players)

    @property
    def players(self) -> Tuple[str, ...]:
        return tuple(self._players)

    def player(self, seat: int) -> str:
        """
        座位上的玩家名称

        Raises:
            IllegalActionError: 座位超出范围时
        """
        self._check_seat(seat)
        return self._players[seat]

    def hand(self, seat: int) -> Tuple[Card, ...]:
        """座位的手牌副本"""
        self._check_seat(seat)
        return tuple(self._hands[seat])

    def hand_size(self, seat: int) -> int:
        self._check_seat(seat)
        return len(self._hands[seat])

    def draw_pile(self) -> Deck:
        return Deck(self._draw_pile)

    def discard_pile(self) -> Deck:
        return Deck(self._discard_pile)

    def discard_top(self) -> Card:
        return self._discard_pile.peek()

    @property
    def current_color(self) -> Optional[Color]:
        return self._current_color

    @property
    def current_direction(self) -> Direction:
        return self._direction

    @property
    def dealer(self) -> int:
        return self._dealer

    def can_play(self, card_index: int) -> bool:
        """当前行动座位能否打出指定下标的牌，回合结束或下标越界时为False"""
        if self._player_in_turn is None:
            return False
        hand = self._hands[self._player_in_turn]
        if not self._is_index(card_index, len(hand)):
            return False
        return can_play(hand[card_index], self.discard_top(), self._current_color)

    def can_play_any(self) -> bool:
        """当前行动座位是否有可打出的牌"""
        if self._player_in_turn is None:
            return False
        return any(self.can_play(index) for index in range(len(self._hands[self._player_in_turn])))

    def playable_indices(self) -> List[int]:
        """当前行动座位所有可打出的牌的下标"""
        if self._player_in_turn is None:
            return []
        return [index for index in range(len(self._hands[self._player_in_turn])) if self.can_play(index)]

    def has_declared_uno(self, seat: int) -> bool:
        self._check_seat(seat)
        return self._uno_declared[seat]

    def is_uno_exposed(self, seat: int) -> bool:
        """座位是否只剩一张牌且没有声明uno"""
        self._check_seat(seat)
        return self._uno_exposed[seat] and len(self._hands[seat]) == 1

    def state_view(self) -> RoundState:
        """导出供不变量检查器使用的状态视图"""
        return RoundState(
            player_count=len(self._players),
            hands=tuple(tuple(hand) for hand in self._hands),
            draw_pile=tuple(self._draw_pile),
            discard_pile=tuple(self._discard_pile),
            current_color=self._current_color,
            dealer=self._dealer,
            player_in_turn=self._player_in_turn,
        )

    # ==================== 变更 ====================

    def play(self, card_index: int, color: Any = None) -> Card:
        """
        当前行动座位打出一张牌

        Args:
            card_index: 手牌下标
            color: 打出王牌时选择的颜色（Color或其字符串值）

        Returns:
            Card: 打出的牌

        Raises:
            IllegalActionError: 回合已结束、下标越界、出牌不合法、
                王牌没有选择有效颜色或非王牌指定了颜色时
            Exception: 回合结束前的准备函数抛出的异常原样传出，此时回合不变
        """
        self._ensure_in_progress()
        seat = self._player_in_turn
        hand = self._hands[seat]

        if not self._is_index(card_index, len(hand)):
            raise IllegalActionError(f"手牌下标{card_index!r}超出范围(共{len(hand)}张)")

        card = hand[card_index]
        chosen_color = parse_color(color)
        if card.is_wild:
            if chosen_color is None:
                raise IllegalActionError(f"打出{card}必须选择颜色")
        else:
            if chosen_color is not None:
                raise IllegalActionError(f"{card}不是王牌，不能选择颜色")
            if not can_play(card, self.discard_top(), self._current_color):
                raise IllegalActionError(
                    f"{card}不能打在{self.discard_top()}上(当前颜色{self._current_color.value})"
                )

        if len(hand) == 1:
            for hook in list(self._before_end_hooks):
                hook()

        hand.pop(card_index)
        self._discard_pile.push_front(card)
        self._current_color = chosen_color if card.is_wild else card.color

        self._uno_exposed[seat] = len(hand) == 1 and not self._uno_declared[seat]
        self._uno_declared[seat] = False

        logger.debug("座位%d打出%s，剩余%d张", seat, card, len(hand))

        resolution = resolve_effect(card, seat, self._direction, len(self._players))
        self._apply_resolution(resolution)

        if not hand:
            self._end(seat)
        return card

    def draw(self) -> Optional[Card]:
        """
        当前行动座位摸一张牌并结束行动

        摸牌堆为空时回收弃牌堆（保留顶部）并洗牌；
        没有任何牌可摸时仍然轮到下一位.

        Returns:
            Optional[Card]: 摸到的牌，没有牌可摸时为None

        Raises:
            IllegalActionError: 回合已结束时
        """
        self._ensure_in_progress()
        seat = self._player_in_turn

        self._uno_declared[seat] = False
        self._uno_exposed[seat] = False
        drawn = self._give_cards(seat, 1)

        self._player_in_turn = next_seat(seat, 1, self._direction, len(self._players))
        if drawn:
            logger.debug("座位%d摸了一张牌，现有%d张", seat, len(self._hands[seat]))
            return drawn[0]
        logger.debug("座位%d没有牌可摸，跳过", seat)
        return None

    def say_uno(self, seat: int) -> None:
        """
        座位声明uno

        Raises:
            IllegalActionError: 座位无效或回合已结束时
        """
        self._ensure_in_progress()
        self._check_seat(seat)
        self._uno_declared[seat] = True
        self._uno_exposed[seat] = False
        logger.debug("座位%d声明uno", seat)

    def catch_uno_failure(self, accuser: int, accused: int) -> bool:
        """
        accuser指认accused只剩一张牌却没有声明uno

        成功时accused罚摸两张牌.

        Returns:
            bool: 指认是否成功；不成功时没有任何副作用

        Raises:
            IllegalActionError: 座位无效、自己指认自己或回合已结束时
        """
        self._ensure_in_progress()
        self._check_seat(accuser)
        self._check_seat(accused)
        if accuser == accused:
            raise IllegalActionError("不能指认自己")

        if not self.is_uno_exposed(accused):
            logger.debug("座位%d指认座位%d失败", accuser, accused)
            return False

        self._uno_exposed[accused] = False
        self._uno_declared[accused] = False
        self._give_cards(accused, UNO_PENALTY)
        logger.info("座位%d抓到座位%d没有声明uno，罚摸%d张", accuser, accused, UNO_PENALTY)
        return True

    def on_end(self, listener: EndListener) -> None:
        """
        注册回合结束监听器

        监听器在结束回合的play()中同步调用，且只调用一次.

        Raises:
            IllegalActionError: 回合已结束时
        """
        self._ensure_in_progress()
        self._end_listeners.append(listener)

    def on_before_end(self, hook: BeforeEndHook) -> None:
        """
        注册回合结束前的准备函数

        准备函数在即将打出最后一张牌的play()中调用，此时出牌已通过校验、
        状态还没有任何变更. 它抛出的异常直接传给play()的调用方，回合保持原样.
        与结束监听器不同，这里的异常不会被吞掉.

        Raises:
            IllegalActionError: 回合已结束时
        """
        self._ensure_in_progress()
        self._before_end_hooks.append(hook)

    # ==================== 快照 ====================

    def to_snapshot(self) -> Dict[str, Any]:
        """
        导出回合快照

        Returns:
            Dict[str, Any]: 只包含字符串、整数、None、列表和字典的普通数据
        """
        return {
            'players': list(self._players),
            'hands': [[card.to_record() for card in hand] for hand in self._hands],
            'draw_pile': self._draw_pile.to_snapshot(),
            'discard_pile': self._discard_pile.to_snapshot(),
            'current_color': self._current_color.value if self._current_color else None,
            'current_direction': self._direction.value,
            'dealer': self._dealer,
            'player_in_turn': self._player_in_turn,
        }

    @classmethod
    def from_snapshot(cls, data: Any, shuffler: Shuffler = standard_shuffler) -> 'Round':
        """
        从快照恢复回合

        uno声明状态不在快照中，恢复后全部重置.

        Args:
            data: to_snapshot()导出的数据
            shuffler: 之后回收弃牌堆时使用的洗牌函数

        Raises:
            ValidationError: 格式不合法时
            StateInvariantError: 跨字段不一致时
        """
        snapshot = parse_round_snapshot(data)

        hands = [[record.to_card() for record in hand] for hand in snapshot.hands]
        draw_pile = [record.to_card() for record in snapshot.draw_pile]
        discard_pile = [record.to_card() for record in snapshot.discard_pile]
        current_color = Color(snapshot.current_color) if snapshot.current_color else None

        state = RoundState(
            player_count=len(snapshot.players),
            hands=tuple(tuple(hand) for hand in hands),
            draw_pile=tuple(draw_pile),
            discard_pile=tuple(discard_pile),
            current_color=current_color,
            dealer=snapshot.dealer,
            player_in_turn=snapshot.player_in_turn,
        )
        RoundInvariants().check_all(state, raise_on_violation=True)

        round_ = cls.__new__(cls)
        round_._init_fields(list(snapshot.players), snapshot.dealer, shuffler)
        round_._hands = hands
        round_._draw_pile = Deck(draw_pile)
        round_._discard_pile = Deck(discard_pile)
        round_._current_color = current_color
        round_._direction = Direction(snapshot.current_direction)
        round_._player_in_turn = snapshot.player_in_turn

        if snapshot.player_in_turn is None:
            winner = next(seat for seat, hand in enumerate(hands) if not hand)
            round_._phase = RoundPhase.ENDED
            round_._result = RoundResult(winner, round_score(hands, winner))

        logger.debug("从快照恢复回合: %d名玩家，阶段%s", len(hands), round_._phase.name)
        return round_

    # ==================== 内部方法 ====================

    def _apply_resolution(self, resolution: EffectResolution) -> None:
        self._direction = resolution.direction
        if resolution.penalty_seat is not None:
            self._give_cards(resolution.penalty_seat, resolution.penalty_count)
        self._player_in_turn = resolution.next_player

    def _give_cards(self, seat: int, count: int) -> List[Card]:
        """给座位发count张牌，牌不够时发到没有为止"""
        hand = self._hands[seat]
        given: List[Card] = []
        for _ in range(count):
            card = self._take_from_draw_pile()
            if card is None:
                break
            hand.append(card)
            given.append(card)
        if len(hand) > 1:
            self._uno_declared[seat] = False
            self._uno_exposed[seat] = False
        return given

    def _take_from_draw_pile(self) -> Optional[Card]:
        if self._draw_pile.is_empty:
            self._recycle_discard_pile()
        return self._draw_pile.deal_or_none()

    def _recycle_discard_pile(self) -> None:
        """把弃牌堆除顶部外的牌洗入摸牌堆"""
        if self._discard_pile.size <= 1:
            return
        cards = self._discard_pile.cards
        self._discard_pile = Deck(cards[:1])
        recycled = Deck(cards[1:])
        recycled.shuffle(self._shuffler)
        self._draw_pile = recycled
        logger.debug("摸牌堆为空，回收弃牌堆%d张", recycled.size)

    def _end(self, winner: int) -> None:
        self._player_in_turn = None
        self._phase = RoundPhase.ENDED
        self._result = RoundResult(winner, round_score(self._hands, winner))
        logger.info("回合结束: 座位%d获胜，得分%d", winner, self._result.score)

        for listener in list(self._end_listeners):
            try:
                listener(self._result)
            except Exception:
                logger.exception("回合结束监听器执行失败: %r", listener)

    def _ensure_in_progress(self) -> None:
        if self._phase is RoundPhase.ENDED:
            raise IllegalActionError("回合已结束")

    def _check_seat(self, seat: int) -> None:
        if not self._is_index(seat, len(self._players)):
            raise IllegalActionError(f"座位{seat!r}超出范围(共{len(self._players)}名玩家)")

    @staticmethod
    def _is_index(value: Any, size: int) -> bool:
        return isinstance(value, int) and not isinstance(value, bool) and 0 <= value < size

    def __repr__(self) -> str:
        return (f"Round(players={len(self._players)}, phase={self._phase.name}, "
                f"player_in_turn={self._player_in_turn})")
