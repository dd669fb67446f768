"""
UNO整局游戏

Game负责把多个回合串成一局比赛：随机选择庄家开始回合，
回合结束时把得分加给赢家，然后开始下一回合或结束比赛.
"""

import logging
from typing import Any, Dict, List, Optional, Sequence, Tuple

from ..exceptions import GameConfigError, IllegalActionError, StateInvariantError
from ..random_utils import Randomizer, Shuffler, standard_randomizer, standard_shuffler
from ..round import MAX_DEALT_CARDS, Round, RoundResult
from ..snapshot.types import parse_game_snapshot

__all__ = ['Game', 'MIN_PLAYERS', 'MAX_PLAYERS', 'DEFAULT_TARGET_SCORE', 'DEFAULT_CARDS_PER_PLAYER']

logger = logging.getLogger(__name__)

MIN_PLAYERS = 2
MAX_PLAYERS = 10
DEFAULT_TARGET_SCORE = 500
DEFAULT_CARDS_PER_PLAYER = 7


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


class Game:
    """
    一局UNO比赛

    没有赢家时总有一个进行中的回合；有赢家后不再有回合.

    Examples:
        >>> from uno.core.random_utils import seeded_randomizer, seeded_shuffler
        >>> game = Game(['a', 'b'], target_score=200,
        ...             randomizer=seeded_randomizer(1), shuffler=seeded_shuffler(1))
        >>> game.winner() is None
        True
    """

    def __init__(self, players: Sequence[str], target_score: int = DEFAULT_TARGET_SCORE,
                 randomizer: Randomizer = standard_randomizer,
                 shuffler: Shuffler = standard_shuffler,
                 cards_per_player: int = DEFAULT_CARDS_PER_PLAYER) -> None:
        """
        创建比赛并开始第一回合

        Args:
            players: 玩家名称，2-10人
            target_score: 获胜目标分数，必须大于0
            randomizer: 选择庄家的随机下标函数
            shuffler: 洗牌函数
            cards_per_player: 每回合每人发牌数

        Raises:
            GameConfigError: 参数无效时
        """
        players = list(players)
        self._validate_config(players, target_score, cards_per_player)

        self._players = players
        self._target_score = target_score
        self._cards_per_player = cards_per_player
        self._randomizer = randomizer
        self._shuffler = shuffler
        self._scores = [0] * len(players)
        self._current_round: Optional[Round] = None
        self._next_dealer: Optional[int] = None

        logger.info("比赛开始: %s，目标分数%d", ", ".join(players), target_score)
        self._start_round(self._choose_dealer())

    @staticmethod
    def _validate_config(players: List[str], target_score: Any, cards_per_player: Any) -> None:
        if not MIN_PLAYERS <= len(players) <= MAX_PLAYERS:
            raise GameConfigError(f"玩家数量必须在{MIN_PLAYERS}-{MAX_PLAYERS}之间，实际: {len(players)}")
        if any(not isinstance(name, str) for name in players):
            raise GameConfigError("玩家名称必须是字符串")
        if not _is_int(target_score) or target_score <= 0:
            raise GameConfigError(f"目标分数必须是正整数，实际: {target_score!r}")
        if not _is_int(cards_per_player) or cards_per_player < 1:
            raise GameConfigError(f"每人发牌数必须是正整数，实际: {cards_per_player!r}")
        if cards_per_player * len(players) > MAX_DEALT_CARDS:
            raise GameConfigError(
                f"{len(players)}名玩家每人{cards_per_player}张牌超过了可发牌数{MAX_DEALT_CARDS}"
            )

    # ==================== 查询 ====================

    @property
    def player_count(self) -> int:
        return len(self._players)

    @property
    def players(self) -> Tuple[str, ...]:
        return tuple(self._players)

    @property
    def target_score(self) -> int:
        return self._target_score

    @property
    def cards_per_player(self) -> int:
        return self._cards_per_player

    def player(self, index: int) -> str:
        """
        座位上的玩家名称

        Raises:
            IllegalActionError: 座位超出范围时
        """
        self._check_seat(index)
        return self._players[index]

    def score(self, index: int) -> int:
        """
        座位的累计分数

        Raises:
            IllegalActionError: 座位超出范围时
        """
        self._check_seat(index)
        return self._scores[index]

    @property
    def scores(self) -> Tuple[int, ...]:
        return tuple(self._scores)

    def winner(self) -> Optional[int]:
        """第一个达到目标分数的座位，没有时为None"""
        for seat, score in enumerate(self._scores):
            if score >= self._target_score:
                return seat
        return None

    def current_round(self) -> Optional[Round]:
        """当前回合，比赛结束后为None"""
        return self._current_round

    def is_finished(self) -> bool:
        return self.winner() is not None

    # ==================== 回合流转 ====================

    def _choose_dealer(self) -> int:
        dealer = self._randomizer(len(self._players))
        if not _is_int(dealer) or not 0 <= dealer < len(self._players):
            raise StateInvariantError(f"随机函数返回的庄家座位{dealer!r}超出范围")
        return dealer

    def _start_round(self, dealer: int) -> None:
        self._attach(Round(self._players, dealer, self._shuffler, self._cards_per_player))

    def _attach(self, round_: Round) -> None:
        self._next_dealer = None
        round_.on_before_end(self._prepare_next_round)
        round_.on_end(self._on_round_end)
        self._current_round = round_

    def _prepare_next_round(self) -> None:
        """
        在最后一张牌生效之前选好下一回合的庄家

        随机函数出错时StateInvariantError传给出牌的调用方，
        回合、分数和当前回合都保持不变. 比赛随后结束时这个庄家不会被使用.
        """
        self._next_dealer = self._choose_dealer()

    def _on_round_end(self, result: RoundResult) -> None:
        self._scores[result.winner] += result.score
        logger.info("座位%d赢得回合，得%d分，累计%d分",
                    result.winner, result.score, self._scores[result.winner])

        winner = self.winner()
        if winner is not None:
            self._current_round = None
            logger.info("比赛结束: %s获胜，最终分数%s", self._players[winner], self._scores)
            return
        self._start_round(self._next_dealer)

    # ==================== 快照 ====================

    def to_snapshot(self) -> Dict[str, Any]:
        """
        导出整局游戏快照

        Returns:
            Dict[str, Any]: 普通数据，current_round为回合快照或None
        """
        return {
            'players': list(self._players),
            'target_score': self._target_score,
            'scores': list(self._scores),
            'cards_per_player': self._cards_per_player,
            'current_round': self._current_round.to_snapshot() if self._current_round else None,
        }

    @classmethod
    def from_snapshot(cls, data: Any, randomizer: Randomizer = standard_randomizer,
                      shuffler: Shuffler = standard_shuffler) -> 'Game':
        """
        从快照恢复比赛

        Args:
            data: to_snapshot()导出的数据
            randomizer: 之后选择庄家使用的随机下标函数
            shuffler: 之后洗牌使用的洗牌函数

        Raises:
            ValidationError: 格式不合法时
            StateInvariantError: 分数、赢家和回合之间不一致时
        """
        snapshot = parse_game_snapshot(data)
        players = list(snapshot.players)
        errors: List[str] = []

        if snapshot.target_score <= 0:
            errors.append(f"目标分数必须大于0，实际: {snapshot.target_score}")
        if not MIN_PLAYERS <= len(players) <= MAX_PLAYERS:
            errors.append(f"玩家数量必须在{MIN_PLAYERS}-{MAX_PLAYERS}之间，实际: {len(players)}")
        if snapshot.cards_per_player < 1 or snapshot.cards_per_player * len(players) > MAX_DEALT_CARDS:
            errors.append(f"每人发牌数{snapshot.cards_per_player}无效")
        if len(snapshot.scores) != len(players):
            errors.append(f"分数数量({len(snapshot.scores)})与玩家数量({len(players)})不一致")
        if any(score < 0 for score in snapshot.scores):
            errors.append(f"分数不能为负: {snapshot.scores}")

        at_target = [seat for seat, score in enumerate(snapshot.scores) if score >= snapshot.target_score]
        if len(at_target) > 1:
            errors.append(f"多个座位达到目标分数: {at_target}")

        has_winner = bool(at_target)
        if has_winner and snapshot.current_round is not None:
            errors.append("比赛已有赢家，不能有进行中的回合")
        if not has_winner and snapshot.current_round is None:
            errors.append("比赛没有赢家，必须有进行中的回合")
        if snapshot.current_round is not None and list(snapshot.current_round.players) != players:
            errors.append("回合玩家与比赛玩家不一致")

        if errors:
            raise StateInvariantError("游戏快照不一致: " + "; ".join(errors))

        current_round = None
        if snapshot.current_round is not None:
            current_round = Round.from_snapshot(snapshot.current_round, shuffler)
            if current_round.has_ended():
                raise StateInvariantError("游戏快照不一致: 当前回合已结束")

        game = cls.__new__(cls)
        game._players = players
        game._target_score = snapshot.target_score
        game._cards_per_player = snapshot.cards_per_player
        game._randomizer = randomizer
        game._shuffler = shuffler
        game._scores = list(snapshot.scores)
        game._current_round = None
        game._next_dealer = None
        if current_round is not None:
            game._attach(current_round)

        logger.debug("从快照恢复比赛: 分数%s，%s", game._scores,
                     "进行中" if current_round is not None else "已结束")
        return game

    def _check_seat(self, index: Any) -> None:
        if not _is_int(index) or not 0 <= index < len(self._players):
            raise IllegalActionError(f"座位{index!r}超出范围(共{len(self._players)}名玩家)")

    def __repr__(self) -> str:
        return f"Game(players={len(self._players)}, scores={self._scores}, target={self._target_score})"
