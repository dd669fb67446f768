"""
Game Query Service - 游戏查询服务

处理所有游戏只读操作，遵循CQRS模式.
查询服务负责：
- 导出比赛和回合快照
- 构造公开的牌桌视图
- 构造给某个座位的行动视图（机器人策略的输入）
- 查询行动日志

查询在会话锁内取数据，保证看到的是一致的状态.
"""

import logging
from dataclasses import asdict, dataclass
from typing import Any, Dict, List, Optional

from ..core.exceptions import IllegalActionError
from ..core.round import Round
from .command_service import GameCommandService, GameSession
from .types import QueryResult, ResultStatus


@dataclass(frozen=True)
class TableView:
    """牌桌公开信息"""
    game_id: str
    players: List[str]
    scores: List[int]
    target_score: int
    hand_sizes: List[int]
    draw_pile_size: int
    discard_top: Optional[Dict[str, Any]]
    current_color: Optional[str]
    current_direction: Optional[str]
    dealer: Optional[int]
    player_in_turn: Optional[int]
    winner: Optional[int]

    def to_dict(self) -> Dict[str, Any]:
        """转换为字典格式"""
        return asdict(self)


@dataclass(frozen=True)
class TurnView:
    """某个座位能看到的行动信息"""
    seat: int
    is_my_turn: bool
    hand: List[Dict[str, Any]]
    playable_indices: List[int]
    wild_indices: List[int]  # 打出这些牌时需要选择颜色
    discard_top: Dict[str, Any]
    current_color: str
    current_direction: str
    opponent_hand_sizes: Dict[int, int]

    def to_dict(self) -> Dict[str, Any]:
        """转换为字典格式"""
        return asdict(self)


class GameQueryService:
    """游戏查询服务"""

    def __init__(self, command_service: GameCommandService,
                 logger: Optional[logging.Logger] = None):
        """
        初始化查询服务

        Args:
            command_service: 命令服务实例，用于访问游戏会话
            logger: 日志记录器
        """
        self._command_service = command_service
        self.logger = logger or logging.getLogger(__name__)

    def _get_session(self, game_id: str) -> Optional[GameSession]:
        return self._command_service.get_session(game_id)

    @staticmethod
    def _not_found(game_id: str) -> QueryResult:
        return QueryResult.failure_result(
            f"游戏 {game_id} 不存在",
            error_code="GAME_NOT_FOUND",
            status=ResultStatus.VALIDATION_ERROR
        )

    def get_game_snapshot(self, game_id: str) -> QueryResult[Dict[str, Any]]:
        """
        导出整局比赛快照

        Args:
            game_id: 游戏ID

        Returns:
            查询结果，包含Game.to_snapshot()的数据
        """
        session = self._get_session(game_id)
        if session is None:
            return self._not_found(game_id)
        with session.lock:
            return QueryResult.success_result(session.game.to_snapshot())

    def get_round_snapshot(self, game_id: str) -> QueryResult[Dict[str, Any]]:
        """导出当前回合快照，比赛结束后失败"""
        session = self._get_session(game_id)
        if session is None:
            return self._not_found(game_id)
        with session.lock:
            round_ = session.game.current_round()
            if round_ is None:
                return QueryResult.failure_result(
                    f"游戏 {game_id} 已结束，没有进行中的回合",
                    error_code="GAME_FINISHED",
                    status=ResultStatus.BUSINESS_RULE_VIOLATION
                )
            return QueryResult.success_result(round_.to_snapshot())

    def get_table_view(self, game_id: str) -> QueryResult[TableView]:
        """
        获取牌桌公开信息：名称、手牌数、分数、弃牌堆顶部、颜色、方向、行动座位、赢家

        Args:
            game_id: 游戏ID
        """
        session = self._get_session(game_id)
        if session is None:
            return self._not_found(game_id)

        with session.lock:
            game = session.game
            round_ = game.current_round()
            view = TableView(
                game_id=game_id,
                players=list(game.players),
                scores=list(game.scores),
                target_score=game.target_score,
                hand_sizes=[round_.hand_size(seat) for seat in range(round_.player_count)] if round_ else [],
                draw_pile_size=round_.draw_pile().size if round_ else 0,
                discard_top=round_.discard_top().to_record() if round_ else None,
                current_color=round_.current_color.value if round_ else None,
                current_direction=round_.current_direction.value if round_ else None,
                dealer=round_.dealer if round_ else None,
                player_in_turn=round_.player_in_turn() if round_ else None,
                winner=game.winner()
            )
        return QueryResult.success_result(view)

    def get_turn_view(self, game_id: str, seat: int) -> QueryResult[TurnView]:
        """
        获取某个座位的行动视图

        只包含该座位自己的手牌和公开信息，不包含任何策略.

        Args:
            game_id: 游戏ID
            seat: 座位
        """
        session = self._get_session(game_id)
        if session is None:
            return self._not_found(game_id)

        with session.lock:
            round_ = session.game.current_round()
            if round_ is None:
                return QueryResult.failure_result(
                    f"游戏 {game_id} 已结束",
                    error_code="GAME_FINISHED",
                    status=ResultStatus.BUSINESS_RULE_VIOLATION
                )
            try:
                view = self._build_turn_view(round_, seat)
            except IllegalActionError as e:
                return QueryResult.failure_result(
                    str(e),
                    error_code="INVALID_SEAT",
                    status=ResultStatus.VALIDATION_ERROR
                )
        return QueryResult.success_result(view)

    @staticmethod
    def _build_turn_view(round_: Round, seat: int) -> TurnView:
        hand = round_.hand(seat)
        is_my_turn = round_.player_in_turn() == seat
        playable = round_.playable_indices() if is_my_turn else []
        return TurnView(
            seat=seat,
            is_my_turn=is_my_turn,
            hand=[card.to_record() for card in hand],
            playable_indices=playable,
            wild_indices=[index for index in playable if hand[index].is_wild],
            discard_top=round_.discard_top().to_record(),
            current_color=round_.current_color.value,
            current_direction=round_.current_direction.value,
            opponent_hand_sizes={
                other: round_.hand_size(other)
                for other in range(round_.player_count) if other != seat
            }
        )

    def get_action_log(self, game_id: str, limit: Optional[int] = None) -> QueryResult[List[Dict[str, Any]]]:
        """
        获取行动日志

        Args:
            game_id: 游戏ID
            limit: 只返回最近的limit条
        """
        session = self._get_session(game_id)
        if session is None:
            return self._not_found(game_id)
        with session.lock:
            entries = [entry.to_dict() for entry in session.action_log]
        if limit is not None:
            entries = entries[-limit:] if limit > 0 else []
        return QueryResult.success_result(entries)
