"""
Game Command Service - 游戏命令服务

处理所有游戏状态变更操作，遵循CQRS模式.
命令服务负责：
- 创建和恢复比赛会话
- 检查行动座位并执行玩家行动
- 按会话串行化所有变更
- 把引擎异常翻译成CommandResult
- 记录每个会话的行动日志
"""

import logging
import threading
import time
import uuid
from collections import deque
from dataclasses import dataclass, field
from typing import Any, Deque, Dict, List, Optional

from ..core.exceptions import (
    GameConfigError, IllegalActionError, StateInvariantError, UnoGameError, ValidationError
)
from ..core.game import Game
from ..core.random_utils import (
    seeded_randomizer, seeded_shuffler, standard_randomizer, standard_shuffler
)
from .config_service import ConfigService, get_config_service
from .types import ActionLogEntry, CommandResult, ResultStatus


@dataclass
class GameSession:
    """游戏会话

    每个会话持有一把可重入锁，同一会话上的命令和一致性查询都在锁内执行.
    """
    game_id: str
    game: Game
    action_log: Deque[ActionLogEntry]
    created_at: float
    last_updated: float
    lock: threading.RLock = field(default_factory=threading.RLock)
    _sequence: int = field(default=0, init=False, repr=False)

    def update_timestamp(self) -> None:
        """更新最后修改时间"""
        self.last_updated = time.time()

    def record(self, action_type: str, seat: Optional[int] = None, **details: Any) -> ActionLogEntry:
        """追加一条行动日志"""
        self._sequence += 1
        entry = ActionLogEntry(self._sequence, action_type, seat, details)
        self.action_log.append(entry)
        return entry


class GameCommandService:
    """游戏命令服务"""

    def __init__(self, config_service: Optional[ConfigService] = None,
                 logger: Optional[logging.Logger] = None,
                 rules_profile: str = "default"):
        """
        初始化命令服务

        Args:
            config_service: 配置服务，如果为None则使用全局配置服务
            logger: 日志记录器
            rules_profile: 使用的游戏规则配置名
        """
        self._config_service = config_service or get_config_service()
        self.logger = logger or logging.getLogger(__name__)
        self._rules_profile = rules_profile
        self._sessions: Dict[str, GameSession] = {}
        self._sessions_lock = threading.Lock()

    # ==================== 会话管理 ====================

    def create_game(self, player_names: List[str], target_score: Optional[int] = None,
                    cards_per_player: Optional[int] = None, seed: Optional[int] = None,
                    game_id: Optional[str] = None) -> CommandResult:
        """
        创建新比赛

        Args:
            player_names: 玩家名称列表
            target_score: 目标分数，None时使用配置
            cards_per_player: 每人发牌数，None时使用配置
            seed: 随机种子，给定时整局比赛可以完整重放
            game_id: 游戏ID，如果为None则自动生成

        Returns:
            命令执行结果，data包含game_id
        """
        rules = self._config_service.get_game_rules_config(self._rules_profile).data
        player_names = list(player_names)

        if not rules.min_players <= len(player_names) <= rules.max_players:
            return CommandResult.validation_error(
                f"玩家数量必须在{rules.min_players}-{rules.max_players}之间，当前: {len(player_names)}",
                error_code="INVALID_PLAYER_COUNT"
            )

        if cards_per_player is None:
            cards_per_player = rules.cards_per_player
        if (isinstance(cards_per_player, bool) or not isinstance(cards_per_player, int)
                or not rules.min_cards_per_player <= cards_per_player <= rules.max_cards_per_player):
            return CommandResult.validation_error(
                f"每人发牌数必须在{rules.min_cards_per_player}-{rules.max_cards_per_player}之间，"
                f"当前: {cards_per_player}",
                error_code="INVALID_CARDS_PER_PLAYER"
            )

        randomizer, shuffler = self._random_ports(seed)
        try:
            game = Game(
                player_names,
                target_score=target_score if target_score is not None else rules.target_score,
                randomizer=randomizer,
                shuffler=shuffler,
                cards_per_player=cards_per_player
            )
        except UnoGameError as e:
            return self._error_result(e)

        return self._register(game, game_id, "创建")

    def restore_game(self, snapshot: Any, seed: Optional[int] = None,
                     game_id: Optional[str] = None) -> CommandResult:
        """
        从快照恢复比赛会话

        Args:
            snapshot: Game.to_snapshot()导出的数据
            seed: 之后洗牌和选庄家使用的随机种子
            game_id: 游戏ID，如果为None则自动生成
        """
        randomizer, shuffler = self._random_ports(seed)
        try:
            game = Game.from_snapshot(snapshot, randomizer=randomizer, shuffler=shuffler)
        except UnoGameError as e:
            return self._error_result(e)
        return self._register(game, game_id, "恢复")

    def remove_game(self, game_id: str) -> CommandResult:
        """
        移除比赛会话

        Args:
            game_id: 游戏ID
        """
        with self._sessions_lock:
            if game_id not in self._sessions:
                return CommandResult.validation_error(
                    f"游戏 {game_id} 不存在",
                    error_code="GAME_NOT_FOUND"
                )
            del self._sessions[game_id]

        self.logger.info(f"游戏 {game_id} 已移除")
        return CommandResult.success_result(f"游戏 {game_id} 已移除")

    def get_session(self, game_id: str) -> Optional[GameSession]:
        """获取会话，不存在时返回None"""
        with self._sessions_lock:
            return self._sessions.get(game_id)

    def get_active_games(self) -> List[str]:
        """获取所有会话的游戏ID"""
        with self._sessions_lock:
            return list(self._sessions.keys())

    # ==================== 玩家行动 ====================

    def play_card(self, game_id: str, seat: int, card_index: int, color: Any = None) -> CommandResult:
        """
        座位打出一张牌

        Args:
            game_id: 游戏ID
            seat: 行动座位，必须是当前行动座位
            card_index: 手牌下标
            color: 打出王牌时选择的颜色

        Returns:
            命令执行结果，data包含打出的牌以及回合/比赛是否结束
        """
        session = self.get_session(game_id)
        if session is None:
            return self._game_not_found(game_id)

        with session.lock:
            game = session.game
            round_ = game.current_round()
            failure = self._check_turn(game_id, game, seat)
            if failure is not None:
                return failure

            try:
                card = round_.play(card_index, color)
            except UnoGameError as e:
                self.logger.debug(f"游戏 {game_id} 座位{seat}出牌失败: {e}")
                return self._error_result(e)

            session.record('play', seat, card=card.to_record(),
                           color=round_.current_color.value)
            data = {
                'card': card.to_record(),
                'current_color': round_.current_color.value,
                'round_ended': round_.has_ended(),
                'winner': game.winner(),
            }
            if round_.has_ended():
                result = round_.result()
                session.record('round_end', result.winner, score=result.score)
                data['round_winner'] = result.winner
                data['round_score'] = result.score
            session.update_timestamp()

        self.logger.info(f"游戏 {game_id} 座位{seat}打出 {card}")
        return CommandResult.success_result(f"打出 {card}", data=data)

    def draw_card(self, game_id: str, seat: int) -> CommandResult:
        """
        座位摸一张牌并结束行动

        Args:
            game_id: 游戏ID
            seat: 行动座位，必须是当前行动座位
        """
        session = self.get_session(game_id)
        if session is None:
            return self._game_not_found(game_id)

        with session.lock:
            game = session.game
            failure = self._check_turn(game_id, game, seat)
            if failure is not None:
                return failure

            try:
                card = game.current_round().draw()
            except UnoGameError as e:
                return self._error_result(e)

            session.record('draw', seat, drew=card is not None)
            session.update_timestamp()

        self.logger.info(f"游戏 {game_id} 座位{seat}摸牌")
        # 摸到的牌只告诉行动者本人，日志里不记录
        return CommandResult.success_result(
            "摸牌成功",
            data={'card': card.to_record() if card is not None else None}
        )

    def say_uno(self, game_id: str, seat: int) -> CommandResult:
        """
        座位声明uno，不要求是当前行动座位

        Args:
            game_id: 游戏ID
            seat: 声明的座位
        """
        session = self.get_session(game_id)
        if session is None:
            return self._game_not_found(game_id)

        with session.lock:
            round_ = session.game.current_round()
            if round_ is None:
                return self._game_finished(game_id)
            try:
                round_.say_uno(seat)
            except UnoGameError as e:
                return self._error_result(e)

            session.record('say_uno', seat)
            session.update_timestamp()

        self.logger.info(f"游戏 {game_id} 座位{seat}声明uno")
        return CommandResult.success_result("uno!")

    def catch_uno(self, game_id: str, accuser: int, accused: int) -> CommandResult:
        """
        指认某个座位没有声明uno

        Args:
            game_id: 游戏ID
            accuser: 指认的座位
            accused: 被指认的座位

        Returns:
            命令执行结果，data['caught']表示指认是否成功
        """
        session = self.get_session(game_id)
        if session is None:
            return self._game_not_found(game_id)

        with session.lock:
            round_ = session.game.current_round()
            if round_ is None:
                return self._game_finished(game_id)
            try:
                caught = round_.catch_uno_failure(accuser, accused)
            except UnoGameError as e:
                return self._error_result(e)

            session.record('catch_uno', accuser, accused=accused, caught=caught)
            session.update_timestamp()

        self.logger.info(f"游戏 {game_id} 座位{accuser}指认座位{accused}: {'成功' if caught else '失败'}")
        return CommandResult.success_result(
            "指认成功" if caught else "指认失败",
            data={'caught': caught}
        )

    # ==================== 内部方法 ====================

    @staticmethod
    def _random_ports(seed: Optional[int]):
        if seed is None:
            return standard_randomizer, standard_shuffler
        return seeded_randomizer(seed), seeded_shuffler(seed)

    def _register(self, game: Game, game_id: Optional[str], verb: str) -> CommandResult:
        if game_id is None:
            game_id = f"game_{uuid.uuid4().hex[:8]}"

        rules = self._config_service.get_game_rules_config(self._rules_profile).data
        now = time.time()
        session = GameSession(
            game_id=game_id,
            game=game,
            action_log=deque(maxlen=rules.action_log_size),
            created_at=now,
            last_updated=now
        )

        with self._sessions_lock:
            if game_id in self._sessions:
                return CommandResult.validation_error(
                    f"游戏 {game_id} 已存在",
                    error_code="GAME_ALREADY_EXISTS"
                )
            self._sessions[game_id] = session

        self.logger.info(f"{verb}游戏 {game_id}: {', '.join(game.players)}")
        return CommandResult.success_result(
            f"游戏 {game_id} {verb}成功",
            data={'game_id': game_id}
        )

    def _check_turn(self, game_id: str, game: Game, seat: int) -> Optional[CommandResult]:
        round_ = game.current_round()
        if round_ is None:
            return self._game_finished(game_id)
        if seat != round_.player_in_turn():
            return CommandResult.business_rule_violation(
                f"现在不是座位{seat}的回合，当前行动座位: {round_.player_in_turn()}",
                error_code="NOT_YOUR_TURN"
            )
        return None

    @staticmethod
    def _game_not_found(game_id: str) -> CommandResult:
        return CommandResult.validation_error(f"游戏 {game_id} 不存在", error_code="GAME_NOT_FOUND")

    @staticmethod
    def _game_finished(game_id: str) -> CommandResult:
        return CommandResult.business_rule_violation(f"游戏 {game_id} 已结束", error_code="GAME_FINISHED")

    def _error_result(self, error: UnoGameError) -> CommandResult:
        """把引擎异常翻译成命令结果"""
        if isinstance(error, ValidationError):
            return CommandResult.validation_error(str(error), error_code="VALIDATION_ERROR")
        if isinstance(error, GameConfigError):
            return CommandResult.validation_error(str(error), error_code="INVALID_GAME_CONFIG")
        if isinstance(error, IllegalActionError):
            return CommandResult.business_rule_violation(str(error), error_code="ILLEGAL_ACTION")
        if isinstance(error, StateInvariantError):
            self.logger.warning(f"状态不变量违反: {error}")
            return CommandResult.failure_result(str(error), error_code="STATE_INVARIANT")
        self.logger.error(f"未知引擎错误: {error}", exc_info=True)
        return CommandResult.failure_result(str(error), error_code="ENGINE_ERROR",
                                            status=ResultStatus.SYSTEM_ERROR)
