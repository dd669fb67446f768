"""
状态快照类型定义

定义回合与整局游戏快照的数据结构. 快照是纯数据：
牌是有序记录列表，回合和游戏字段是嵌套字典.
这里只负责格式校验，跨字段的一致性检查由invariant模块完成.
"""

from typing import Any, List, Literal, Optional

import pydantic
from pydantic import ConfigDict, Field, StrictInt, StrictStr, TypeAdapter
from pydantic.dataclasses import dataclass as pydantic_dataclass

from ..deck.records import CardRecord, ColorName
from ..exceptions import ValidationError

__all__ = [
    'DirectionName',
    'RoundSnapshot',
    'GameSnapshot',
    'parse_round_snapshot',
    'parse_game_snapshot',
]

DirectionName = Literal['clockwise', 'counterclockwise']


@pydantic_dataclass(config=ConfigDict(extra='forbid'))
class RoundSnapshot:
    """回合状态快照

    弃牌堆顶部在前. 回合结束后player_in_turn为None.
    uno声明状态属于宿主会话的瞬时状态，不在快照中.
    """
    players: List[StrictStr] = Field(..., min_length=2, description="玩家名称，按座位排列")
    hands: List[List[CardRecord]] = Field(..., description="每个座位的手牌")
    draw_pile: List[CardRecord] = Field(..., description="摸牌堆，顶部在前")
    discard_pile: List[CardRecord] = Field(..., description="弃牌堆，最近打出的在前")
    current_color: Optional[ColorName] = Field(..., description="当前颜色")
    current_direction: DirectionName = Field(..., description="当前方向")
    dealer: StrictInt = Field(..., description="庄家座位")
    player_in_turn: Optional[StrictInt] = Field(None, description="当前行动座位，回合结束时为None")


@pydantic_dataclass(config=ConfigDict(extra='forbid'))
class GameSnapshot:
    """整局游戏快照"""
    players: List[StrictStr] = Field(..., min_length=2, description="玩家名称，按座位排列")
    target_score: StrictInt = Field(..., description="获胜目标分数")
    scores: List[StrictInt] = Field(..., description="每个座位的累计分数")
    cards_per_player: StrictInt = Field(7, description="每回合每人发牌数")
    current_round: Optional[RoundSnapshot] = Field(None, description="当前回合，已结束的游戏没有")


_round_adapter = TypeAdapter(RoundSnapshot)
_game_adapter = TypeAdapter(GameSnapshot)


def parse_round_snapshot(data: Any) -> RoundSnapshot:
    """
    校验回合快照的格式

    Args:
        data: 普通字典或RoundSnapshot实例

    Returns:
        RoundSnapshot: 校验后的快照

    Raises:
        ValidationError: 格式不合法时
    """
    try:
        return _round_adapter.validate_python(data)
    except pydantic.ValidationError as e:
        raise ValidationError(f"回合快照格式错误: {e}") from e


def parse_game_snapshot(data: Any) -> GameSnapshot:
    """
    校验整局游戏快照的格式

    Raises:
        ValidationError: 格式不合法时
    """
    try:
        return _game_adapter.validate_python(data)
    except pydantic.ValidationError as e:
        raise ValidationError(f"游戏快照格式错误: {e}") from e
