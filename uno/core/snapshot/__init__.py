"""
Snapshot Module - 状态快照

该模块实现UNO引擎的快照（备忘录）格式，包括：
- 回合与游戏快照的格式校验
- 快照的JSON序列化和反序列化

Classes:
    RoundSnapshot: 回合状态快照
    GameSnapshot: 游戏状态快照
    SnapshotSerializer: 快照序列化器
"""

from .types import (
    DirectionName,
    RoundSnapshot,
    GameSnapshot,
    parse_round_snapshot,
    parse_game_snapshot,
)
from .serializer import SnapshotSerializer, SerializationError

__all__ = [
    # 类型定义
    'DirectionName',
    'RoundSnapshot',
    'GameSnapshot',
    'parse_round_snapshot',
    'parse_game_snapshot',

    # 序列化器
    'SnapshotSerializer',
    'SerializationError',
]
