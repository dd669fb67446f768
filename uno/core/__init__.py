"""
UNO Core Module - 纯领域逻辑层

该模块包含UNO规则引擎的核心逻辑. 核心模块只依赖其他核心模块，
不依赖应用层或CLI，不做任何I/O.

Modules:
    deck: 牌、牌组和牌记录校验
    random_utils: 注入的洗牌函数和随机下标函数
    round: 回合状态机
    game: 整局比赛
    invariant: 牌数守恒与行动一致性检查
    snapshot: 快照格式与JSON序列化
"""

from .exceptions import (
    UnoGameError,
    ValidationError,
    IllegalActionError,
    StateInvariantError,
    GameConfigError,
)
from .deck import Card, CardType, Color, Deck, create_initial_deck
from .round import Round, RoundPhase, Direction, RoundResult
from .game import Game

__all__ = [
    # 引擎
    'Game',
    'Round',
    'RoundPhase',
    'Direction',
    'RoundResult',

    # 牌
    'Card',
    'CardType',
    'Color',
    'Deck',
    'create_initial_deck',

    # 异常
    'UnoGameError',
    'ValidationError',
    'IllegalActionError',
    'StateInvariantError',
    'GameConfigError',
]
