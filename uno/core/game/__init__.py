"""
Game Module - 整局比赛

把多个回合串成一局比赛，累计分数并判定最终赢家.
"""

from .game import Game, MIN_PLAYERS, MAX_PLAYERS, DEFAULT_TARGET_SCORE, DEFAULT_CARDS_PER_PLAYER

__all__ = [
    'Game',
    'MIN_PLAYERS',
    'MAX_PLAYERS',
    'DEFAULT_TARGET_SCORE',
    'DEFAULT_CARDS_PER_PLAYER',
]
