"""
Round Module - 回合状态机

该模块实现UNO一回合内的全部规则：
- 发牌与起始牌结算
- 出牌合法性与功能牌效果
- 摸牌与弃牌堆回收
- uno声明与抓uno罚牌
- 回合结束计分与快照

Classes:
    Round: 回合状态机
    RoundPhase: 回合阶段
    Direction: 出牌方向
    RoundResult: 回合结束结果
"""

from .types import RoundPhase, Direction, EffectResolution, RoundResult, EndListener, BeforeEndHook
from .rules import can_play, next_seat, resolve_effect, hand_points, round_score, parse_color
from .round import Round, MAX_DEALT_CARDS, UNO_PENALTY

__all__ = [
    # 主要接口
    'Round',

    # 类型定义
    'RoundPhase',
    'Direction',
    'EffectResolution',
    'RoundResult',
    'EndListener',
    'BeforeEndHook',

    # 规则函数
    'can_play',
    'next_seat',
    'resolve_effect',
    'hand_points',
    'round_score',
    'parse_color',

    # 常量
    'MAX_DEALT_CARDS',
    'UNO_PENALTY',
]
