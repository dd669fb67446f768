"""
随机化端口

引擎中的随机性只通过两个注入函数进入：
- Shuffler: 原地打乱一个列表
- Randomizer: 返回[0, bound)内的随机下标

不使用全局随机数生成器的隐式状态，固定种子即可完整重放一局游戏.
"""

import random
from typing import Callable, List, TypeVar

__all__ = [
    'Shuffler',
    'Randomizer',
    'standard_shuffler',
    'standard_randomizer',
    'seeded_shuffler',
    'seeded_randomizer',
    'identity_shuffler',
    'fixed_randomizer',
]

T = TypeVar('T')

Shuffler = Callable[[List[T]], None]
Randomizer = Callable[[int], int]


def standard_shuffler(items: List[T]) -> None:
    """使用random模块原地洗牌."""
    random.shuffle(items)


def standard_randomizer(bound: int) -> int:
    """返回[0, bound)内的随机整数."""
    return random.randrange(bound)


def seeded_shuffler(seed: int) -> Shuffler:
    """
    创建基于固定种子的洗牌函数.

    Args:
        seed: 随机种子

    Returns:
        Shuffler: 每次调用都推进同一个random.Random实例
    """
    rng = random.Random(seed)

    def shuffle(items: List[T]) -> None:
        rng.shuffle(items)

    return shuffle


def seeded_randomizer(seed: int) -> Randomizer:
    """创建基于固定种子的随机下标函数."""
    rng = random.Random(seed)

    def randomize(bound: int) -> int:
        return rng.randrange(bound)

    return randomize


def identity_shuffler(items: List[T]) -> None:
    """不改变顺序的洗牌函数，用于构造确定的牌序."""
    return None


def fixed_randomizer(value: int) -> Randomizer:
    """总是返回value % bound的随机下标函数，用于测试."""

    def randomize(bound: int) -> int:
        return value % bound

    return randomize
