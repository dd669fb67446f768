"""
UNO Test Configuration - pytest配置文件

该文件提供测试的基础设施，包括：
- 通用的测试fixture（确定性的洗牌函数和随机下标函数）
- 应用层服务fixture
- 测试标记定义

所有测试都会自动加载这些配置. 测试只使用确定性的随机源.
"""

import pytest

from uno.application import ConfigService, GameCommandService, GameQueryService
from uno.core.invariant import RoundInvariants
from uno.core.random_utils import fixed_randomizer, identity_shuffler, seeded_randomizer, seeded_shuffler
from uno.core.round import Round


@pytest.fixture
def shuffler():
    """固定种子的洗牌函数fixture"""
    return seeded_shuffler(42)


@pytest.fixture
def randomizer():
    """固定种子的随机下标函数fixture"""
    return seeded_randomizer(42)


@pytest.fixture
def identity():
    """不改变顺序的洗牌函数fixture"""
    return identity_shuffler


@pytest.fixture
def dealer_zero():
    """总是选择座位0做庄家的随机下标函数fixture"""
    return fixed_randomizer(0)


@pytest.fixture
def ordered_round():
    """三名玩家、庄家座位0、未洗牌的回合fixture"""
    return Round(['Alice', 'Bob', 'Carol'], dealer=0, shuffler=identity_shuffler)


@pytest.fixture
def invariants():
    """回合不变量检查器fixture"""
    return RoundInvariants()


@pytest.fixture
def config_service():
    """独立的配置服务fixture，避免修改全局单例"""
    return ConfigService()


@pytest.fixture
def command_service(config_service):
    """命令服务fixture"""
    return GameCommandService(config_service=config_service)


@pytest.fixture
def query_service(command_service):
    """查询服务fixture"""
    return GameQueryService(command_service)


# 测试标记定义
def pytest_configure(config):
    """pytest配置"""
    config.addinivalue_line(
        "markers", "property_test: 标记基于属性的测试"
    )
    config.addinivalue_line(
        "markers", "integration: 标记集成测试"
    )
