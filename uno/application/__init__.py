"""
UNO Application Layer - 应用服务层

面向宿主的命令/查询服务和配置管理. 应用层可以依赖核心层，
核心层不依赖应用层.

Services:
    GameCommandService: 执行玩家行动，按会话串行化变更
    GameQueryService: 只读查询
    ConfigService: 配置管理
"""

from .types import ResultStatus, CommandResult, QueryResult, ActionLogEntry
from .config_service import (
    ConfigType, GameRulesConfig, LoggingConfig, ConfigService, get_config_service
)
from .command_service import GameCommandService, GameSession
from .query_service import GameQueryService, TableView, TurnView

__all__ = [
    # 服务
    'GameCommandService',
    'GameQueryService',
    'ConfigService',
    'get_config_service',

    # 配置
    'ConfigType',
    'GameRulesConfig',
    'LoggingConfig',

    # 类型定义
    'ResultStatus',
    'CommandResult',
    'QueryResult',
    'ActionLogEntry',
    'GameSession',
    'TableView',
    'TurnView',
]
