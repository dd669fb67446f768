"""
ConfigService - 配置管理服务

负责集中化管理所有配置，包括：
- 游戏规则配置（玩家人数、发牌数、目标分数）
- 日志配置

为Application层和CLI提供统一的配置管理接口.
"""

import logging
from dataclasses import asdict, dataclass
from enum import Enum
from typing import Any, Dict, List, Optional

from ..core.game import DEFAULT_CARDS_PER_PLAYER, DEFAULT_TARGET_SCORE, MAX_PLAYERS, MIN_PLAYERS
from .types import QueryResult


class ConfigType(Enum):
    """配置类型枚举"""
    GAME_RULES = "game_rules"
    LOGGING = "logging"


@dataclass
class GameRulesConfig:
    """游戏规则配置"""
    min_players: int = MIN_PLAYERS
    max_players: int = MAX_PLAYERS
    cards_per_player: int = DEFAULT_CARDS_PER_PLAYER
    min_cards_per_player: int = 1
    max_cards_per_player: int = 15
    target_score: int = DEFAULT_TARGET_SCORE
    action_log_size: int = 200  # 每个会话保留的行动日志条数

    def __post_init__(self):
        """验证规则范围"""
        if not MIN_PLAYERS <= self.min_players <= self.max_players <= MAX_PLAYERS:
            raise ValueError(f"玩家人数范围无效: {self.min_players}-{self.max_players}")
        if not 1 <= self.min_cards_per_player <= self.cards_per_player <= self.max_cards_per_player:
            raise ValueError(f"每人发牌数{self.cards_per_player}不在"
                             f"{self.min_cards_per_player}-{self.max_cards_per_player}之间")
        if self.target_score <= 0:
            raise ValueError(f"目标分数必须大于0，当前为: {self.target_score}")


@dataclass
class LoggingConfig:
    """日志配置"""
    log_level: str = 'INFO'
    log_format: str = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


_CONFIG_CLASSES = {
    ConfigType.GAME_RULES: GameRulesConfig,
    ConfigType.LOGGING: LoggingConfig,
}


class ConfigService:
    """配置管理服务"""

    def __init__(self):
        """初始化配置服务"""
        self.logger = logging.getLogger(__name__)
        self._configs: Dict[ConfigType, Dict[str, Any]] = {}
        self._load_default_configs()

    def _load_default_configs(self):
        """加载默认配置"""
        self._configs[ConfigType.GAME_RULES] = {
            'default': GameRulesConfig(),
            # 原版宿主的限制：2-4人，每人5-10张
            'classic': GameRulesConfig(
                max_players=4,
                min_cards_per_player=5,
                max_cards_per_player=10
            ),
            'quick': GameRulesConfig(
                cards_per_player=5,
                target_score=100
            )
        }

        self._configs[ConfigType.LOGGING] = {
            'default': LoggingConfig(),
            'debug': LoggingConfig(log_level='DEBUG'),
            'quiet': LoggingConfig(log_level='WARNING')
        }

        self.logger.debug("默认配置加载完成")

    def _get_profile(self, config_type: ConfigType, profile: str) -> Any:
        config_profiles = self._configs[config_type]
        if profile not in config_profiles:
            self.logger.warning(f"未找到{config_type.value}配置 '{profile}'，使用默认配置")
            profile = "default"
        return config_profiles[profile]

    def get_game_rules_config(self, profile: str = "default") -> QueryResult[GameRulesConfig]:
        """
        获取游戏规则配置

        Args:
            profile: 配置名 (default, classic, quick)

        Returns:
            查询结果，包含游戏规则配置
        """
        return QueryResult.success_result(self._get_profile(ConfigType.GAME_RULES, profile))

    def get_logging_config(self, profile: str = "default") -> QueryResult[LoggingConfig]:
        """
        获取日志配置

        Args:
            profile: 配置名 (default, debug, quiet)

        Returns:
            查询结果，包含日志配置
        """
        return QueryResult.success_result(self._get_profile(ConfigType.LOGGING, profile))

    def get_merged_config(self, config_type: ConfigType, profile: str = "default") -> QueryResult[Dict[str, Any]]:
        """
        获取配置字典

        Args:
            config_type: 配置类型
            profile: 配置名
        """
        if config_type not in self._configs:
            return QueryResult.failure_result(
                f"不支持的配置类型: {config_type}",
                error_code="UNSUPPORTED_CONFIG_TYPE"
            )
        return QueryResult.success_result(asdict(self._get_profile(config_type, profile)))

    def update_config(self, config_type: ConfigType, profile: str, updates: Dict[str, Any]) -> QueryResult[bool]:
        """
        更新配置

        更新后的配置会重新校验，校验失败时原配置不变.

        Args:
            config_type: 配置类型
            profile: 配置名
            updates: 更新的配置项

        Returns:
            查询结果，包含更新是否成功
        """
        if config_type not in self._configs:
            return QueryResult.failure_result(
                f"配置类型 {config_type} 不存在",
                error_code="CONFIG_TYPE_NOT_FOUND"
            )

        config_profiles = self._configs[config_type]
        if profile not in config_profiles:
            return QueryResult.failure_result(
                f"配置 {profile} 不存在",
                error_code="CONFIG_PROFILE_NOT_FOUND"
            )

        current = asdict(config_profiles[profile])
        for key, value in updates.items():
            if key in current:
                current[key] = value
            else:
                self.logger.warning(f"配置项 {key} 不存在于 {config_type.value}.{profile} 中")

        try:
            config_profiles[profile] = _CONFIG_CLASSES[config_type](**current)
        except ValueError as e:
            return QueryResult.failure_result(
                f"更新配置失败: {str(e)}",
                error_code="INVALID_CONFIG_VALUE"
            )

        self.logger.info(f"配置 {config_type.value}.{profile} 更新成功")
        return QueryResult.success_result(True)

    def list_available_profiles(self, config_type: ConfigType) -> QueryResult[List[str]]:
        """列出可用的配置名"""
        if config_type not in self._configs:
            return QueryResult.failure_result(
                f"配置类型 {config_type} 不存在",
                error_code="CONFIG_TYPE_NOT_FOUND"
            )
        return QueryResult.success_result(list(self._configs[config_type].keys()))


# 全局单例
_config_service_instance: Optional[ConfigService] = None


def get_config_service() -> ConfigService:
    """
    获取配置服务的全局单例

    Returns:
        ConfigService: 配置服务实例
    """
    global _config_service_instance
    if _config_service_instance is None:
        _config_service_instance = ConfigService()
    return _config_service_instance
