"""
快照序列化器

实现回合与游戏快照的JSON序列化和反序列化，用于持久化和传输.
反序列化会先做格式校验，保证交给引擎恢复的数据是合法的纯数据.
"""

import json
from typing import Any, Dict

from ..exceptions import UnoGameError, ValidationError
from .types import parse_game_snapshot, parse_round_snapshot

__all__ = ['SnapshotSerializer', 'SerializationError']


class SerializationError(UnoGameError):
    """序列化错误"""
    pass


class SnapshotSerializer:
    """
    快照序列化器

    负责快照字典与JSON字符串之间的转换.
    """

    @staticmethod
    def serialize_round(snapshot: Dict[str, Any]) -> str:
        """
        将回合快照序列化为JSON字符串

        Args:
            snapshot: Round.to_snapshot()的结果

        Returns:
            str: JSON格式的序列化字符串

        Raises:
            SerializationError: 序列化失败时抛出
        """
        return SnapshotSerializer._dumps(snapshot)

    @staticmethod
    def deserialize_round(json_str: str) -> Dict[str, Any]:
        """
        从JSON字符串反序列化回合快照

        Returns:
            Dict[str, Any]: 通过格式校验的快照字典

        Raises:
            ValidationError: JSON无效或格式不合法时抛出
        """
        data = SnapshotSerializer._loads(json_str)
        parse_round_snapshot(data)
        return data

    @staticmethod
    def serialize_game(snapshot: Dict[str, Any]) -> str:
        """将游戏快照序列化为JSON字符串"""
        return SnapshotSerializer._dumps(snapshot)

    @staticmethod
    def deserialize_game(json_str: str) -> Dict[str, Any]:
        """从JSON字符串反序列化游戏快照"""
        data = SnapshotSerializer._loads(json_str)
        parse_game_snapshot(data)
        return data

    @staticmethod
    def serialize_game_to_file(snapshot: Dict[str, Any], file_path: str) -> None:
        """
        将游戏快照序列化并保存到文件

        Raises:
            SerializationError: 序列化或文件写入失败时抛出
        """
        json_str = SnapshotSerializer.serialize_game(snapshot)
        try:
            with open(file_path, 'w', encoding='utf-8') as f:
                f.write(json_str)
        except OSError as e:
            raise SerializationError(f"快照保存到文件失败: {str(e)}") from e

    @staticmethod
    def deserialize_game_from_file(file_path: str) -> Dict[str, Any]:
        """
        从文件读取并反序列化游戏快照

        Raises:
            ValidationError: 文件读取失败或内容不合法时抛出
        """
        try:
            with open(file_path, 'r', encoding='utf-8') as f:
                json_str = f.read()
        except OSError as e:
            raise ValidationError(f"从文件读取快照失败: {str(e)}") from e
        return SnapshotSerializer.deserialize_game(json_str)

    @staticmethod
    def _dumps(snapshot: Dict[str, Any]) -> str:
        try:
            return json.dumps(snapshot, ensure_ascii=False, indent=2)
        except (TypeError, ValueError) as e:
            raise SerializationError(f"快照序列化失败: {str(e)}") from e

    @staticmethod
    def _loads(json_str: str) -> Any:
        try:
            return json.loads(json_str)
        except (TypeError, ValueError) as e:
            raise ValidationError(f"快照反序列化失败: {str(e)}") from e
