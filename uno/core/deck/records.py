"""
牌记录的格式校验.

快照中的每张牌是一条普通字典记录{"type", "color"?, "number"?}.
这里用pydantic严格校验记录，不做任何类型转换.
"""

from typing import Annotated, Any, Dict, List, Literal, Optional, Sequence

import pydantic
from pydantic import ConfigDict, Field, TypeAdapter, model_validator
from pydantic.dataclasses import dataclass as pydantic_dataclass

from ..exceptions import ValidationError
from .card import Card
from .types import CardType, Color

__all__ = ['CardRecord', 'ColorName', 'record_to_card', 'records_to_cards', 'card_records']

ColorName = Literal['BLUE', 'GREEN', 'RED', 'YELLOW']
TypeName = Literal['NUMBERED', 'SKIP', 'REVERSE', 'DRAW', 'WILD', 'WILD DRAW']
CardNumber = Annotated[int, Field(strict=True, ge=0, le=9)]

_COLORED_ACTIONS = ('SKIP', 'REVERSE', 'DRAW')


@pydantic_dataclass(frozen=True, config=ConfigDict(extra='forbid'))
class CardRecord:
    """
    单张牌的快照记录.

    按种类检查必填字段：数字牌需要颜色和点数，功能牌需要颜色，
    王牌两者都不能有.
    """
    type: TypeName = Field(..., description="牌的种类")
    color: Optional[ColorName] = Field(None, description="颜色")
    number: Optional[CardNumber] = Field(None, description="数字牌点数")

    @model_validator(mode='after')
    def check_fields_for_type(self) -> 'CardRecord':
        """验证字段与种类匹配."""
        if self.type == 'NUMBERED':
            if self.color is None or self.number is None:
                raise ValueError("数字牌必须有color和number")
        elif self.type in _COLORED_ACTIONS:
            if self.color is None:
                raise ValueError(f"{self.type}牌必须有color")
            if self.number is not None:
                raise ValueError(f"{self.type}牌不能有number")
        elif self.color is not None or self.number is not None:
            raise ValueError(f"{self.type}牌不能有color或number")
        return self

    def to_card(self) -> Card:
        """转换为Card对象."""
        color = Color(self.color) if self.color is not None else None
        return Card(CardType(self.type), color, self.number)


CardRecordList = TypeAdapter(List[CardRecord])


def record_to_card(record: Any) -> Card:
    """
    校验并转换单条记录.

    Args:
        record: 普通字典记录

    Returns:
        Card: 对应的牌

    Raises:
        ValidationError: 记录格式不合法时
    """
    return records_to_cards([record])[0]


def records_to_cards(records: Any) -> List[Card]:
    """
    校验并转换一组有序记录.

    Raises:
        ValidationError: 不是列表或任意一条记录不合法时
    """
    if not isinstance(records, (list, tuple)):
        raise ValidationError(f"牌记录必须是列表，实际: {type(records).__name__}")
    try:
        validated = CardRecordList.validate_python(list(records))
    except pydantic.ValidationError as e:
        raise ValidationError(f"牌记录校验失败: {e}") from e
    return [record.to_card() for record in validated]


def card_records(cards: Sequence[Card]) -> List[Dict[str, Any]]:
    """将一组牌导出为有序记录列表."""
    return [card.to_record() for card in cards]
