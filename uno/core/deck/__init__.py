"""
UNO牌组管理模块.

提供Card和Deck类，以及牌记录的严格校验.
"""

from .types import Color, CardType, FULL_DECK_SIZE
from .card import Card
from .deck import Deck, create_initial_deck
from .records import CardRecord, record_to_card, records_to_cards, card_records

__all__ = [
    'Color',
    'CardType',
    'FULL_DECK_SIZE',
    'Card',
    'Deck',
    'create_initial_deck',
    'CardRecord',
    'record_to_card',
    'records_to_cards',
    'card_records',
]
