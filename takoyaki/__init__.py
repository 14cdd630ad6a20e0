"""Takoyaki Tycoon engine package.

Public API:
    from takoyaki import TakoyakiSession, Customer, CustomerOrder, PlatedItem
"""
from takoyaki.entities import (
    CookingLevel,
    Customer,
    CustomerOrder,
    GriddleCell,
    MatchPhase,
    Mood,
    PlatedItem,
    Tool,
    Topping,
    ToppingBreakdown,
)
from takoyaki.session import TakoyakiSession

__all__ = [
    "CookingLevel",
    "Customer",
    "CustomerOrder",
    "GriddleCell",
    "MatchPhase",
    "Mood",
    "PlatedItem",
    "TakoyakiSession",
    "Tool",
    "Topping",
    "ToppingBreakdown",
]
