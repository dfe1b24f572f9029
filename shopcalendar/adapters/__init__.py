"""
Adapters layer - Storage of shop schedules.
"""

from .json_repository import JsonFileShopRepository
from .memory_repository import InMemoryShopRepository
from .repository import ShopRepositoryProtocol, ShopSchedule

__all__ = [
    "JsonFileShopRepository",
    "InMemoryShopRepository",
    "ShopRepositoryProtocol",
    "ShopSchedule",
]
