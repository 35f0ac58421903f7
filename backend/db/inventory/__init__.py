from .item import InventoryRecord

__all__ = ["InventoryRecord"]
