"""
Per-user inventory records.

One row per (user, canonical item name). Rows with quantity 0 are never
stored; reaching zero deletes the row.
"""

from sqlalchemy import CheckConstraint, Column, ForeignKey, Integer, String, Uuid
from sqlalchemy.orm import relationship

from ..database import Base


class InventoryRecord(Base):
    __tablename__ = "inventory_items"
    __table_args__ = (
        CheckConstraint("quantity > 0", name="ck_inventory_items_quantity_positive"),
    )

    user_id = Column(Uuid, ForeignKey("users.id", ondelete="CASCADE"), primary_key=True)
    name = Column(String, primary_key=True)  # canonical: trimmed, lower-cased
    quantity = Column(Integer, nullable=False)

    user = relationship("User", back_populates="inventory_records")
