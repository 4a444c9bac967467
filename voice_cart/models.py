from sqlalchemy import (
    Column,
    DateTime,
    Float,
    Integer,
    String,
)
from sqlalchemy.orm import declarative_base

Base = declarative_base()


class ShoppingListItem(Base):
    __tablename__ = "shopping_list_items"

    # Insertion sequence; the list is read newest-first by ordering on it
    seq = Column(Integer, primary_key=True, autoincrement=True)
    id = Column(String, nullable=False, unique=True, index=True)  # "<name>-<epoch ms>-<suffix>"
    name = Column(String, nullable=False, index=True)
    quantity = Column(Float, nullable=False, default=1.0)
    unit = Column(String, nullable=True)  # e.g. "kg", "bottles", "बोतल"
    category = Column(String, nullable=False, default="other", index=True)
    created_at = Column(DateTime, nullable=False)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "quantity": self.quantity,
            "unit": self.unit,
            "category": self.category,
            "created_at": self.created_at,
        }


class HistoryEntry(Base):
    __tablename__ = "history_entries"

    # One row per item name, updated on every add of that name
    name = Column(String, primary_key=True)
    add_count = Column(Integer, nullable=False, default=0)
    last_added_at = Column(DateTime, nullable=False)

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "add_count": self.add_count,
            "last_added_at": self.last_added_at,
        }
