# shop/models/item.py
from __future__ import annotations
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional
import json
import uuid


class ItemType(str, Enum):
    # a regular in-game item; the only kind that carries enchantments
    ITEM = "item"
    PERMGROUP = "permgroup"


@dataclass
class Enchantment:
    id: str
    game_id: str

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "Enchantment":
        if d is None:
            raise ValueError("Cannot construct Enchantment from None")
        return cls(id=str(d.get("id") or ""), game_id=str(d.get("game_id") or ""))

    def to_dict(self) -> Dict[str, Any]:
        return {"id": self.id, "game_id": self.game_id}


@dataclass
class EnchantmentItem:
    """
    Link between an Item and an Enchantment with a level. Holds the owning
    item's id, not the item itself.
    """
    enchantment: Enchantment
    level: int = 1
    item_id: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "item_id": self.item_id or "",
            "enchantment_id": self.enchantment.id,
            "level": int(self.level),
        }


@dataclass
class Item:
    name: str
    type: str
    game_id: str
    description: str = ""
    image: Optional[str] = None  # None -> default image
    extra: Optional[Dict[str, Any]] = None
    enchantment_items: List[EnchantmentItem] = field(default_factory=list)
    id: str = field(default_factory=lambda: uuid.uuid4().hex)
    created_at: Optional[datetime] = None

    def add_enchantment_item(self, enchantment_item: EnchantmentItem) -> "Item":
        enchantment_item.item_id = self.id
        self.enchantment_items.append(enchantment_item)
        return self

    @classmethod
    def from_dict(cls, d: Dict[str, Any], enchantment_items: Optional[List[EnchantmentItem]] = None) -> "Item":
        if d is None:
            raise ValueError("Cannot construct Item from None")
        raw_extra = d.get("extra")
        extra = None
        if isinstance(raw_extra, dict):
            extra = raw_extra
        elif raw_extra:
            extra = json.loads(raw_extra)

        created_at = None
        created_at_raw = d.get("created_at")
        if isinstance(created_at_raw, datetime):
            created_at = created_at_raw
        elif created_at_raw:
            try:
                created_at = datetime.fromisoformat(str(created_at_raw))
            except ValueError:
                created_at = None

        item = cls(
            id=str(d.get("id") or uuid.uuid4().hex),
            name=str(d.get("name") or ""),
            type=str(d.get("type") or ItemType.ITEM.value),
            game_id=str(d.get("game_id") or ""),
            description=str(d.get("description") or ""),
            # CSV files store "no image" as an empty cell
            image=d.get("image") or None,
            extra=extra,
            created_at=created_at,
        )
        for ei in enchantment_items or []:
            item.add_enchantment_item(ei)
        return item

    def to_dict(self) -> Dict[str, Any]:
        """Flat row for the items table; associations are stored separately."""
        return {
            "id": self.id,
            "name": self.name,
            "type": self.type,
            "game_id": self.game_id,
            "description": self.description or "",
            "image": self.image or "",
            "extra": json.dumps(self.extra, ensure_ascii=False) if self.extra is not None else "",
            "created_at": self.created_at.isoformat(sep=" ") if self.created_at else "",
        }
