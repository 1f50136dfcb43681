# shop/api/schemas/item.py
import json
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field, field_validator

from shop.models.item import Item, ItemType


class EnchantmentRequest(BaseModel):
    id: str
    level: int = Field(1, ge=1)

    @field_validator("id", mode="before")
    @classmethod
    def _coerce_id(cls, v: Any) -> Any:
        # ids may arrive as JSON numbers
        return str(v) if isinstance(v, int) else v


class ItemCreate(BaseModel):
    name: str = Field(..., min_length=1)
    item_type: ItemType = ItemType.ITEM
    game_id: str = Field(..., min_length=1)
    description: Optional[str] = ""
    extra: Optional[Dict[str, Any]] = None
    # default | browse | upload; unknown values are rejected by the image resolver
    image_type: str = "default"
    image_name: Optional[str] = None
    enchantments: List[EnchantmentRequest] = Field(default_factory=list)

    # multipart forms send nested values as JSON text
    @field_validator("extra", mode="before")
    @classmethod
    def _parse_extra(cls, v: Any) -> Any:
        if isinstance(v, str):
            return json.loads(v) if v.strip() else None
        return v

    @field_validator("enchantments", mode="before")
    @classmethod
    def _parse_enchantments(cls, v: Any) -> Any:
        if isinstance(v, str):
            return json.loads(v) if v.strip() else []
        return [] if v is None else v


class EnchantmentCreate(BaseModel):
    game_id: str = Field(..., min_length=1)


class EnchantmentOut(BaseModel):
    id: str
    game_id: str


class EnchantmentItemOut(BaseModel):
    enchantment_id: str
    game_id: str
    level: int


class ItemOut(BaseModel):
    id: str
    name: str
    type: str
    game_id: str
    description: Optional[str]
    image: Optional[str]
    image_url: Optional[str] = None
    extra: Optional[Dict[str, Any]]
    enchantments: List[EnchantmentItemOut]
    created_at: Optional[str]

    @classmethod
    def from_item(cls, item: Item, image_url_prefix: Optional[str] = None) -> "ItemOut":
        image_url = None
        if item.image and image_url_prefix:
            image_url = f"{image_url_prefix.rstrip('/')}/{item.image}"
        return cls(
            id=item.id,
            name=item.name,
            type=item.type,
            game_id=item.game_id,
            description=item.description,
            image=item.image,
            image_url=image_url,
            extra=item.extra,
            enchantments=[
                EnchantmentItemOut(enchantment_id=ei.enchantment.id, game_id=ei.enchantment.game_id, level=ei.level)
                for ei in item.enchantment_items
            ],
            created_at=item.created_at.isoformat(sep=" ") if item.created_at else None,
        )
