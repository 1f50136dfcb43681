from typing import List

from fastapi import APIRouter, Depends, HTTPException, status

from shop.api.deps import get_enchantment_repository, require_admin
from shop.api.schemas.item import EnchantmentCreate, EnchantmentOut
from shop.repositories.enchantments import FileEnchantmentRepository

router = APIRouter(prefix="/api/enchantments", tags=["enchantments"])
admin_router = APIRouter(prefix="/api/admin/enchantments", tags=["admin"], dependencies=[Depends(require_admin)])


@router.get("/", response_model=List[EnchantmentOut])
def list_enchantments(enchantments: FileEnchantmentRepository = Depends(get_enchantment_repository)):
    return [e.to_dict() for e in enchantments.all()]


@admin_router.post("/", response_model=EnchantmentOut, status_code=status.HTTP_201_CREATED)
def create_enchantment(payload: EnchantmentCreate,
                       enchantments: FileEnchantmentRepository = Depends(get_enchantment_repository)):
    if enchantments.find_by_game_id(payload.game_id) is not None:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Enchantment already exists")
    return enchantments.create(payload.game_id).to_dict()
