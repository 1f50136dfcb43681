import logging
from typing import List, Optional, Tuple

from shop.api.schemas.item import ItemCreate
from shop.core.exceptions import EnchantmentDoesNotExistError
from shop.models.item import Enchantment, EnchantmentItem, Item, ItemType
from shop.repositories.enchantments import EnchantmentRepository
from shop.repositories.items import ItemRepository
from shop.services.image_resolver import ImageResolver
from shop.services.images import UploadedImage

logger = logging.getLogger(__name__)


class AddItemHandler:
    """
    Builds a new Item from an ItemCreate request and hands it to the item repository.

    Enchantments are looked up before the image is resolved, so a missing
    enchantment aborts the whole creation before any upload is written to storage.
    """

    def __init__(self, repository: ItemRepository, enchantment_repository: EnchantmentRepository,
                 image_resolver: ImageResolver):
        self.repository = repository
        self.enchantment_repository = enchantment_repository
        self.image_resolver = image_resolver

    def handle(self, dto: ItemCreate, upload: Optional[UploadedImage] = None) -> Item:
        item_type = ItemType(dto.item_type)
        enchantments = self._enchantments(dto) if item_type is ItemType.ITEM else []

        image = self.image_resolver.resolve(dto.image_type, upload if upload is not None else dto.image_name)

        item = Item(
            name=dto.name,
            type=item_type.value,
            game_id=dto.game_id,
            description=dto.description or "",
            image=image,
            extra=dto.extra,
        )
        for enchantment, level in enchantments:
            item.add_enchantment_item(EnchantmentItem(enchantment=enchantment, level=level))

        self.repository.create(item)
        logger.info("Created %s %s (%s) with %d enchantment(s)", item.type, item.id, item.name,
                    len(item.enchantment_items))
        return item

    def _enchantments(self, dto: ItemCreate) -> List[Tuple[Enchantment, int]]:
        found = []
        for each in dto.enchantments:
            enchantment = self.enchantment_repository.find(each.id)
            if enchantment is None:
                raise EnchantmentDoesNotExistError(each.id)
            found.append((enchantment, each.level))
        return found
