import logging
from datetime import datetime, timezone
from typing import List, Optional, Protocol

from shop.database import FileBackedDB
from shop.models.item import EnchantmentItem, Item
from shop.repositories.enchantments import FileEnchantmentRepository

logger = logging.getLogger(__name__)


class ItemRepository(Protocol):
    def create(self, item: Item) -> None:
        ...


class FileItemRepository:
    """
    Items live in the `items` table; their enchantment links in `enchantment_items`
    (one row per link, in attach order).
    """
    table = "items"
    links_table = "enchantment_items"

    def __init__(self, db: FileBackedDB):
        self.db = db
        self.enchantments = FileEnchantmentRepository(db)

    def create(self, item: Item) -> None:
        if item.created_at is None:
            item.created_at = datetime.now(timezone.utc).replace(microsecond=0)
        self.db.create_record(self.table, item.to_dict(), id_field="id")
        try:
            self.db.create_records(self.links_table, [ei.to_dict() for ei in item.enchantment_items])
        except Exception:
            # an item without its links must not stay behind
            logger.error("Writing enchantment links for item %s failed, removing the item row", item.id)
            self.db.delete_records(self.table, "id", item.id)
            raise

    def find(self, item_id: str) -> Optional[Item]:
        row = self.db.get_record(self.table, "id", item_id)
        if not row:
            return None
        return Item.from_dict(row, self._links_for(str(row["id"])))

    def all(self) -> List[Item]:
        return [Item.from_dict(r, self._links_for(str(r["id"]))) for r in self.db.list_records(self.table)]

    def delete(self, item_id: str) -> bool:
        removed = self.db.delete_records(self.table, "id", item_id)
        if not removed:
            return False
        # links are owned by the item
        links = self.db.delete_records(self.links_table, "item_id", item_id)
        logger.info("Deleted item %s and %d enchantment link(s)", item_id, links)
        return True

    def _links_for(self, item_id: str) -> List[EnchantmentItem]:
        links = []
        for row in self.db.find_records(self.links_table, "item_id", item_id):
            enchantment = self.enchantments.find(row.get("enchantment_id"))
            if enchantment is None:
                logger.warning("Item %s links missing enchantment %s", item_id, row.get("enchantment_id"))
                continue
            links.append(EnchantmentItem(enchantment=enchantment, level=int(float(row.get("level") or 1)), item_id=item_id))
        return links
