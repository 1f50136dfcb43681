from typing import Any, List, Optional, Protocol

from shop.database import FileBackedDB
from shop.models.item import Enchantment


class EnchantmentRepository(Protocol):
    def find(self, enchantment_id: Any) -> Optional[Enchantment]:
        ...


class FileEnchantmentRepository:
    table = "enchantments"

    def __init__(self, db: FileBackedDB):
        self.db = db

    def find(self, enchantment_id: Any) -> Optional[Enchantment]:
        row = self.db.get_record(self.table, "id", enchantment_id)
        return Enchantment.from_dict(row) if row else None

    def find_by_game_id(self, game_id: str) -> Optional[Enchantment]:
        row = self.db.get_record(self.table, "game_id", game_id)
        return Enchantment.from_dict(row) if row else None

    def all(self) -> List[Enchantment]:
        return [Enchantment.from_dict(r) for r in self.db.list_records(self.table)]

    def create(self, game_id: str) -> Enchantment:
        row = self.db.create_record(self.table, {"game_id": game_id}, id_field="id")
        return Enchantment.from_dict(row)
