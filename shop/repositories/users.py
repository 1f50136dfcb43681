import secrets
from datetime import datetime, timezone
from typing import List, Optional

from shop.database import FileBackedDB
from shop.models.user import Activation, User


class FileUserRepository:
    table = "users"
    activations_table = "activations"

    def __init__(self, db: FileBackedDB):
        self.db = db

    def find(self, user_id: str) -> Optional[User]:
        return self._hydrate(self.db.get_record(self.table, "id", user_id))

    def find_by_login(self, login: str) -> Optional[User]:
        """Look a user up by username first, then by email."""
        row = self.db.get_record(self.table, "username", login) or self.db.get_record(self.table, "email", login)
        return self._hydrate(row)

    def create(self, user: User) -> User:
        if user.created_at is None:
            user.created_at = datetime.now(timezone.utc).replace(microsecond=0)
        row = self.db.create_record(self.table, user.to_dict(), id_field="id")
        user.id = str(row["id"])
        return user

    def add_activation(self, user: User, completed: bool = False) -> Activation:
        activation = Activation(
            user_id=user.id,
            code=secrets.token_urlsafe(24),
            completed=completed,
            completed_at=datetime.now(timezone.utc).replace(microsecond=0) if completed else None,
        )
        row = self.db.create_record(self.activations_table, activation.to_dict(), id_field="id")
        activation.id = str(row["id"])
        user.activations.append(activation)
        return activation

    def activations_for(self, user_id: str) -> List[Activation]:
        return [Activation.from_dict(r) for r in self.db.find_records(self.activations_table, "user_id", user_id)]

    def _hydrate(self, row) -> Optional[User]:
        if not row:
            return None
        return User.from_dict(row, self.activations_for(str(row.get("id"))))
