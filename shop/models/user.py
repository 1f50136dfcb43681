# shop/models/user.py
from __future__ import annotations
from dataclasses import dataclass, asdict, field
from datetime import datetime
from typing import Any, Dict, Iterable, List, Optional, Protocol, runtime_checkable


def _parse_bool(raw: Any) -> bool:
    # CSV cells come back as 'True'/'False' strings
    if isinstance(raw, bool):
        return raw
    if isinstance(raw, (int, float)):
        return bool(raw)
    if isinstance(raw, str):
        return raw.strip().lower() in ("1", "true", "yes", "y", "t")
    return False


def _parse_datetime(raw: Any) -> Optional[datetime]:
    if not raw:
        return None
    if isinstance(raw, datetime):
        return raw
    try:
        return datetime.fromisoformat(str(raw))
    except ValueError:
        try:
            return datetime.strptime(str(raw), "%Y-%m-%d %H:%M:%S")
        except ValueError:
            return None


@dataclass
class Activation:
    """An account activation record. A user may log in once one is completed."""
    user_id: str
    code: str
    completed: bool = False
    completed_at: Optional[datetime] = None
    id: Optional[str] = None

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "Activation":
        if d is None:
            raise ValueError("Cannot construct Activation from None")
        return cls(
            id=d.get("id") or None,
            user_id=str(d.get("user_id") or ""),
            code=str(d.get("code") or ""),
            completed=_parse_bool(d.get("completed", False)),
            completed_at=_parse_datetime(d.get("completed_at")),
        )

    def to_dict(self) -> Dict[str, Any]:
        out = asdict(self)
        out["completed_at"] = self.completed_at.isoformat(sep=" ") if self.completed_at else ""
        out["completed"] = bool(self.completed)
        return out


@runtime_checkable
class UserInterface(Protocol):
    """
    Read contract every identity-aware feature relies on.
    """
    id: str
    username: str
    email: str
    password_hash: str
    balance: float

    def get_activations(self) -> Iterable[Activation]:
        ...


@dataclass
class User:
    """
    Domain model for a shop account.
    The FileBackedDB stores values as strings; from_dict normalizes them.
    """
    username: str
    email: str
    password_hash: str
    balance: float = 0.0
    is_admin: bool = False
    created_at: Optional[datetime] = None
    id: str = ""
    activations: List[Activation] = field(default_factory=list)

    def get_activations(self) -> Iterable[Activation]:
        return list(self.activations)

    @property
    def is_activated(self) -> bool:
        return any(a.completed for a in self.activations)

    @classmethod
    def from_dict(cls, d: Dict[str, Any], activations: Optional[List[Activation]] = None) -> "User":
        if d is None:
            raise ValueError("Cannot construct User from None")
        try:
            balance = float(d.get("balance") or 0.0)
        except (TypeError, ValueError):
            balance = 0.0
        return cls(
            id=str(d.get("id") or ""),
            username=str(d.get("username") or ""),
            email=str(d.get("email") or ""),
            password_hash=str(d.get("password_hash") or d.get("hashed_password") or ""),
            balance=balance,
            is_admin=_parse_bool(d.get("is_admin", False)),
            created_at=_parse_datetime(d.get("created_at")),
            activations=list(activations or []),
        )

    def to_dict(self) -> Dict[str, Any]:
        """
        Row for the users table. password_hash is included (needed for persistence);
        strip it in API responses. Activations live in their own table.
        """
        return {
            "id": self.id,
            "username": self.username,
            "email": self.email,
            "password_hash": self.password_hash,
            "balance": float(self.balance),
            "is_admin": bool(self.is_admin),
            "created_at": self.created_at.isoformat(sep=" ") if self.created_at else "",
        }
