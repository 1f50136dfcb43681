# shop/api/schemas/user.py
from pydantic import BaseModel, EmailStr

from shop.models.user import User


class UserOut(BaseModel):
    id: str
    username: str
    email: EmailStr
    balance: float = 0.0
    is_admin: bool = False
    activated: bool = False

    @classmethod
    def from_user(cls, user: User) -> "UserOut":
        return cls(
            id=user.id,
            username=user.username,
            email=user.email,
            balance=user.balance,
            is_admin=user.is_admin,
            activated=user.is_activated,
        )


class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
