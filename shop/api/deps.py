# shop/api/deps.py
from typing import Optional

from fastapi import Depends, HTTPException, status, Request
from fastapi.security import OAuth2PasswordBearer

from shop.config import settings
from shop.core.security import decode_access_token
from shop.database import db, FileBackedDB
from shop.models.user import User
from shop.repositories.enchantments import FileEnchantmentRepository
from shop.repositories.items import FileItemRepository
from shop.repositories.users import FileUserRepository
from shop.services.hashing import FileHasher
from shop.services.image_resolver import ImageResolver
from shop.services.images import ImageStorage
from shop.services.item_creation import AddItemHandler

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/auth/token", auto_error=False)


def get_db() -> FileBackedDB:
    """
    Dependency that returns the file-backed DB object.
    Usage:
        db = Depends(get_db)
    """
    return db


def get_image_storage() -> ImageStorage:
    # read settings per request so image_dir can be changed at runtime (tests)
    return ImageStorage(settings.image_dir)


def get_hasher() -> FileHasher:
    return FileHasher(settings.IMAGE_HASH_ALGORITHM)


def get_item_repository(db: FileBackedDB = Depends(get_db)) -> FileItemRepository:
    return FileItemRepository(db)


def get_enchantment_repository(db: FileBackedDB = Depends(get_db)) -> FileEnchantmentRepository:
    return FileEnchantmentRepository(db)


def get_user_repository(db: FileBackedDB = Depends(get_db)) -> FileUserRepository:
    return FileUserRepository(db)


def get_add_item_handler(
    items: FileItemRepository = Depends(get_item_repository),
    enchantments: FileEnchantmentRepository = Depends(get_enchantment_repository),
    hasher: FileHasher = Depends(get_hasher),
    storage: ImageStorage = Depends(get_image_storage),
) -> AddItemHandler:
    return AddItemHandler(items, enchantments, ImageResolver(hasher, storage))


def get_current_user(
    request: Request,
    token: Optional[str] = Depends(oauth2_scheme),
    users: FileUserRepository = Depends(get_user_repository),
) -> User:
    """
    Resolve the current user from the Authorization header (Bearer) or the
    'access_token' cookie. Raises 401 if not authenticated.
    """
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Not authenticated",
        headers={"WWW-Authenticate": "Bearer"},
    )

    user_id = decode_access_token(token) if token else None
    if user_id is None:
        cookie_token = request.cookies.get("access_token")
        if cookie_token:
            user_id = decode_access_token(cookie_token)

    if not user_id:
        raise credentials_exception

    user = users.find(user_id)
    if user is None:
        raise credentials_exception
    return user


def require_admin(current_user: User = Depends(get_current_user)) -> User:
    """
    Dependency to require admin privileges. Raises 403 if user is not admin.
    """
    if not current_user.is_admin:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Admin privileges required")
    return current_user
