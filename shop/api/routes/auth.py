# shop/api/routes/auth.py
from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.security import OAuth2PasswordRequestForm

from shop.api.deps import get_current_user, get_user_repository
from shop.api.schemas.user import TokenResponse, UserOut
from shop.core.security import create_access_token, verify_password
from shop.models.user import User
from shop.repositories.users import FileUserRepository

router = APIRouter(prefix="/api/auth", tags=["auth"])


@router.post("/token", response_model=TokenResponse)
def token(form_data: OAuth2PasswordRequestForm = Depends(), users: FileUserRepository = Depends(get_user_repository)):
    """
    Token endpoint used by OAuth2PasswordRequestForm clients. Accepts username or email.
    Accounts without a completed activation are refused.
    """
    invalid = HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid credentials")
    user = users.find_by_login(form_data.username)
    if user is None or not user.password_hash:
        raise invalid
    if not verify_password(form_data.password, user.password_hash):
        raise invalid
    if not user.is_activated:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Account is not activated")
    return {"access_token": create_access_token(subject=user.id), "token_type": "bearer"}


@router.get("/me", response_model=UserOut)
def me(current_user: User = Depends(get_current_user)):
    return UserOut.from_user(current_user)
