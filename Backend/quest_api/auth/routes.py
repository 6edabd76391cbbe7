from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from quest_api.auth import accounts
from quest_api.db.models.user import User
from quest_api.db.schemas.users import AuthResponse, LoginRequest, ProfileResponse, RegisterRequest, UserPublic
from quest_api.dependencies import get_current_user, get_db

router = APIRouter(prefix="/api/auth", tags=["Auth"])


@router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
def register(payload: RegisterRequest, db: Session = Depends(get_db)):
    user, token = accounts.register(
        db,
        email=payload.email,
        password=payload.password,
        display_name=payload.display_name,
    )
    return AuthResponse(user=UserPublic.model_validate(user), token=token)


@router.post("/login", response_model=AuthResponse)
def login(payload: LoginRequest, db: Session = Depends(get_db)):
    user, token = accounts.login(db, email=payload.email, password=payload.password)
    return AuthResponse(user=UserPublic.model_validate(user), token=token)


@router.get("/profile", response_model=ProfileResponse)
def profile(user: User = Depends(get_current_user)):
    return ProfileResponse(user=UserPublic.model_validate(user))
