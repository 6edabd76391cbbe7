from pydantic import BaseModel, ConfigDict
from datetime import datetime
from uuid import UUID

# ----------- User Schemas -----------

class UserPublic(BaseModel):
    id: UUID
    email: str
    display_name: str
    avatar_url: str | None
    total_steps: int
    total_miles: float
    current_milestone_id: UUID | None
    created_at: datetime
    model_config = ConfigDict(from_attributes=True)


class ProfileResponse(BaseModel):
    user: UserPublic


# ----------- Auth Schemas -----------

class RegisterRequest(BaseModel):
    email: str
    password: str
    display_name: str


class LoginRequest(BaseModel):
    email: str
    password: str


class AuthResponse(BaseModel):
    user: UserPublic
    token: str
