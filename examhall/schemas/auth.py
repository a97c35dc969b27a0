# examhall/schemas/auth.py
from typing import Literal

from pydantic import BaseModel, EmailStr, ConfigDict


class Token(BaseModel):
    access_token: str
    token_type: str = "bearer"


class LoginRequest(BaseModel):
    email: EmailStr
    password: str


class RegisterRequest(BaseModel):
    email: EmailStr
    password: str
    username: str  # required, may repeat
    role: Literal["teacher", "student"]


class UserPublic(BaseModel):

    id: int
    email: EmailStr
    username: str
    role: str

    model_config = ConfigDict(from_attributes=True)
