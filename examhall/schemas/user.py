# examhall/schemas/user.py
from pydantic import BaseModel, EmailStr
from datetime import datetime


class UserPublic(BaseModel):
    id: int
    email: EmailStr
    username: str
    role: str  # "teacher" / "student" / "admin"
    created_at: datetime | None = None

    model_config = {"from_attributes": True}
