# examhall/api/v1/endpoints/users.py
from fastapi import APIRouter, Depends

from examhall.schemas.user import UserPublic
from examhall.models.user import User
from examhall.core.security import get_current_user

router = APIRouter(prefix="/users", tags=["users"])


@router.get("/me", response_model=UserPublic)
def read_me(current_user: User = Depends(get_current_user)):
    return current_user
