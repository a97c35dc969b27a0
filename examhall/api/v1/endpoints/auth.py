# examhall/api/v1/endpoints/auth.py
import logging
from datetime import timedelta

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.security import OAuth2PasswordRequestForm
from sqlalchemy.orm import Session

from examhall.core.config import settings
from examhall.core.security import (
    authenticate_user,
    create_access_token,
    get_password_hash,
)
from examhall.db.session import get_db
from examhall.models.user import User
from examhall.schemas.auth import (
    Token,
    LoginRequest,
    RegisterRequest,
    UserPublic,
)

logger = logging.getLogger(__name__)

router = APIRouter()


def _issue_token(db: Session, email: str, password: str) -> Token:
    user = authenticate_user(db, email, password)
    if not user:
        logger.info(f"Rejected login for {email}")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Incorrect email or password",
            headers={"WWW-Authenticate": "Bearer"},
        )

    access_token = create_access_token(
        data={"sub": user.email, "role": user.role},
        expires_delta=timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES),
    )
    return Token(access_token=access_token)


@router.post("/register", response_model=UserPublic, status_code=status.HTTP_201_CREATED)
def register_user(payload: RegisterRequest, db: Session = Depends(get_db)):
    """
    Self-registration for teachers and students; admins are provisioned separately.
    """
    existing = db.query(User).filter(User.email == payload.email).first()
    if existing:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Email already registered",
        )

    user = User(
        email=payload.email,
        password_hash=get_password_hash(payload.password),
        username=payload.username,
        role=payload.role,
    )
    db.add(user)
    db.commit()
    db.refresh(user)

    logger.info(f"Registered {user.role} {user.id}")
    return user


# JSON body login, used by the frontend
@router.post("/login", response_model=Token)
def login_for_access_token(
    payload: LoginRequest,
    db: Session = Depends(get_db),
):
    return _issue_token(db, payload.email, payload.password)


# OAuth2 form login, used by the swagger "Authorize" button;
# the username field carries the email address
@router.post("/token", response_model=Token)
def login_for_access_token_form(
    form_data: OAuth2PasswordRequestForm = Depends(),
    db: Session = Depends(get_db),
):
    return _issue_token(db, form_data.username, form_data.password)
