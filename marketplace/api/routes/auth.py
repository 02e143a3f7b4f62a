import logging

from fastapi import APIRouter, Depends
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from marketplace.api.deps import get_db
from marketplace.core.auth import CurrentUser, create_access_token, get_current_user
from marketplace.core.errors import ConflictError, UnauthorizedError
from marketplace.core.security import hash_password, verify_password
from marketplace.models.user import User
from marketplace.schemas.user import LoginRequest, MeOut, RegisteredOut, TokenOut, UserRegister

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/register", response_model=RegisteredOut)
def register(payload: UserRegister, db: Session = Depends(get_db)):
    if db.query(User.id).filter(User.email == payload.email).first():
        raise ConflictError("User with this email already exists")

    user = User(
        name=payload.name.strip(),
        email=payload.email,
        password_hash=hash_password(payload.password),
        phone_number=payload.phone_number.strip(),
        role=payload.role,
    )
    db.add(user)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise ConflictError("Email already exists")
    db.refresh(user)

    logger.info("Registered %s user %s", user.role, user.id)
    return {"message": "User registered successfully", "user": user}


@router.post("/login", response_model=TokenOut)
def login(payload: LoginRequest, db: Session = Depends(get_db)):
    user = db.query(User).filter(User.email == payload.email).first()
    if not user or not verify_password(payload.password, user.password_hash):
        raise UnauthorizedError("Invalid email or password")

    return {"access_token": create_access_token(user), "token_type": "bearer", "user": user}


@router.get("/me", response_model=MeOut)
def me(current_user: CurrentUser = Depends(get_current_user)):
    return {"id": current_user.id, "email": current_user.email, "role": current_user.role}
