import structlog
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from mileage.api.deps import get_db
from mileage.core.security import create_access_token, hash_password, verify_password
from mileage.models.profile import Profile
from mileage.models.user import User
from mileage.schemas.user import AuthResponse, LoginRequest, SignupRequest, UserPublic

logger = structlog.get_logger()

router = APIRouter(tags=["auth"])


@router.post("/signup", response_model=AuthResponse, status_code=201)
def signup(payload: SignupRequest, db: Session = Depends(get_db)):
    data = payload.user

    errors = []
    if db.execute(select(User).where(User.username == data.username)).scalar_one_or_none():
        errors.append("Username has already been taken")
    if db.execute(select(User).where(User.email == data.email)).scalar_one_or_none():
        errors.append("Email has already been taken")
    if errors:
        raise HTTPException(status_code=422, detail=errors)

    user = User(
        first_name=data.first_name,
        last_name=data.last_name,
        username=data.username,
        email=data.email,
        hashed_password=hash_password(data.password),
    )
    try:
        db.add(user)
        db.flush()

        # every user starts with an empty profile
        db.add(Profile(user_id=user.id, bio=""))
        db.commit()
    except IntegrityError:
        # lost a race against a concurrent signup with the same username or email
        db.rollback()
        raise HTTPException(status_code=422, detail=["Username or email has already been taken"])
    db.refresh(user)

    logger.info("user_signed_up", user_id=user.id, username=user.username)
    token = create_access_token(str(user.id))
    return AuthResponse(token=token, user=UserPublic.model_validate(user))


@router.post("/login", response_model=AuthResponse)
def login(payload: LoginRequest, db: Session = Depends(get_db)):
    user = db.execute(select(User).where(User.username == payload.username)).scalar_one_or_none()
    # same answer for unknown user and wrong password
    if not user or not verify_password(payload.password, user.hashed_password):
        logger.info("login_failed", username=payload.username)
        raise HTTPException(status_code=401, detail="Invalid username or password")

    token = create_access_token(str(user.id))
    return AuthResponse(token=token, user=UserPublic.model_validate(user))
