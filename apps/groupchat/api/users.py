from __future__ import annotations

from fastapi import APIRouter, Depends, status
from sqlmodel import Session

from groupchat.api.dependencies import get_db_session
from groupchat.schemas.user import AuthResponse, Credentials, UserOut
from groupchat.services.user_service import UserService

router = APIRouter(prefix="/api", tags=["users"])


@router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
def register(payload: Credentials, session: Session = Depends(get_db_session)) -> AuthResponse:
    user = UserService(session).register(username=payload.username, password=payload.password)
    return AuthResponse(message="User registered successfully", user=UserOut.model_validate(user))


@router.post("/login", response_model=AuthResponse)
def login(payload: Credentials, session: Session = Depends(get_db_session)) -> AuthResponse:
    user = UserService(session).authenticate(username=payload.username, password=payload.password)
    return AuthResponse(message="Login successful", user=UserOut.model_validate(user))
