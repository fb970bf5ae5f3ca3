from typing import Optional

from fastapi import APIRouter, Depends, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.orm import Session

from .. import schemas
from ..models.db.database import get_db
from ..services.auth_service import AuthService


router = APIRouter()

# auto_error is off so a missing header is reported as 401 by AuthService
oauth2_scheme = HTTPBearer(scheme_name="Bearer", auto_error=False)


def get_auth_service(db: Session = Depends(get_db)) -> AuthService:
    return AuthService(db)


@router.post("/register", response_model=schemas.AuthResponse, status_code=status.HTTP_201_CREATED)
def register(user: schemas.UserCreate, auth_service: AuthService = Depends(get_auth_service)):
    """
    Create an account and return a bearer token for it.
    """
    new_user, token = auth_service.register(user.name, user.email, user.password)
    return {"token": token, "token_type": "bearer", "user": new_user}


@router.post("/login", response_model=schemas.AuthResponse)
def login(credentials: schemas.LoginRequest, auth_service: AuthService = Depends(get_auth_service)):
    user, token = auth_service.login(credentials.email, credentials.password)
    return {"token": token, "token_type": "bearer", "user": user}


def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(oauth2_scheme),
    auth_service: AuthService = Depends(get_auth_service),
):
    token = credentials.credentials if credentials else None
    return auth_service.resolve_token(token)


@router.get("/me", response_model=schemas.User)
def read_current_user(current_user: schemas.User = Depends(get_current_user)):
    return current_user
