from fastapi import APIRouter, Depends, HTTPException, status
import logging

from app.models.user import User
from app.schemas.user import LoginRequest, TokenResponse, UserRegister, UserResponse
from app.services import users
from app.store import Store, get_store
from app.utils.auth import create_access_token, get_current_user

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/auth",
    tags=["auth"],
)


@router.post("/register", response_model=TokenResponse, status_code=status.HTTP_201_CREATED)
def register(body: UserRegister, store: Store = Depends(get_store)):
    """
    Register a new user account and return an access token.
    """
    user = users.register_user(
        store,
        name=body.name,
        email=body.email,
        password=body.password,
        phone=body.phone,
        address=body.address,
    )
    token = create_access_token({"sub": str(user.id)})
    return {"access_token": token, "user": user}


@router.post("/login", response_model=TokenResponse)
def login(body: LoginRequest, store: Store = Depends(get_store)):
    """
    Exchange email and password for a bearer token.
    """
    user = users.authenticate(store, body.email, body.password)
    if not user:
        logger.warning(f"Failed login for {body.email}")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid credentials",
            headers={"WWW-Authenticate": "Bearer"},
        )
    token = create_access_token({"sub": str(user.id)})
    return {"access_token": token, "user": user}


@router.get("/me", response_model=UserResponse)
def me(current_user: User = Depends(get_current_user)):
    """
    Return the authenticated user's profile.
    """
    return current_user
