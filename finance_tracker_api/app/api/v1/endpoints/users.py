"""
User endpoints for API v1.

Registration and login are the only unauthenticated routes of the API.
Login returns a bearer token that every other endpoint expects in the
``Authorization`` header.
"""

from fastapi import APIRouter, Depends, HTTPException, status

from finance_tracker_api.app.core.exceptions import NotFoundError
from finance_tracker_api.app.core.security import create_access_token, get_current_user
from finance_tracker_api.app.schemas.common import DataResponse
from finance_tracker_api.app.schemas.user import Token, UserCreate, UserLogin, UserRead
from finance_tracker_api.app.services.user_service import UserService


router = APIRouter()


@router.post("/", response_model=DataResponse[UserRead], status_code=status.HTTP_201_CREATED)
async def register_user(user: UserCreate) -> DataResponse[UserRead]:
    """Register a new user.  A duplicate email yields 400."""
    try:
        created = await UserService.create_user(user)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e)) from e
    return DataResponse(data=created)


@router.post("/login", response_model=Token)
async def login_user(credentials: UserLogin) -> Token:
    """Check email and password and return an access token."""
    db_user = await UserService.authenticate(credentials.email, credentials.password)
    if not db_user:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid credentials",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return Token(access_token=create_access_token({"sub": db_user.email}))


@router.get("/me", response_model=DataResponse[UserRead])
async def read_current_user(current_user: dict = Depends(get_current_user)) -> DataResponse[UserRead]:
    try:
        user = await UserService.get_user(current_user["user_id"])
    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e)) from e
    return DataResponse(data=user)
