# interfaces/auth.py
from fastapi import APIRouter, Cookie, Depends, Header, HTTPException, Request, Response
from jose import JWTError
import logging

import config
from application.use_cases import InvalidCredentialsError, UserUseCases
from infrastructure.database import UsernameTakenError
from infrastructure.security import create_access_token, decode_access_token
from schemas.user import Credentials, UserResponse

logger = logging.getLogger(__name__)

router = APIRouter()

def get_user_use_cases(request: Request) -> UserUseCases:
    return request.app.state.user_use_cases

async def get_current_user(
    token: str | None = Cookie(default=None, alias=config.TOKEN_COOKIE_NAME),
    authorization: str | None = Header(default=None)
) -> str:
    """Validates the access token from the cookie or Authorization header."""
    access_token = None
    if authorization and authorization.startswith("Bearer "):
        access_token = authorization.split("Bearer ")[1]
        logger.debug("Token extracted from Authorization header")
    elif token:
        access_token = token
        logger.debug("Token extracted from cookie")

    if not access_token:
        raise HTTPException(status_code=401, detail="Not authenticated")

    try:
        return decode_access_token(access_token)
    except JWTError as e:
        logger.warning(f"JWT validation failed: {e}")
        raise HTTPException(status_code=401, detail="Invalid token")

@router.post("/signup", response_model=UserResponse)
def signup(creds: Credentials, users: UserUseCases = Depends(get_user_use_cases)):
    """Registers a new user."""
    try:
        user = users.signup(creds.username, creds.password)
    except UsernameTakenError:
        raise HTTPException(status_code=409, detail="Username already taken")
    return UserResponse(id=user.id, username=user.username)

@router.post("/login")
def login(creds: Credentials, response: Response, users: UserUseCases = Depends(get_user_use_cases)):
    """Checks credentials and sets the session cookie."""
    try:
        user = users.authenticate(creds.username, creds.password)
    except InvalidCredentialsError:
        raise HTTPException(status_code=401, detail="Invalid username or password")

    access_token, expires_at = create_access_token(user.username)
    response.set_cookie(
        key=config.TOKEN_COOKIE_NAME,
        value=access_token,
        expires=expires_at,
        max_age=config.TOKEN_TTL_MINUTES * 60,
        httponly=True,
        samesite="lax"
    )
    logger.info(f"User {user.username!r} logged in")
    return {"message": "Login successful"}

@router.post("/logout")
async def logout(response: Response):
    """Logs out the user by clearing the cookie."""
    response.delete_cookie(config.TOKEN_COOKIE_NAME)
    return {"message": "Logout successful"}
