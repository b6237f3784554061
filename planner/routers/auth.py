from dataclasses import dataclass
from datetime import timedelta
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Request, Response, status
from jose import JWTError, jwt

from .. import crud
from ..config import ACCESS_TOKEN_EXPIRE_MINUTES, SECRET_KEY, SESSION_COOKIE_NAME
from ..database import Store, get_store
from ..models import User, utcnow
from ..schemas.user import LogoutResponse, User as UserSchema

router = APIRouter()

ALGORITHM = "HS256"


@dataclass
class SessionClaims:
    open_id: str
    name: Optional[str] = None
    email: Optional[str] = None
    login_method: Optional[str] = None


def create_session_token(
    open_id: str,
    name: Optional[str] = None,
    email: Optional[str] = None,
    login_method: Optional[str] = None,
    expires_delta: Optional[timedelta] = None,
) -> str:
    """Create a signed session token for an external identity."""
    to_encode = {"sub": open_id}
    if name is not None:
        to_encode["name"] = name
    if email is not None:
        to_encode["email"] = email
    if login_method is not None:
        to_encode["loginMethod"] = login_method
    expire = utcnow() + (
        expires_delta or timedelta(minutes=ACCESS_TOKEN_EXPIRE_MINUTES)
    )
    to_encode["exp"] = expire
    return jwt.encode(to_encode, SECRET_KEY, algorithm=ALGORITHM)


def _get_token_from_request(request: Request) -> Optional[str]:
    auth_header = request.headers.get("Authorization", "")
    if auth_header.lower().startswith("bearer "):
        return auth_header.split(" ", 1)[1].strip()
    return request.cookies.get(SESSION_COOKIE_NAME)


def _decode_token(token: str) -> Optional[SessionClaims]:
    try:
        payload = jwt.decode(token, SECRET_KEY, algorithms=[ALGORITHM])
    except JWTError:
        return None
    open_id = payload.get("sub")
    if not open_id:
        return None
    return SessionClaims(
        open_id=open_id,
        name=payload.get("name"),
        email=payload.get("email"),
        login_method=payload.get("loginMethod"),
    )


def require_session_claims(request: Request) -> SessionClaims:
    """Claims of a valid session token on the request, or a 401 HTTPException."""
    token = _get_token_from_request(request)
    if not token:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )

    claims = _decode_token(token)
    if claims is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Could not validate credentials",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return claims


def _authenticate(request: Request, store: Store) -> User:
    claims = require_session_claims(request)

    # Sync the identity on every request; first contact creates the row.
    profile = {
        field: getattr(claims, field)
        for field in ("name", "email", "login_method")
        if getattr(claims, field) is not None
    }
    result = crud.upsert_user(store, claims.open_id, last_signed_in=utcnow(), **profile)
    if not result.is_ok or result.value is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="User not found",
        )
    return result.value


async def get_current_user(
    request: Request,
    store: Store = Depends(get_store),
) -> User:
    """Resolve the caller from the session token or reject with 401."""
    return _authenticate(request, store)


async def get_optional_user(
    request: Request,
    store: Store = Depends(get_store),
) -> Optional[User]:
    try:
        return _authenticate(request, store)
    except HTTPException:
        return None


@router.get("/me", response_model=Optional[UserSchema])
def read_users_me(current_user: Optional[User] = Depends(get_optional_user)):
    """Current user, or null when signed out."""
    return current_user


@router.post("/logout", response_model=LogoutResponse)
def logout(response: Response):
    """Clear the session cookie."""
    response.delete_cookie(key=SESSION_COOKIE_NAME)
    return {"success": True}
