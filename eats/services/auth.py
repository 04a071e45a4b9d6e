from datetime import datetime, timedelta, timezone
from typing import Optional
from jose import JWTError, jwt
from passlib.context import CryptContext
from sqlalchemy.orm import Session
from fastapi import Depends, Header, HTTPException, status
from fastapi.security import OAuth2PasswordBearer

from eats.core.config import settings
from eats.core.permissions import role_allowed
from eats.db.session import get_db
from eats.models.user import User

# Use a scheme without the 72-byte password limit as the preferred hashing algorithm.
# Keep bcrypt in the list so existing bcrypt hashes can still be verified.
pwd_context = CryptContext(schemes=["pbkdf2_sha256", "bcrypt"], deprecated="auto")
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/auth/login", auto_error=False)


def verify_password(plain_password, hashed_password):
    if not plain_password or not hashed_password:
        return False
    return pwd_context.verify(plain_password, hashed_password)


def get_password_hash(password):
    try:
        return pwd_context.hash(password)
    except ValueError as exc:
        # bcrypt backend raises ValueError if password > 72 bytes
        raise ValueError("password too long to hash; choose a shorter password") from exc


def create_access_token(user_id: int, expires_delta: Optional[timedelta] = None):
    expire = datetime.now(timezone.utc) + (expires_delta or timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES))
    to_encode = {"id": user_id, "exp": expire}
    return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def decode_access_token(token: str) -> Optional[int]:
    """Return the user id carried by ``token`` or None when it is invalid."""
    try:
        payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
    except JWTError:
        return None
    user_id = payload.get("id")
    if not isinstance(user_id, int):
        return None
    return user_id


def get_current_user(
    token: Optional[str] = Depends(oauth2_scheme),
    x_jwt: Optional[str] = Header(default=None),
    db: Session = Depends(get_db),
):
    """Resolve the acting user from a bearer token or the ``x-jwt`` header."""
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )
    raw = token or x_jwt
    if not raw:
        raise credentials_exception
    user_id = decode_access_token(raw)
    if user_id is None:
        raise credentials_exception
    user = db.query(User).filter(User.id == user_id).first()
    if user is None:
        raise credentials_exception
    return user


def require_roles(*roles: str):
    """Return a dependency that ensures the current user has one of the provided roles.

    Usage in a route:
        @router.post('/orders')
        def create_order(current_user=Depends(require_roles('Client'))):
            ...

    ``require_roles('Any')`` only requires an authenticated user.
    """
    def role_checker(current_user=Depends(get_current_user)):
        if not role_allowed(getattr(current_user, 'role', None), roles):
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="Insufficient privileges",
            )
        return current_user

    return role_checker
