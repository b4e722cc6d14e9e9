from jose import jwt, JWTError
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional
from uuid import uuid4
from passlib.context import CryptContext
from fastapi import Depends, Query
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.orm import Session
from booking_app.config import settings
from booking_app.database import get_db
from booking_app.errors import AuthError, Reason
from booking_app.models.user_model import User
from booking_app.logger import get_logger

logger = get_logger(__name__)

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/login", auto_error=False)


def verify_password(plain_password, hashed_password):
    return pwd_context.verify(plain_password, hashed_password)


def get_password_hash(password):
    return pwd_context.hash(password)


def create_access_token(data: dict, expires_delta: Optional[timedelta] = None):
    to_encode = data.copy()
    if expires_delta:
        expire = datetime.now(timezone.utc) + expires_delta
    else:
        expire = datetime.now(timezone.utc) + timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)

    to_encode.update({
        "exp": expire,
        "jti": str(uuid4()),
        "iat": datetime.now(timezone.utc),
        "type": "access",
    })
    encoded_jwt = jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.ALGORITHM)
    return encoded_jwt, expire


def decode_access_token(token: str) -> str:
    """Return the user id carried by a valid access token"""
    try:
        payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
    except JWTError:
        raise AuthError(Reason.unauthenticated, "Invalid or expired token")

    user_id = payload.get("sub")
    if user_id is None or payload.get("type") != "access":
        raise AuthError(Reason.unauthenticated, "Could not validate credentials")
    return str(user_id)


@dataclass(frozen=True)
class AuthContext:
    """Who is calling, and how we know it"""
    user_id: Optional[str]
    source: str = "anonymous"  # token | client | anonymous

    @property
    def authenticated(self) -> bool:
        return self.user_id is not None


def get_token_subject(token: Optional[str] = Depends(oauth2_scheme)) -> Optional[str]:
    if not token:
        return None
    return decode_access_token(token)


def resolve_identity(token_subject: Optional[str], client_id: Optional[str]) -> AuthContext:
    """A signed token always wins; plain ids are only honoured when trusted"""
    if token_subject:
        return AuthContext(user_id=token_subject, source="token")
    if client_id and settings.TRUST_CLIENT_IDS:
        return AuthContext(user_id=str(client_id), source="client")
    return AuthContext(user_id=None)


def get_user_context(
    token_subject: Optional[str] = Depends(get_token_subject),
    user_id: Optional[str] = Query(None, alias="userId"),
) -> AuthContext:
    return resolve_identity(token_subject, user_id)


def authorize_admin(db: Session, admin_id: Optional[str]) -> User:
    if not admin_id:
        raise AuthError(Reason.unauthenticated, "Missing adminId")

    admin = db.query(User).filter(User.id == str(admin_id)).first()
    if admin is None:
        raise AuthError(Reason.unauthenticated, "Admin not found")

    if admin.role != "admin":
        logger.warning(f"User {admin.email} denied admin access")
        raise AuthError(Reason.admin_only)
    return admin


def get_current_admin_user(
    token_subject: Optional[str] = Depends(get_token_subject),
    admin_id: Optional[str] = Query(None, alias="adminId"),
    db: Session = Depends(get_db),
) -> User:
    """Admin gate, checked before every admin route"""
    context = resolve_identity(token_subject, admin_id)
    return authorize_admin(db, context.user_id)
