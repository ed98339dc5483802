import jwt
import bcrypt
from datetime import datetime, timedelta
from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.orm import Session

from league_api.core.config import settings
from league_api.core.errors import AuthenticationError, InvalidInputError
from league_api.data.database import get_db
from league_api.data.models import Admin

bearer_scheme = HTTPBearer(auto_error=False)

# bcrypt only looks at the first 72 bytes and newer releases refuse longer input
MAX_PASSWORD_BYTES = 72

def password_too_long(password: str) -> bool:
    return len(password.encode()) > MAX_PASSWORD_BYTES

def hash_password(password: str) -> str:
    if password_too_long(password):
        raise InvalidInputError(f"password must be at most {MAX_PASSWORD_BYTES} bytes")
    return bcrypt.hashpw(password.encode(), bcrypt.gensalt()).decode()

def verify_password(password: str, hashed: str) -> bool:
    if password_too_long(password):
        return False
    return bcrypt.checkpw(password.encode(), hashed.encode())

def create_access_token(admin: Admin) -> str:
    payload = {
        "sub": str(admin.id),
        "email": admin.email,
        "exp": datetime.utcnow() + timedelta(hours=settings.ACCESS_TOKEN_EXPIRE_HOURS)
    }
    return jwt.encode(payload, settings.JWT_SECRET, algorithm=settings.JWT_ALGORITHM)

def decode_access_token(token: str) -> dict:
    try:
        return jwt.decode(token, settings.JWT_SECRET, algorithms=[settings.JWT_ALGORITHM])
    except jwt.ExpiredSignatureError:
        raise AuthenticationError("token expired")
    except jwt.InvalidTokenError:
        raise AuthenticationError("invalid token")

def get_current_admin(
    credentials: HTTPAuthorizationCredentials = Depends(bearer_scheme),
    db: Session = Depends(get_db)
) -> Admin:
    if credentials is None:
        raise AuthenticationError("authorization header required")

    payload = decode_access_token(credentials.credentials)

    try:
        admin_id = int(payload.get("sub"))
    except (TypeError, ValueError):
        raise AuthenticationError("invalid token")

    admin = db.get(Admin, admin_id)
    if not admin:
        raise AuthenticationError("admin not found")

    return admin
