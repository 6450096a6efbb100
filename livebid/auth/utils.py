from jose import jwt, JWTError
from passlib.context import CryptContext
from datetime import timedelta
from livebid.core.config import settings
from livebid.core.errors import InvalidToken
from livebid.core.timeutil import utcnow

pwd_context = CryptContext(schemes=["argon2"], deprecated="auto")

def create_access_token(user_id: int, username: str) -> str:
    to_encode = {"sub": str(user_id), "username": username}
    if settings.access_token_expire_minutes is not None:
        to_encode["exp"] = utcnow() + timedelta(minutes=settings.access_token_expire_minutes)
    return jwt.encode(to_encode, settings.secret_key, algorithm=settings.algorithm)

def verify_token(token: str) -> dict:
    try:
        payload = jwt.decode(token, settings.secret_key, algorithms=[settings.algorithm])
    except JWTError:
        raise InvalidToken()
    if "sub" not in payload:
        raise InvalidToken()
    return payload

def hash_password(password: str) -> str:
    return pwd_context.hash(password)

def verify_password(plain: str, hashed: str) -> bool:
    return pwd_context.verify(plain, hashed)
