from fastapi import Depends
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.ext.asyncio import AsyncSession
from livebid.core.db import get_db
from livebid.core.errors import InvalidToken
from livebid.repositories import UserRepository
from livebid.auth.utils import verify_token

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/login")

async def get_current_user(token: str = Depends(oauth2_scheme), db: AsyncSession = Depends(get_db)):
    payload = verify_token(token)
    try:
        user_id = int(payload["sub"])
    except (TypeError, ValueError):
        raise InvalidToken()
    user = await UserRepository(db).get(user_id)
    if not user:
        raise InvalidToken("User not found")
    return user
