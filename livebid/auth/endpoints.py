from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession
from pydantic import BaseModel
from livebid.core.db import get_db
from livebid.models import User
from livebid.auth.identity import register as register_user, authenticate
from livebid.auth.utils import create_access_token

router = APIRouter(prefix='/api', tags=['auth'])

class UserCreate(BaseModel):
    username: str
    email: str
    password: str

class LoginIn(BaseModel):
    email: str
    password: str

class UserOut(BaseModel):
    id: int
    username: str
    email: str

class TokenResponse(BaseModel):
    token: str
    user: UserOut


def token_response(user: User) -> dict:
    return {
        "token": create_access_token(user.id, user.username),
        "user": {"id": user.id, "username": user.username, "email": user.email},
    }

@router.post("/register", response_model=TokenResponse)
async def register(body: UserCreate, db: AsyncSession = Depends(get_db)):
    user = await register_user(db, body.username, body.email, body.password)
    await db.commit()
    return token_response(user)

@router.post('/login', response_model=TokenResponse)
async def login(body: LoginIn, db: AsyncSession = Depends(get_db)):
    user = await authenticate(db, body.email, body.password)
    return token_response(user)
