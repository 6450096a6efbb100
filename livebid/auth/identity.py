import structlog
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from livebid.models import User
from livebid.repositories import UserRepository
from livebid.core.errors import DuplicateIdentity, InvalidCredentials
from livebid.core.timeutil import utcnow, to_naive_utc
from livebid.auth.utils import hash_password, verify_password

logger = structlog.get_logger()

async def register(db: AsyncSession, username: str, email: str, password: str) -> User:
    users = UserRepository(db)
    if await users.find_by_email_or_username(email, username):
        raise DuplicateIdentity()
    user = User(username=username, email=email, pw_hash=hash_password(password), created_at=to_naive_utc(utcnow()))
    try:
        await users.add(user)
    except IntegrityError:
        # Lost a race against a concurrent registration
        await db.rollback()
        raise DuplicateIdentity()
    logger.info("User registered", user_id=user.id, username=username)
    return user

async def authenticate(db: AsyncSession, email: str, password: str) -> User:
    """Unknown email and wrong password fail identically."""
    user = await UserRepository(db).find_by_email(email)
    if not user or not verify_password(password, user.pw_hash):
        logger.info("Login failed", email=email)
        raise InvalidCredentials()
    return user
