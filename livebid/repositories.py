"""Storage access for users, auctions and bids.

Business code goes through these classes instead of issuing queries itself, so
the backing database only matters to ``livebid.core.db``.
"""

from sqlalchemy import select, func, or_
from sqlalchemy.ext.asyncio import AsyncSession
from livebid.models import User, Auction, Bid


class UserRepository:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def get(self, user_id: int) -> User | None:
        return await self.db.get(User, user_id)

    async def find_by_email(self, email: str) -> User | None:
        res = await self.db.execute(select(User).where(User.email == email))
        return res.scalars().first()

    async def find_by_email_or_username(self, email: str, username: str) -> User | None:
        res = await self.db.execute(select(User).where(or_(User.email == email, User.username == username)))
        return res.scalars().first()

    async def add(self, user: User) -> User:
        self.db.add(user)
        await self.db.flush()
        return user


class AuctionRepository:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def get(self, auction_id: int) -> Auction | None:
        return await self.db.get(Auction, auction_id)

    async def get_for_update(self, auction_id: int) -> Auction | None:
        stmt = select(Auction).where(Auction.id == auction_id).with_for_update()
        res = await self.db.execute(stmt)
        return res.scalars().first()

    async def list_all(self) -> list[Auction]:
        res = await self.db.execute(select(Auction).order_by(Auction.id))
        return list(res.scalars().all())

    async def add(self, auction: Auction) -> Auction:
        self.db.add(auction)
        await self.db.flush()
        return auction


class BidRepository:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def list_for_auction(self, auction_id: int) -> list[Bid]:
        """Bids for one auction, newest first."""
        stmt = select(Bid).where(Bid.auction_id == auction_id).order_by(Bid.created_at.desc(), Bid.id.desc())
        res = await self.db.execute(stmt)
        return list(res.scalars().all())

    async def stats(self, auction_id: int) -> tuple[float | None, int]:
        """Returns (highest amount or None, bid count) for one auction."""
        stmt = select(func.max(Bid.amount), func.count(Bid.id)).where(Bid.auction_id == auction_id)
        res = await self.db.execute(stmt)
        highest, count = res.one()
        return highest, count

    async def stats_by_auction(self) -> dict[int, tuple[float, int]]:
        stmt = select(Bid.auction_id, func.max(Bid.amount), func.count(Bid.id)).group_by(Bid.auction_id)
        res = await self.db.execute(stmt)
        return {auction_id: (highest, count) for auction_id, highest, count in res.all()}

    async def add(self, bid: Bid) -> Bid:
        self.db.add(bid)
        await self.db.flush()
        return bid
