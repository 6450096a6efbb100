"""Interleaved bids through place_bid on separate sessions."""

import asyncio

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from livebid.auctions.ledger import create_auction
from livebid.auctions.tx_bid import AuctionLocks, place_bid
from livebid.auth.identity import register
from livebid.core.db import Base
from livebid.core.errors import BidTooLow
from livebid.repositories import BidRepository


async def run_two_bids(url: str, amounts: tuple[float, float]):
    engine = create_async_engine(url)
    Session = async_sessionmaker(bind=engine, class_=AsyncSession, expire_on_commit=False)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async with Session() as db:
        seller = await register(db, "seller", "seller@x.com", "pw")
        bidder = await register(db, "bidder", "bidder@x.com", "pw")
        auction = await create_auction(db, seller, "Widget", "", 10, 1)
        await db.commit()

    locks = AuctionLocks()

    async def bid(user, amount):
        # Same sequence as POST /api/bids
        async with Session() as db:
            async with locks.get(auction.id):
                try:
                    await place_bid(db, auction.id, user, amount)
                except BidTooLow:
                    return "rejected"
                await db.commit()
        return "accepted"

    outcomes = await asyncio.gather(bid(seller, amounts[0]), bid(bidder, amounts[1]))

    async with Session() as db:
        stored = [b.amount for b in await BidRepository(db).list_for_auction(auction.id)]
    await engine.dispose()
    return outcomes, stored


def test_interleaved_equal_bids_accept_exactly_one(tmp_path):
    outcomes, stored = asyncio.run(run_two_bids(f"sqlite+aiosqlite:///{tmp_path / 'bids.db'}", (15, 15)))
    assert sorted(outcomes) == ["accepted", "rejected"]
    assert stored == [15]


def test_interleaved_bids_keep_ledger_increasing(tmp_path):
    outcomes, stored = asyncio.run(run_two_bids(f"sqlite+aiosqlite:///{tmp_path / 'bids.db'}", (20, 12)))
    # Whichever runs first, 12 can never follow 20
    assert "accepted" in outcomes
    ascending = list(reversed(stored))
    assert all(a < b for a, b in zip(ascending, ascending[1:]))
    assert max(stored) == 20
