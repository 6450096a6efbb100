import asyncio
import weakref
from sqlalchemy.ext.asyncio import AsyncSession
import structlog
from livebid.models import Bid, User
from livebid.repositories import AuctionRepository, BidRepository
from livebid.core.errors import AuctionNotFound, AuctionEnded, BidTooLow
from livebid.core import timeutil
from livebid.auctions.ledger import current_price, is_ended

logger = structlog.get_logger()


class AuctionLocks:
    """One asyncio.Lock per auction. Holding it across check, insert and
    commit keeps two interleaved requests from both passing the price check.
    Entries live only while some request holds or waits on the lock."""

    def __init__(self):
        self._locks: weakref.WeakValueDictionary[int, asyncio.Lock] = weakref.WeakValueDictionary()

    def get(self, auction_id: int) -> asyncio.Lock:
        lock = self._locks.get(auction_id)
        if lock is None:
            lock = asyncio.Lock()
            self._locks[auction_id] = lock
        return lock

    def __len__(self) -> int:
        return len(self._locks)

bid_locks = AuctionLocks()


def check_amount(amount: float, price: float) -> None:
    if float(amount) <= price:
        raise BidTooLow(price)


async def place_bid(db: AsyncSession, auction_id: int, bidder: User, amount: float) -> Bid:
    """Validates and appends a bid. Caller holds ``bid_locks.get(auction_id)``
    and commits. The accepted amount is the auction's new current price."""
    auction = await AuctionRepository(db).get_for_update(auction_id)
    if not auction:
        raise AuctionNotFound()

    now = timeutil.utcnow()
    if is_ended(auction, now):
        logger.info("Bid rejected", auction_id=auction_id, bidder_id=bidder.id, amount=amount, reason="ended")
        raise AuctionEnded()

    bids = BidRepository(db)
    highest, _ = await bids.stats(auction_id)
    price = current_price(auction.starting_price, highest)
    try:
        check_amount(amount, price)
    except BidTooLow:
        logger.info("Bid rejected", auction_id=auction_id, bidder_id=bidder.id, amount=amount, current_price=price, reason="too_low")
        raise

    bid = Bid(
        auction_id=auction_id,
        bidder_id=bidder.id,
        bidder_name=bidder.username,
        amount=float(amount),
        created_at=timeutil.to_naive_utc(now),
    )
    await bids.add(bid)
    logger.info("Bid accepted", auction_id=auction_id, bid_id=bid.id, bidder_id=bidder.id, amount=bid.amount)
    return bid
