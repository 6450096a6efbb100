"""Auction ledger: creation, lookup and the derived read views.

The current price of an auction is never stored. It is the highest accepted
bid, or the starting price while there are none, and every read path goes
through :func:`current_price`.
"""

from datetime import datetime, timedelta
from sqlalchemy.ext.asyncio import AsyncSession
import structlog
from livebid.models import Auction, Bid, User
from livebid.repositories import AuctionRepository, BidRepository
from livebid.core.errors import AuctionNotFound, DurationOutOfRange
from livebid.core import timeutil

logger = structlog.get_logger()


def current_price(starting_price: float, highest_bid: float | None) -> float:
    return float(starting_price) if highest_bid is None else float(highest_bid)


def is_ended(auction: Auction, now: datetime) -> bool:
    return now > timeutil.aware(auction.end_at)


def time_remaining_ms(auction: Auction, now: datetime) -> int:
    return max(0, int((timeutil.aware(auction.end_at) - now).total_seconds() * 1000))


def serialize_auction(auction: Auction, price: float) -> dict:
    return {
        "id": auction.id,
        "title": auction.title,
        "description": auction.description,
        "startingPrice": auction.starting_price,
        "currentPrice": price,
        "sellerId": auction.seller_id,
        "sellerName": auction.seller_name,
        "startTime": timeutil.isoformat(auction.start_at),
        "endTime": timeutil.isoformat(auction.end_at),
        "status": auction.status,
        "createdAt": timeutil.isoformat(auction.created_at),
    }


def serialize_with_derived(auction: Auction, highest_bid: float | None, bid_count: int, now: datetime) -> dict:
    data = serialize_auction(auction, current_price(auction.starting_price, highest_bid))
    data.update({
        "bidCount": bid_count,
        "timeRemaining": time_remaining_ms(auction, now),
        "ended": is_ended(auction, now),
    })
    return data


def serialize_bid(bid: Bid) -> dict:
    return {
        "id": bid.id,
        "auctionId": bid.auction_id,
        "bidderId": bid.bidder_id,
        "bidderName": bid.bidder_name,
        "amount": bid.amount,
        "timestamp": timeutil.isoformat(bid.created_at),
    }


async def create_auction(db: AsyncSession, seller: User, title: str, description: str, starting_price: float, duration_hours: float) -> Auction:
    """No validation of sign: zero or negative prices and durations are stored as given."""
    start_at = timeutil.to_naive_utc(timeutil.utcnow())
    try:
        end_at = start_at + timedelta(hours=duration_hours)
    except OverflowError:
        raise DurationOutOfRange()
    auction = Auction(
        title=title,
        description=description,
        starting_price=float(starting_price),
        seller_id=seller.id,
        seller_name=seller.username,
        start_at=start_at,
        end_at=end_at,
        status="active",
        created_at=start_at,
    )
    await AuctionRepository(db).add(auction)
    logger.info("Auction created", auction_id=auction.id, seller_id=seller.id, starting_price=auction.starting_price)
    return auction


async def list_auctions(db: AsyncSession) -> list[dict]:
    auctions = await AuctionRepository(db).list_all()
    stats = await BidRepository(db).stats_by_auction()
    now = timeutil.utcnow()
    rows = []
    for auction in auctions:
        highest, count = stats.get(auction.id, (None, 0))
        rows.append(serialize_with_derived(auction, highest, count, now))
    return rows


async def get_auction(db: AsyncSession, auction_id: int) -> dict:
    auction = await AuctionRepository(db).get(auction_id)
    if not auction:
        raise AuctionNotFound()
    highest, count = await BidRepository(db).stats(auction_id)
    return serialize_with_derived(auction, highest, count, timeutil.utcnow())


async def list_bids(db: AsyncSession, auction_id: int) -> list[dict]:
    bids = await BidRepository(db).list_for_auction(auction_id)
    return [serialize_bid(b) for b in bids]
