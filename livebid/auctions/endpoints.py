from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field
from sqlalchemy.ext.asyncio import AsyncSession
from livebid.core.db import get_db
from livebid.auth.dependencies import get_current_user
from livebid.auctions.ledger import create_auction, list_auctions, get_auction, list_bids, serialize_auction, serialize_bid
from livebid.auctions.tx_bid import place_bid, bid_locks
from livebid.realtime.broadcast import manager, AUCTION_CREATED, BID_ACCEPTED

router = APIRouter(prefix='/api', tags=['auctions'])

class CreateAuctionIn(BaseModel):
    title: str
    description: str = ""
    starting_price: float = Field(alias="startingPrice", allow_inf_nan=False)
    # Hours; fractions allowed
    duration: float = Field(allow_inf_nan=False)

class BidIn(BaseModel):
    auction_id: int = Field(alias="auctionId")
    amount: float = Field(allow_inf_nan=False)

@router.get('/auctions')
async def auctions(db: AsyncSession = Depends(get_db)):
    return await list_auctions(db)

@router.get('/auctions/{auction_id}')
async def auction_detail(auction_id: int, db: AsyncSession = Depends(get_db)):
    return await get_auction(db, auction_id)

@router.post('/auctions')
async def create(body: CreateAuctionIn, db: AsyncSession = Depends(get_db), user=Depends(get_current_user)):
    auction = await create_auction(db, user, body.title, body.description, body.starting_price, body.duration)
    await db.commit()
    payload = serialize_auction(auction, auction.starting_price)
    await manager.broadcast(AUCTION_CREATED, payload)
    return payload

@router.post('/bids')
async def bid(body: BidIn, db: AsyncSession = Depends(get_db), user=Depends(get_current_user)):
    async with bid_locks.get(body.auction_id):
        accepted = await place_bid(db, body.auction_id, user, body.amount)
        await db.commit()
    payload = serialize_bid(accepted)
    await manager.broadcast(BID_ACCEPTED, {"auctionId": accepted.auction_id, "bid": payload, "currentPrice": accepted.amount})
    return payload

@router.get('/auctions/{auction_id}/bids')
async def auction_bids(auction_id: int, db: AsyncSession = Depends(get_db)):
    """Newest first; an unknown auction simply has no bids."""
    return await list_bids(db, auction_id)
