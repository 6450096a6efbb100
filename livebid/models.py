from sqlalchemy import Column, Integer, String, Float, DateTime, ForeignKey
from sqlalchemy.sql import func
from livebid.core.db import Base

class User(Base):
    __tablename__ = "users"
    id = Column(Integer, primary_key=True, index=True)
    username = Column(String, unique=True, index=True, nullable=False)
    email = Column(String, unique=True, index=True, nullable=False)
    pw_hash = Column(String, nullable=False)
    created_at = Column(DateTime, default=func.now())


class Auction(Base):
    __tablename__ = "auctions"
    id = Column(Integer, primary_key=True, index=True)
    title = Column(String, index=True)
    description = Column(String)
    starting_price = Column(Float, nullable=False)
    # Snapshot of the seller at creation time
    seller_id = Column(Integer, ForeignKey("users.id"), index=True)
    seller_name = Column(String)
    start_at = Column(DateTime, nullable=False)
    end_at = Column(DateTime, nullable=False)
    # Never transitions; "ended" is derived from end_at on read
    status = Column(String, default="active")
    created_at = Column(DateTime, default=func.now())


class Bid(Base):
    __tablename__ = "bids"
    id = Column(Integer, primary_key=True, index=True)
    auction_id = Column(Integer, ForeignKey("auctions.id"), index=True, nullable=False)
    bidder_id = Column(Integer, ForeignKey("users.id"), index=True)
    bidder_name = Column(String)
    amount = Column(Float, nullable=False)
    created_at = Column(DateTime, nullable=False)
