from fastapi import WebSocket
import structlog

logger = structlog.get_logger()

AUCTION_CREATED = "auctionCreated"
BID_ACCEPTED = "bidAccepted"

class ConnectionManager:
    """Registry of connected sockets. Every event goes to every socket; there
    is no acknowledgment and nothing is kept for clients that connect later."""

    def __init__(self):
        self.active: set[WebSocket] = set()

    async def connect(self, websocket: WebSocket) -> None:
        await websocket.accept()
        self.active.add(websocket)
        logger.info("Socket connected", connections=len(self.active))

    def disconnect(self, websocket: WebSocket) -> None:
        self.active.discard(websocket)
        logger.info("Socket disconnected", connections=len(self.active))

    async def broadcast(self, event: str, data: dict) -> int:
        """Send to all sockets, dropping the ones that fail. Returns the number reached."""
        message = {"event": event, "data": data}
        delivered = 0
        for websocket in list(self.active):
            try:
                await websocket.send_json(message)
                delivered += 1
            except Exception as exc:
                logger.warning("Broadcast send failed", event_name=event, error=str(exc))
                self.disconnect(websocket)
        return delivered

manager = ConnectionManager()
