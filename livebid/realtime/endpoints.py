from fastapi import APIRouter, WebSocket
from livebid.realtime.broadcast import manager

router = APIRouter(tags=['realtime'])

@router.websocket('/ws')
async def events(websocket: WebSocket):
    await manager.connect(websocket)
    try:
        # Server push only; anything the client sends is ignored
        while True:
            message = await websocket.receive()
            if message["type"] == "websocket.disconnect":
                break
    finally:
        manager.disconnect(websocket)
