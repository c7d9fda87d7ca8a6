import json
from collections.abc import AsyncIterator

from fastapi import APIRouter, Request
from fastapi.responses import StreamingResponse
from pydantic import BaseModel

from imagechat.exceptions import ImageChatError
from imagechat.history.store import format_size
from imagechat.routes.errors import to_http_exception
from imagechat.streaming.models import StreamSnapshot

router = APIRouter(prefix="/api")


class ChatPayload(BaseModel):
    message: str = ""


class TrimPayload(BaseModel):
    keep: int = 50


def _snapshot_line(snapshot: StreamSnapshot) -> str:
    return json.dumps(
        {
            "state": snapshot.state.value,
            "content": snapshot.content,
            "raw_content": snapshot.raw_content,
            "finish_reason": snapshot.finish_reason,
            "interrupted": snapshot.interrupted,
        },
        ensure_ascii=False,
    ) + "\n"


@router.post("/chat")
async def chat(request: Request, payload: ChatPayload):
    """Stream reply snapshots as NDJSON, one line per snapshot."""
    snapshots = request.app.state.chat_service.stream_reply(payload.message)
    try:
        first = await anext(snapshots)
    except ImageChatError as exc:
        await snapshots.aclose()
        raise to_http_exception(exc) from exc

    async def body() -> AsyncIterator[str]:
        try:
            yield _snapshot_line(first)
            async for snapshot in snapshots:
                yield _snapshot_line(snapshot)
        finally:
            await snapshots.aclose()

    return StreamingResponse(body(), media_type="application/x-ndjson")


@router.post("/chat/complete")
async def chat_complete(request: Request, payload: ChatPayload):
    try:
        reply = await request.app.state.chat_service.complete(payload.message)
    except ImageChatError as exc:
        raise to_http_exception(exc) from exc
    return reply.to_dict()


@router.get("/messages")
async def list_messages(request: Request):
    service = request.app.state.chat_service
    size = service.size_bytes()
    return {
        "messages": [message.to_dict() for message in service.messages()],
        "storage_bytes": size,
        "storage": format_size(size),
        "warning": service.last_warning,
    }


@router.post("/messages/trim")
async def trim_messages(request: Request, payload: TrimPayload):
    remaining = request.app.state.chat_service.trim(payload.keep)
    return {"remaining": remaining}


@router.delete("/messages")
async def clear_messages(request: Request):
    request.app.state.chat_service.clear()
    return {"ok": True}
