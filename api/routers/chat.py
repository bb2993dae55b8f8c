# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-02-11
# Description: chat.py
# -----------------------------------------------------------------------------
import json
import logging
from typing import Any, Dict, Iterator, Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from fastapi.responses import StreamingResponse

import settings
from api.dependencies import get_chat_service
from api.schemas.chat import ChatRequest, ChatResponse, HistoryResetResponse, HistoryResponse, HistoryTurn
from exceptions.AdvisorErrors import EntityNotFound
from services.AdvisorChatService import AdvisorChatService
from services.StreamDeliveryCoordinator import EVENT_DELTA, EVENT_DONE, QueueSink, StreamHandle

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/chat", tags=["chat"])

USER_ID_REQUIRED = "User ID is required."

SSE_HEADERS = {
    "Cache-Control": "no-cache",
    "Connection": "keep-alive",
    "X-Accel-Buffering": "no",
}


def _answer(svc: AdvisorChatService, query: str, user_id: int) -> str:
    q = (query or "").strip()
    if not q:
        raise HTTPException(status_code=400, detail="query must not be empty")

    try:
        return svc.get_response(q, user_id)
    except EntityNotFound as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        logger.exception("chat failed for user %s: %s", user_id, e)
        raise HTTPException(status_code=500, detail=f"chat failed: {e}")


@router.post("", response_model=ChatResponse)
def post_chat(
        req: ChatRequest,
        svc: AdvisorChatService = Depends(get_chat_service),
) -> ChatResponse:
    logger.info("POST /chat (start) user_id=%s query_len=%d", req.user_id, len(req.query))
    answer = _answer(svc, req.query, req.user_id)
    logger.info("POST /chat (done) answer_len=%d", len(answer))
    return ChatResponse(user_id=req.user_id, query=req.query.strip(), answer=answer)


@router.get("/query", response_model=ChatResponse)
def get_chat_query(
        query: str = Query(..., min_length=1),
        user_id: Optional[int] = Query(None),
        svc: AdvisorChatService = Depends(get_chat_service),
) -> ChatResponse:
    if user_id is None:
        raise HTTPException(status_code=400, detail=USER_ID_REQUIRED)

    logger.info("GET /chat/query (start) user_id=%s query_len=%d", user_id, len(query))
    answer = _answer(svc, query, user_id)
    return ChatResponse(user_id=user_id, query=query.strip(), answer=answer)


def _sse(payload: Dict[str, Any], event_id: Optional[str] = None) -> str:
    head = f"id: {event_id}\n" if event_id else ""
    return f"{head}data: {json.dumps(payload)}\n\n"


@router.get("/stream")
def get_chat_stream(
        query: str = Query(..., min_length=1),
        user_id: Optional[int] = Query(None),
        svc: AdvisorChatService = Depends(get_chat_service),
) -> StreamingResponse:
    if user_id is None:
        raise HTTPException(status_code=400, detail=USER_ID_REQUIRED)

    q = query.strip()
    if not q:
        raise HTTPException(status_code=400, detail="query must not be empty")

    sink = QueueSink(maxsize=settings.STREAM_QUEUE_SIZE, put_timeout=settings.STREAM_PUT_TIMEOUT_SEC)
    try:
        handle: StreamHandle = svc.stream_response(q, user_id, sink)
    except EntityNotFound as e:
        raise HTTPException(status_code=404, detail=str(e))
    except Exception as e:
        logger.exception("GET /chat/stream failed to start for user %s: %s", user_id, e)
        raise HTTPException(status_code=500, detail=f"stream failed: {e}")

    logger.info("GET /chat/stream (start) user_id=%s stream=%s", user_id, handle.stream_id)

    def generate() -> Iterator[str]:
        # leaving this generator (disconnect or terminal event) closes the sink
        for kind, payload in sink.events():
            if kind == EVENT_DELTA:
                yield _sse({"type": "delta", "id": payload.event_id, "text": payload.text}, payload.event_id)
            elif kind == EVENT_DONE:
                yield _sse({"type": "done", "stream_id": handle.stream_id})
            else:
                yield _sse({"type": "error", "stream_id": handle.stream_id, "message": str(payload)})

    return StreamingResponse(generate(), media_type="text/event-stream", headers=SSE_HEADERS)


@router.get("/history/{user_id}", response_model=HistoryResponse)
def get_history(
        user_id: int,
        svc: AdvisorChatService = Depends(get_chat_service),
) -> HistoryResponse:
    turns = [HistoryTurn(role=t.role, text=t.text, created_at=t.created_at) for t in svc.history(user_id)]
    return HistoryResponse(user_id=user_id, turns=turns)


@router.delete("/history/{user_id}", response_model=HistoryResetResponse)
def delete_history(
        user_id: int,
        svc: AdvisorChatService = Depends(get_chat_service),
) -> HistoryResetResponse:
    logger.info("DELETE /chat/history/%s", user_id)
    return HistoryResetResponse(user_id=user_id, cleared=svc.reset_history(user_id))
