# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-02-12
# Description: documents.py
# -----------------------------------------------------------------------------
import logging

from fastapi import APIRouter, Depends, HTTPException

from api.dependencies import get_document_service
from api.schemas.documents import DocumentCreateRequest, DocumentResponse, DocumentStatsResponse
from exceptions.AdvisorErrors import StoreUnavailable
from services.DocumentService import DocumentService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/documents", tags=["documents"])


@router.post("", response_model=DocumentResponse, status_code=201)
def add_document(
        req: DocumentCreateRequest,
        svc: DocumentService = Depends(get_document_service),
) -> DocumentResponse:
    logger.info("POST /documents (start) topic='%s' vector_supplied=%s", req.topic[:80], req.vector is not None)
    try:
        doc = svc.add_document(
            topic=req.topic,
            content=req.content,
            vector=req.vector,
            document_id=req.document_id,
            relevance_score=req.relevance_score,
        )
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except StoreUnavailable as e:
        logger.error("POST /documents failed: %s", e)
        raise HTTPException(status_code=503, detail=str(e))

    return DocumentResponse(
        document_id=doc.document_id,
        topic=doc.topic,
        content=doc.content,
        vector=list(doc.vector),
        relevance_score=doc.relevance_score,
    )


@router.get("/stats", response_model=DocumentStatsResponse)
def document_stats(svc: DocumentService = Depends(get_document_service)) -> DocumentStatsResponse:
    try:
        return DocumentStatsResponse(**svc.stats())
    except StoreUnavailable as e:
        raise HTTPException(status_code=503, detail=str(e))
