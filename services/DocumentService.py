# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-02-10
# Description: DocumentService.py
# -----------------------------------------------------------------------------
import logging
import uuid
from typing import Any, Dict, Optional, Sequence

from embedding.FeatureEncoder import LLMFeatureEncoder
from embedding.FeatureVector import DOCUMENT_DIM, pad_or_truncate
from model.AdvisorDocument import AdvisorDocument
from ranking.types import CandidateRecord
from utility.logging_utils import get_class_logger
from vectorstore.CandidateStore import CandidateStore


class DocumentService:
    """
    Document facade used by FastAPI
    - registers advisory documents in the "similar documents" candidate space
    - vectors are supplied by the caller or generated by the text encoder
    """

    def __init__(self,
                 *,
                 document_store: CandidateStore,
                 encoder: Optional[LLMFeatureEncoder] = None,
                 logger: Optional[logging.Logger] = None) -> None:
        self.document_store = document_store
        self.encoder = encoder
        self.logger = logger or get_class_logger(self.__class__)

        self.logger.info("DocumentService initialised (store=%s, encoder=%s)",
                         getattr(document_store, "name", type(document_store).__name__),
                         type(encoder).__name__ if encoder else None)

    def add_document(self,
                     *,
                     topic: str,
                     content: str,
                     vector: Optional[Sequence[float]] = None,
                     document_id: Optional[str] = None,
                     relevance_score: Optional[float] = None) -> AdvisorDocument:
        topic = (topic or "").strip()
        content = (content or "").strip()
        if not topic or not content:
            raise ValueError("topic and content must not be empty")

        doc_id = document_id or uuid.uuid4().hex

        if vector is not None:
            vec = pad_or_truncate(vector, DOCUMENT_DIM)
        elif self.encoder is not None:
            vec = pad_or_truncate(
                self.encoder.encode_text(doc_id, f"Topic: {topic}\n{content}", kind="advisory document"),
                DOCUMENT_DIM,
            )
        else:
            raise ValueError("vector is required when no document encoder is configured")

        doc = AdvisorDocument(
            document_id=doc_id,
            topic=topic,
            content=content,
            vector=vec,
            relevance_score=relevance_score,
        )

        # StoreUnavailable propagates: there is no other copy of the document
        self.document_store.upsert(CandidateRecord(entity_id=doc.document_id, vector=doc.vector, payload=doc.to_payload()))

        self.logger.info("add_document: doc_id='%s' topic='%s' vector=%s", doc.document_id, topic[:80], vec)
        return doc

    def stats(self) -> Dict[str, Any]:
        return {"collection": self.document_store.name, "count": self.document_store.count()}
