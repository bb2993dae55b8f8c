# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-02-09
# Description: AdvisorChatService.py
# -----------------------------------------------------------------------------
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence, Tuple

import settings
from chat.CompletionCapability import CompletionCapability
from conversation.ConversationStore import ROLE_CALLER, ConversationStore, ConversationTurn
from embedding.FeatureVector import USER_DIM, FeatureVector, pad_or_truncate
from embedding.UserEmbeddingBuilder import UserEmbeddingBuilder
from entities.EntityRepository import EntityRepository
from exceptions.AdvisorErrors import EntityNotFound, StoreUnavailable
from model.AdvisorUser import AdvisorUser
from ranking import SimilarityRanker
from ranking.types import CandidateRecord, RankedMatch
from services.StreamDeliveryCoordinator import DeltaSink, StreamDeliveryCoordinator, StreamHandle
from utility.logging_utils import get_class_logger
from vectorstore.CandidateStore import CandidateStore


PROMPT_TEMPLATE = (
    "You are {persona}, a venture capitalist who knows every kind of market and has built and scaled "
    "a company of your own. A startup founder has come to you for guidance on every aspect of their "
    "business. Speak as {persona}, an experienced human advisor, never as an AI, and do not invent "
    "questions on the founder's behalf.\n"
    "Provide advice and insights based on the following context.\n\n"
    "USER CONTEXT:\n{user_context}\n\n"
    "SIMILAR USERS:\n{similar_users}\n\n"
    "RELEVANT DOCUMENTS:\n{documents}\n\n"
    "CONVERSATION HISTORY:\n{history}\n\n"
    "CURRENT QUERY:\n{query}\n"
)

NO_CONTEXT = "(none)"

_ROLE_LABELS = {
    ROLE_CALLER: "User",
}


def _safe_str(x: Any) -> str:
    return "" if x is None else str(x)


@dataclass
class AdvisorChatService:
    """
    Chat service for the advisor persona:
        - encodes the subject user into a query vector
        - retrieves similar users and documents from the two candidate spaces
        - records the caller's message and renders the transcript
        - builds a bounded prompt and calls the completion capability
          (blocking, or streamed through StreamDeliveryCoordinator)

    `max_context_chars` bounds the transcript plus the document summaries.
    Documents are fitted first into `document_context_share` of it; the
    transcript gets whatever they leave unused.
    User context and similar users are already bounded by their limits.
    """

    entities: EntityRepository
    embedding_builder: UserEmbeddingBuilder
    user_store: CandidateStore
    document_store: CandidateStore
    conversations: ConversationStore
    completion: CompletionCapability
    streamer: Optional[StreamDeliveryCoordinator] = None
    logger: Optional[logging.Logger] = None

    persona_name: str = settings.PERSONA_NAME
    similar_users_limit: int = settings.SIMILAR_USERS_LIMIT
    similar_documents_limit: int = settings.SIMILAR_DOCUMENTS_LIMIT
    max_context_chars: int = settings.MAX_CONTEXT_CHARS
    document_context_share: float = settings.DOCUMENT_CONTEXT_SHARE
    query_dim: int = USER_DIM
    completion_kwargs: Dict[str, Any] = field(default_factory=lambda: dict(settings.CHAT_DEFAULTS))

    def __post_init__(self) -> None:
        self.logger = self.logger or get_class_logger(self.__class__)
        if self.streamer is None:
            self.streamer = StreamDeliveryCoordinator(
                self.completion,
                completion_kwargs=self.completion_kwargs,
                logger=self.logger.getChild("stream"),
            )
        self.logger.info(
            "AdvisorChatService initialised (user_store=%s document_store=%s completion=%s)",
            getattr(self.user_store, "name", type(self.user_store).__name__),
            getattr(self.document_store, "name", type(self.document_store).__name__),
            type(self.completion).__name__,
        )

    # ------------------------------------------------------------------
    # Prompt assembly
    # ------------------------------------------------------------------
    def build_prompt(self, user_id: int, query_text: str) -> str:
        q = (query_text or "").strip()
        if not q:
            raise ValueError("query_text must not be empty")

        user = self.entities.get_entity(user_id)
        if user is None:
            self.logger.warning("build_prompt: user %s not found", user_id)
            raise EntityNotFound("user", user_id)

        self.logger.info("build_prompt: user=%s query='%s' (start)", user_id, q[:120])

        query_vector = pad_or_truncate(self.embedding_builder.build(user), self.query_dim)

        similar_users = self._nearest(
            self.user_store, query_vector, self.similar_users_limit, exclude_id=user.user_id
        )
        documents = self._nearest(self.document_store, query_vector, self.similar_documents_limit)
        self.logger.info(
            "build_prompt: retrieved similar_users=%d documents=%d", len(similar_users), len(documents)
        )

        user_context = self._build_user_context(user)
        similar_context = self._build_similar_users_context(similar_users)

        self.conversations.append(user_id, ConversationTurn.caller(q))
        turns = self.conversations.read(user_id)

        # documents keep a reserved share, the transcript takes what is left
        budget = max(0, self.max_context_chars)
        share = min(max(self.document_context_share, 0.0), 1.0)
        document_context = self._build_document_context(documents, int(budget * share))
        history = self._build_history_block(turns, budget - len(document_context))

        prompt = PROMPT_TEMPLATE.format(
            persona=self.persona_name,
            user_context=user_context or NO_CONTEXT,
            similar_users=similar_context or NO_CONTEXT,
            documents=document_context or NO_CONTEXT,
            history=history or NO_CONTEXT,
            query=q,
        )
        self.logger.debug("build_prompt: prompt_chars=%d turns=%d", len(prompt), len(turns))
        return prompt

    def _nearest(
            self,
            store: CandidateStore,
            query_vector: FeatureVector,
            limit: int,
            exclude_id: Any = None,
    ) -> List[RankedMatch]:
        fetch = limit + 1 if exclude_id is not None else limit
        try:
            records: Sequence[CandidateRecord] = store.query_nearest(query_vector, fetch)
        except StoreUnavailable as e:
            self.logger.warning("Candidate lookup degraded to empty: %s", e)
            return []

        if exclude_id is not None:
            records = [r for r in records if r.entity_id != exclude_id]
        return SimilarityRanker.rank(query_vector, records, limit, metric="euclidean")

    # ------------------------------------------------------------------
    # Context fragments
    # ------------------------------------------------------------------
    @staticmethod
    def _build_user_context(user: AdvisorUser) -> str:
        lines = [f"Name: {user.full_name}"]
        if user.role:
            lines.append(f"Role: {user.role}")
        if user.skills:
            lines.append("Skills: " + ", ".join(s.name for s in user.skills))
        if user.experiences:
            lines.append(
                "Experience: "
                + "; ".join(f"{e.job_title} at {e.company_name}" for e in user.experiences)
            )
        return "\n".join(lines)

    @staticmethod
    def _build_similar_users_context(matches: Sequence[RankedMatch]) -> str:
        parts: List[str] = []
        for m in matches:
            line = f"- User ID: {m.entity_id}"
            name = m.payload.get("name")
            role = m.payload.get("role")
            if name:
                line += f" ({name}" + (f", {role})" if role else ")")
            line += f" distance={m.score:.4f}"
            parts.append(line)
        return "\n".join(parts)

    def _build_document_context(self, matches: Sequence[RankedMatch], budget: int) -> str:
        parts: List[str] = []
        total = 0

        for i, m in enumerate(matches, start=1):
            topic = _safe_str(m.payload.get("topic"))
            content = _safe_str(m.payload.get("content"))
            chunk = f"[{i}] Document ID: {m.entity_id}, Topic: {topic}\n{content}".strip()

            if total + len(chunk) + 1 > budget:
                self.logger.warning(
                    "_build_document_context: truncating documents at %d of %d (budget=%d chars)",
                    i - 1, len(matches), budget,
                )
                break

            parts.append(chunk)
            total += len(chunk) + 1

        return "\n".join(parts)

    def _build_history_block(self, turns: Sequence[ConversationTurn], budget: int) -> str:
        """Most recent turns that fit in `budget`, oldest first."""
        label = self.persona_name.title()
        kept: List[str] = []
        total = 0

        for turn in reversed(turns):
            line = f"{_ROLE_LABELS.get(turn.role, label)}: {turn.text}"
            if total + len(line) + 1 > budget:
                if not kept:
                    # always keep the tail of the current message
                    kept.append(line[-budget:] if budget > 0 else "")
                self.logger.debug("_build_history_block: dropped %d older turns", len(turns) - len(kept))
                break
            kept.append(line)
            total += len(line) + 1

        return "\n".join(reversed(kept)).strip()

    # ------------------------------------------------------------------
    # Exposed operations
    # ------------------------------------------------------------------
    def get_response(self, query_text: str, user_id: int) -> str:
        """Blocking: prompt, complete, record the answer, return it."""
        prompt = self.build_prompt(user_id, query_text)

        answer = self.completion.complete(prompt, **self.completion_kwargs)
        self.conversations.append(user_id, ConversationTurn.assistant(answer))

        self.logger.info("get_response: user=%s answer_chars=%d (done)", user_id, len(answer))
        return answer

    def stream_response(self, query_text: str, user_id: int, sink: DeltaSink) -> StreamHandle:
        """
        Non-blocking: the prompt is built here (so EntityNotFound reaches the
        caller), delivery runs on its own thread. The streamed answer is
        recorded as an assistant turn once it completes normally.
        """
        prompt = self.build_prompt(user_id, query_text)

        def _record(answer: str) -> None:
            self.conversations.append(user_id, ConversationTurn.assistant(answer))

        handle = self.streamer.start(prompt, sink, on_complete=_record)
        self.logger.info("stream_response: user=%s stream=%s", user_id, handle.stream_id)
        return handle

    def history(self, user_id: int) -> Tuple[ConversationTurn, ...]:
        return self.conversations.read(user_id)

    def reset_history(self, user_id: int) -> bool:
        cleared = self.conversations.clear(user_id)
        self.logger.info("reset_history: user=%s cleared=%s", user_id, cleared)
        return cleared
