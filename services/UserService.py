# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-02-10
# Description: UserService.py
# -----------------------------------------------------------------------------
import logging
from typing import Any, Dict, List, Optional

from embedding.FeatureVector import FeatureVector
from embedding.UserEmbeddingBuilder import UserEmbeddingBuilder
from entities.EntityRepository import EntityRepository
from exceptions.AdvisorErrors import EntityNotFound, StoreUnavailable
from model.AdvisorUser import AdvisorUser
from ranking.types import CandidateRecord
from utility.logging_utils import get_class_logger
from vectorstore.CandidateStore import CandidateStore


class UserService:
    """
    User facade used by FastAPI
    - register users in the entity repository
    - keep the "similar users" candidate space in step with the repository
    """

    def __init__(self,
                 *,
                 entities: EntityRepository,
                 embedding_builder: UserEmbeddingBuilder,
                 user_store: CandidateStore,
                 logger: Optional[logging.Logger] = None) -> None:
        self.entities = entities
        self.embedding_builder = embedding_builder
        self.user_store = user_store
        self.logger = logger or get_class_logger(self.__class__)

        self.logger.info("UserService initialised (entities=%s, user_store=%s)",
                         type(entities).__name__, getattr(user_store, "name", type(user_store).__name__))

    def register_user(self, data: Dict[str, Any]) -> Dict[str, Any]:
        """
        Store a new user and index its vector.
        `user_id` is assigned when absent. Returns the stored user summary.
        """
        payload = dict(data)
        if payload.get("user_id") is None:
            payload["user_id"] = self.entities.next_id()

        user = AdvisorUser.from_dict(payload)
        if not user.first_name.strip():
            raise ValueError("first_name must not be empty")

        self.entities.save(user)
        vector = self.embedding_builder.build(user)
        indexed = self._index(user, vector)

        self.logger.info("register_user: user=%s skills=%d experiences=%d indexed=%s",
                         user.user_id, len(user.skills), len(user.experiences), indexed)
        return self.describe(user, vector=vector, indexed=indexed)

    def get_user(self, user_id: int) -> Dict[str, Any]:
        user = self.entities.get_entity(user_id)
        if user is None:
            raise EntityNotFound("user", user_id)
        return self.describe(user, vector=self.embedding_builder.build(user))

    def index_all(self) -> int:
        """(Re)index every user in the repository. Returns how many were written."""
        written = 0
        for user_id in self.entities.list_ids():
            user = self.entities.get_entity(user_id)
            if user is None:
                continue
            if self._index(user, self.embedding_builder.build(user)):
                written += 1
        self.logger.info("index_all: indexed %d users into '%s'", written, self.user_store.name)
        return written

    def _index(self, user: AdvisorUser, vector: FeatureVector) -> bool:
        record = CandidateRecord(
            entity_id=user.user_id,
            vector=vector,
            payload={"name": user.full_name, "role": user.role or ""},
        )
        try:
            self.user_store.upsert(record)
            return True
        except StoreUnavailable as e:
            self.logger.warning("User %s saved but not indexed: %s", user.user_id, e)
            return False

    @staticmethod
    def describe(user: AdvisorUser, vector: Optional[FeatureVector] = None, indexed: Optional[bool] = None) -> Dict[str, Any]:
        out: Dict[str, Any] = {
            "user_id": user.user_id,
            "first_name": user.first_name,
            "last_name": user.last_name,
            "role": user.role,
            "email": user.email,
            "skills": [s.name for s in user.skills],
            "experiences": [
                {"company_name": e.company_name, "job_title": e.job_title}
                for e in user.experiences
            ],
        }
        if vector is not None:
            out["vector"] = list(vector)
        if indexed is not None:
            out["indexed"] = indexed
        return out

    def list_users(self) -> List[Dict[str, Any]]:
        users = (self.entities.get_entity(i) for i in self.entities.list_ids())
        return [self.describe(u) for u in users if u is not None]
