# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-02-08
# Description: EntityRepository
# -----------------------------------------------------------------------------
import itertools
import json
import logging
from pathlib import Path
from typing import Dict, List, Optional, Protocol, runtime_checkable

from model.AdvisorUser import AdvisorUser
from utility.logging_utils import get_class_logger


@runtime_checkable
class EntityRepository(Protocol):
    """User lookup owned by the persistence layer."""

    def get_entity(self, user_id: int) -> Optional[AdvisorUser]:
        ...

    def save(self, user: AdvisorUser) -> AdvisorUser:
        ...

    def next_id(self) -> int:
        ...

    def list_ids(self) -> List[int]:
        ...


class InMemoryEntityRepository:
    """Process-local user repository, optionally seeded from a JSON file."""

    def __init__(self, users: Optional[List[AdvisorUser]] = None, logger: Optional[logging.Logger] = None):
        self.logger = logger or get_class_logger(self.__class__)
        self._users: Dict[int, AdvisorUser] = {}
        for u in users or []:
            self._users[u.user_id] = u
        start = max(self._users, default=0) + 1
        self._ids = itertools.count(start)

    def get_entity(self, user_id: int) -> Optional[AdvisorUser]:
        return self._users.get(user_id)

    def save(self, user: AdvisorUser) -> AdvisorUser:
        self._users[user.user_id] = user
        self.logger.debug("Saved user %s", user.user_id)
        return user

    def next_id(self) -> int:
        candidate = next(self._ids)
        while candidate in self._users:
            candidate = next(self._ids)
        return candidate

    def list_ids(self) -> List[int]:
        return sorted(self._users)

    def __len__(self) -> int:
        return len(self._users)

    @classmethod
    def from_json(cls, path: str | Path, logger: Optional[logging.Logger] = None) -> "InMemoryEntityRepository":
        """
        Seed file format:

            {"users": [{"user_id": 1, "first_name": "...", "skills": ["java"], "experiences": [...]}, ...]}
        """
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
        users = [AdvisorUser.from_dict(u) for u in (data.get("users") or [])]
        repo = cls(users=users, logger=logger)
        repo.logger.info("Loaded %d users from %s", len(users), path)
        return repo
