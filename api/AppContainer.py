# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-02-11
# Description: AppContainer.py
# -----------------------------------------------------------------------------
from functools import lru_cache
from pathlib import Path
from typing import Optional

import settings
from chat.OpenAIChat import OpenAIChat
from config.Config import Config
from conversation.ConversationStore import ConversationStore
from embedding.FeatureEncoder import ExperienceEncoder, LLMFeatureEncoder, StaticSkillEncoder
from embedding.FeatureVector import DOCUMENT_DIM, SKILL_DIM, USER_DIM
from embedding.SkillTaxonomy import SkillTaxonomy
from embedding.UserEmbeddingBuilder import UserEmbeddingBuilder
from entities.EntityRepository import InMemoryEntityRepository
from health.TestRunner import TestRunner
from services.AdvisorChatService import AdvisorChatService
from services.AdvisorHealthService import AdvisorHealthService
from services.DocumentService import DocumentService
from services.SkillEmbeddingService import SkillEmbeddingService
from services.UserService import UserService
from utility.logging_utils import get_logger
from vectorstore.ChromaCandidateStore import ChromaCandidateStore
from vectorstore.ChromaClientFactory import build_chroma_client
from vectorstore.ChromaVectorCacheStore import ChromaVectorCacheStore
from vectorstore.InMemoryCandidateStore import InMemoryCandidateStore
from vectorstore.VectorCacheStore import InMemoryVectorCacheStore

logger = get_logger(__name__)


class AppContainer:
    """
    Owns heavy object instantiation and application wiring.
    Singleton instances are provided via FastAPI dependencies.
    """

    def __init__(self, cfg: Optional[Config] = None, completion=None) -> None:
        # Configuration
        self.cfg = cfg or Config.from_env()
        logger.info("AppContainer config: %s", self.cfg.summary())

        # Completion capability (OpenAI-compatible endpoint)
        self.openai_chat = completion or OpenAIChat(cfg=self.cfg)

        # Candidate spaces + skill vector cache
        if self.cfg.chroma_mode == "memory":
            self.user_store = InMemoryCandidateStore(settings.USER_COLLECTION, USER_DIM)
            self.document_store = InMemoryCandidateStore(settings.DOCUMENT_COLLECTION, DOCUMENT_DIM)
            self.skill_cache = InMemoryVectorCacheStore()
        else:
            self.chroma_client = build_chroma_client(self.cfg)
            self.user_store = ChromaCandidateStore(self.chroma_client, settings.USER_COLLECTION, USER_DIM)
            self.document_store = ChromaCandidateStore(self.chroma_client, settings.DOCUMENT_COLLECTION, DOCUMENT_DIM)
            self.skill_cache = ChromaVectorCacheStore(self.chroma_client, settings.SKILL_CACHE_COLLECTION)

        # Entities
        users_seed = Path(self.cfg.users_seed_path or settings.DEFAULT_USERS_SEED)
        if users_seed.is_file():
            self.entities = InMemoryEntityRepository.from_json(users_seed)
        else:
            logger.warning("Users seed file not found (%s); starting with no users", users_seed)
            self.entities = InMemoryEntityRepository()

        # Encoders
        self.skills_path = Path(self.cfg.skills_path or settings.DEFAULT_SKILLS_FILE)
        self.taxonomy = SkillTaxonomy.from_json(self.skills_path) if self.skills_path.is_file() else SkillTaxonomy()

        self.skill_llm_encoder = LLMFeatureEncoder(
            self.openai_chat,
            dim=SKILL_DIM,
            cache_store=self.skill_cache,
            completion_kwargs=settings.ENCODER_DEFAULTS,
        )
        self.document_encoder = LLMFeatureEncoder(
            self.openai_chat,
            dim=DOCUMENT_DIM,
            completion_kwargs=settings.ENCODER_DEFAULTS,
        )

        skill_encoder = self.skill_llm_encoder if settings.SKILL_ENCODER == "llm" else StaticSkillEncoder(self.taxonomy)
        self.embedding_builder = UserEmbeddingBuilder(
            skill_encoder,
            ExperienceEncoder(),
            normalize_mode=settings.NORMALIZE_MODE,
        )

        # Conversation history
        self.conversations = ConversationStore(
            max_sessions=settings.MAX_SESSIONS,
            max_turns=settings.MAX_TURNS_PER_SESSION,
        )

        # Return a singleton UserService instance
        self.user_service = UserService(
            entities=self.entities,
            embedding_builder=self.embedding_builder,
            user_store=self.user_store,
        )

        # Return a singleton DocumentService instance
        self.document_service = DocumentService(
            document_store=self.document_store,
            encoder=self.document_encoder,
        )

        # Return a singleton SkillEmbeddingService instance
        self.skill_service = SkillEmbeddingService(
            encoder=self.skill_llm_encoder,
            entities=self.entities,
        )

        # Return a singleton AdvisorChatService instance
        self.chat_service = AdvisorChatService(
            entities=self.entities,
            embedding_builder=self.embedding_builder,
            user_store=self.user_store,
            document_store=self.document_store,
            conversations=self.conversations,
            completion=self.openai_chat,
        )

        # Smoke tests / health
        self.test_runner = TestRunner(
            stores=[self.user_store, self.document_store],
            chat_client=self.openai_chat,
        )
        self.health_service = AdvisorHealthService(test_runner=self.test_runner)

    def startup(self) -> None:
        """Index seeded users and optionally warm the skill cache."""
        self.user_service.index_all()
        if settings.WARM_UP_SKILLS:
            self.skill_service.warm_up(self.skills_path)


@lru_cache
def get_app_container() -> AppContainer:
    # Built on first use so importing the API does not need credentials
    container = AppContainer()
    container.startup()
    return container
