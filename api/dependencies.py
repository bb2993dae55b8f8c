# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-02-11
# Description: dependencies.py
# -----------------------------------------------------------------------------
from api.AppContainer import get_app_container
from services.AdvisorChatService import AdvisorChatService
from services.AdvisorHealthService import AdvisorHealthService
from services.DocumentService import DocumentService
from services.SkillEmbeddingService import SkillEmbeddingService
from services.UserService import UserService


def get_health_service() -> AdvisorHealthService:
    # use the singleton service from the container
    return get_app_container().health_service


def get_chat_service() -> AdvisorChatService:
    return get_app_container().chat_service


def get_user_service() -> UserService:
    return get_app_container().user_service


def get_document_service() -> DocumentService:
    return get_app_container().document_service


def get_skill_service() -> SkillEmbeddingService:
    return get_app_container().skill_service
