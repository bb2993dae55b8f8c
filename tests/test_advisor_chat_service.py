# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-02-14
# Description: test_advisor_chat_service.py
# -----------------------------------------------------------------------------
import pytest

from conversation.ConversationStore import ROLE_ASSISTANT, ROLE_CALLER, ConversationStore, ConversationTurn
from embedding.FeatureEncoder import ExperienceEncoder, StaticSkillEncoder
from embedding.UserEmbeddingBuilder import UserEmbeddingBuilder
from entities.EntityRepository import InMemoryEntityRepository
from exceptions.AdvisorErrors import EntityNotFound, StoreUnavailable
from model.AdvisorUser import AdvisorUser
from ranking.types import CandidateRecord
from services.AdvisorChatService import AdvisorChatService
from services.StreamDeliveryCoordinator import QueueSink
from vectorstore.InMemoryCandidateStore import InMemoryCandidateStore


class _DownStore:
    name = "document_embedding"

    def query_nearest(self, vector, limit):
        raise StoreUnavailable(self.name, ConnectionError("refused"))


def _repo():
    return InMemoryEntityRepository(users=[
        AdvisorUser.from_dict({
            "user_id": 1, "first_name": "Asha", "last_name": "Rao", "role": "Founder",
            "skills": ["java", "management"],
            "experiences": [{"company_name": "Acme", "job_title": "CTO"}],
        }),
        AdvisorUser.from_dict({"user_id": 2, "first_name": "Ben", "last_name": "Ode", "skills": ["java"]}),
    ])


def _service(completion, *, document_store=None, **kwargs):
    user_store = InMemoryCandidateStore("user_embedding", 4)
    user_store.upsert(CandidateRecord(1, (0.5, 0.0, 0.5, 0.0), {"name": "Asha Rao"}))
    user_store.upsert(CandidateRecord(2, (1.0, 0.0, 0.0, 0.0), {"name": "Ben Ode", "role": "CTO"}))
    user_store.upsert(CandidateRecord(3, (0.0, 0.0, 0.0, 1.0), {"name": "Cleo Park"}))

    if document_store is None:
        document_store = InMemoryCandidateStore("document_embedding", 4)
        document_store.upsert(CandidateRecord("pricing", (0.5, 0.0, 0.5, 0.0),
                                              {"topic": "Pricing", "content": "Charge from day one."}))
        document_store.upsert(CandidateRecord("hiring", (0.0, 1.0, 0.0, 0.0),
                                              {"topic": "Hiring", "content": "Hire slowly."}))

    return AdvisorChatService(
        entities=_repo(),
        embedding_builder=UserEmbeddingBuilder(StaticSkillEncoder(), ExperienceEncoder()),
        user_store=user_store,
        document_store=document_store,
        conversations=ConversationStore(),
        completion=completion,
        **kwargs,
    )


def test_build_prompt_contains_all_context_fragments(fake_completion):
    svc = _service(fake_completion)
    prompt = svc.build_prompt(1, "How do I raise a seed round?")

    assert "VENKAT" in prompt
    assert "Name: Asha Rao" in prompt
    assert "Skills: java, management" in prompt
    assert "CTO at Acme" in prompt
    assert "User ID: 2 (Ben Ode, CTO)" in prompt
    assert "Document ID: pricing, Topic: Pricing" in prompt
    assert "User: How do I raise a seed round?" in prompt
    assert prompt.rstrip().endswith("How do I raise a seed round?")


def test_subject_user_is_excluded_from_similar_users(fake_completion):
    svc = _service(fake_completion)
    prompt = svc.build_prompt(1, "hello")
    similar = prompt.split("SIMILAR USERS:")[1].split("RELEVANT DOCUMENTS:")[0]
    assert "User ID: 1 " not in similar
    assert "User ID: 2" in similar and "User ID: 3" in similar


def test_missing_user_fails_fast_without_touching_history(fake_completion):
    svc = _service(fake_completion)
    with pytest.raises(EntityNotFound):
        svc.build_prompt(99, "hello")
    assert svc.conversations.session_count() == 0
    assert fake_completion.prompts == []


def test_unavailable_store_degrades_to_empty_context(fake_completion):
    svc = _service(fake_completion, document_store=_DownStore())
    prompt = svc.build_prompt(1, "hello")
    documents = prompt.split("RELEVANT DOCUMENTS:")[1].split("CONVERSATION HISTORY:")[0]
    assert "(none)" in documents


def test_get_response_records_both_turns(fake_completion_factory):
    completion = fake_completion_factory(replies=["Focus on distribution."])
    svc = _service(completion)

    answer = svc.get_response("What should I focus on?", 1)

    assert answer == "Focus on distribution."
    turns = svc.history(1)
    assert [(t.role, t.text) for t in turns] == [
        (ROLE_CALLER, "What should I focus on?"),
        (ROLE_ASSISTANT, "Focus on distribution."),
    ]


def test_second_prompt_includes_previous_exchange(fake_completion_factory):
    completion = fake_completion_factory(replies=["First answer.", "Second answer."])
    svc = _service(completion)

    svc.get_response("first question", 1)
    svc.get_response("second question", 1)

    second_prompt = completion.prompts[1]
    assert "User: first question" in second_prompt
    assert "Venkat: First answer." in second_prompt
    assert "User: second question" in second_prompt


def test_documents_survive_a_long_history(fake_completion_factory):
    completion = fake_completion_factory(replies=["x" * 3950] * 5)
    svc = _service(completion, max_context_chars=12000)
    for i in range(5):
        svc.get_response(f"question {i}", 1)

    prompt = svc.build_prompt(1, "what about pricing?")
    documents = prompt.split("RELEVANT DOCUMENTS:")[1].split("CONVERSATION HISTORY:")[0]
    history = prompt.split("CONVERSATION HISTORY:")[1].split("CURRENT QUERY:")[0]

    assert "Charge from day one." in documents
    assert "Hire slowly." in documents
    assert "User: what about pricing?" in history
    assert len(documents.strip()) + len(history.strip()) <= 12000


def test_history_uses_budget_documents_leave_unused(fake_completion):
    svc = _service(fake_completion, max_context_chars=1000, document_context_share=0.5)
    for i in range(20):
        svc.conversations.append(1, ConversationTurn.caller(f"old message {i:02d} " + "y" * 30))

    prompt = svc.build_prompt(1, "latest")
    history = prompt.split("CONVERSATION HISTORY:")[1].split("CURRENT QUERY:")[0].strip()

    # both documents are short, so the transcript gets well over half the budget
    assert len(history) > 500
    assert "Charge from day one." in prompt


def test_tiny_budget_still_keeps_current_message(fake_completion):
    svc = _service(fake_completion, max_context_chars=40)
    prompt = svc.build_prompt(1, "a question that must survive")

    assert "User: a question that must survive" in prompt
    assert "Document ID:" not in prompt


def test_history_keeps_most_recent_turns_within_budget(fake_completion):
    svc = _service(fake_completion, max_context_chars=200)
    for i in range(30):
        svc.conversations.append(1, ConversationTurn.caller(f"old message {i:02d}"))

    prompt = svc.build_prompt(1, "latest")
    history = prompt.split("CONVERSATION HISTORY:")[1].split("CURRENT QUERY:")[0]
    assert "User: latest" in history
    assert "old message 00" not in history
    assert "old message 29" in history


def test_empty_query_rejected(fake_completion):
    svc = _service(fake_completion)
    with pytest.raises(ValueError):
        svc.build_prompt(1, "   ")


def test_stream_response_persists_answer_on_completion(fake_completion_factory):
    completion = fake_completion_factory(chunks=["Raise ", "from ", "angels."])
    svc = _service(completion)
    sink = QueueSink(maxsize=8, put_timeout=2.0)

    handle = svc.stream_response("How do I raise?", 1, sink)
    events = list(sink.events())
    assert handle.join(timeout=5.0)

    assert [k for k, _ in events] == ["delta", "delta", "delta", "done"]
    assert "".join(p.text for k, p in events if k == "delta") == "Raise from angels."
    assert svc.history(1)[-1].text == "Raise from angels."
    assert svc.history(1)[-1].role == ROLE_ASSISTANT


def test_stream_response_missing_user_raises_to_caller(fake_completion):
    svc = _service(fake_completion)
    with pytest.raises(EntityNotFound):
        svc.stream_response("hello", 404, QueueSink())
