"""Tests for the assistant session state machine."""

import asyncio

import pytest

from common.db import MongoDB
from common.models import (
    AddDocumentOutput,
    ChecklistResult,
    LawsResult,
    NoticeVariant,
    Precedent,
    PrecedentsResult,
    QueryHistoryEntry,
    QueryStatus,
    RetrievalError,
    RetrievalSuccess,
    StructuredLegalInfo,
    SummaryResult,
)
from controller import orchestrator
from controller.orchestrator import AssistantSession

QUERY = "My landlord refuses to return the security deposit after I vacated."

PARSED = StructuredLegalInfo(
    laws=["Section 108, Transfer of Property Act, 1882"],
    precedents=[Precedent(case_name="A v. B", citation="(2001) 1 SCC 1", summary="Deposit refund.")],
    checklist=["Send a legal notice", "File a suit for recovery"],
)


def titles(snapshot):
    return [n.title for n in snapshot.notices]


@pytest.fixture
def retrieval(monkeypatch):
    state = {"result": RetrievalSuccess(raw_text_response="Laws... Precedents... Checklist..."),
             "calls": []}

    async def fetch(user_query):
        state["calls"].append(user_query)
        return state["result"]

    monkeypatch.setattr(orchestrator.autorag_api, "fetch", fetch)
    return state


@pytest.fixture
def parser(monkeypatch):
    state = {"result": PARSED, "calls": []}

    async def parse(raw_text):
        state["calls"].append(raw_text)
        return state["result"]

    monkeypatch.setattr(orchestrator, "parse_structured_legal_info", parse)
    return state


@pytest.fixture
def flows(monkeypatch):
    state = {"fail": set(), "calls": {}}

    def make(name, result):
        async def flow(*args, **kwargs):
            state["calls"][name] = (args, kwargs)
            if name in state["fail"]:
                raise RuntimeError(f"{name} failed")
            return result
        return flow

    monkeypatch.setattr(orchestrator, "identify_laws",
                        make("laws", LawsResult(laws=["Article 21"])))
    monkeypatch.setattr(orchestrator, "retrieve_precedent",
                        make("precedents", PrecedentsResult(precedents=PARSED.precedents)))
    monkeypatch.setattr(orchestrator, "generate_checklist",
                        make("checklist", ChecklistResult(checklist=["Step 1"])))
    return state


class TestValidation:
    @pytest.mark.parametrize("query", ["", "   "])
    def test_blank_query_makes_no_calls(self, retrieval, parser, query):
        session = AssistantSession()
        snapshot = asyncio.run(session.get_insights(query))

        assert titles(snapshot) == ["Input Required"]
        assert snapshot.notices[0].variant == NoticeVariant.DESTRUCTIVE
        assert snapshot.status == QueryStatus.IDLE
        assert retrieval["calls"] == []
        assert parser["calls"] == []


class TestAutoRAGPath:
    def test_retrieval_error_skips_parser(self, fake_db, retrieval, parser, user):
        retrieval["result"] = RetrievalError(message="Upstream returned 502", details={"code": 502})
        session = AssistantSession(user)
        snapshot = asyncio.run(session.get_insights(QUERY))

        assert parser["calls"] == []
        assert snapshot.is_processing is False
        assert snapshot.status == QueryStatus.ERROR
        assert titles(snapshot) == ["Cloudflare RAG Error"]
        assert snapshot.notices[0].description == "Upstream returned 502"
        assert fake_db(MongoDB.HISTORY).docs == []

    def test_empty_response_sets_empty_results(self, fake_db, retrieval, parser, user):
        retrieval["result"] = RetrievalSuccess(raw_text_response="   ")
        snapshot = asyncio.run(AssistantSession(user).get_insights(QUERY))

        assert parser["calls"] == []
        assert snapshot.laws_result == LawsResult()
        assert snapshot.precedents_result.precedents == []
        assert snapshot.precedents_result.source_type == "Cloudflare AutoRAG (Empty)"
        assert snapshot.checklist_result == ChecklistResult()
        assert titles(snapshot) == ["Empty Response from Cloudflare"]
        assert snapshot.is_processing is False
        assert fake_db(MongoDB.HISTORY).docs == []

    def test_success_populates_sections_and_saves_history(self, fake_db, retrieval, parser, user):
        session = AssistantSession(user)
        snapshot = asyncio.run(session.get_insights(QUERY))

        assert parser["calls"] == ["Laws... Precedents... Checklist..."]
        assert snapshot.status == QueryStatus.SUCCESS
        assert snapshot.laws_result.laws == PARSED.laws
        assert snapshot.precedents_result.precedents == PARSED.precedents
        assert snapshot.precedents_result.source_type == "Cloudflare AutoRAG"
        assert snapshot.checklist_result.checklist == PARSED.checklist
        assert titles(snapshot) == ["Insights Generated (Cloudflare)"]

        docs = fake_db(MongoDB.HISTORY).docs
        assert len(docs) == 1
        assert docs[0]["user_id"] == "user-1"
        assert docs[0]["query"] == QUERY
        assert snapshot.history_id == str(docs[0]["_id"])

    def test_unstructured_response_reports_no_insights(self, fake_db, retrieval, parser, user):
        parser["result"] = StructuredLegalInfo()
        snapshot = asyncio.run(AssistantSession(user).get_insights(QUERY))

        assert snapshot.status == QueryStatus.ERROR
        assert titles(snapshot) == ["No Structured Insights (Cloudflare)"]
        assert fake_db(MongoDB.HISTORY).docs == []

    def test_anonymous_user_is_not_persisted(self, fake_db, retrieval, parser):
        snapshot = asyncio.run(AssistantSession().get_insights(QUERY))
        assert snapshot.status == QueryStatus.SUCCESS
        assert fake_db(MongoDB.HISTORY).docs == []

    def test_demo_user_is_not_persisted(self, fake_db, retrieval, parser, demo_user):
        snapshot = asyncio.run(AssistantSession(demo_user).get_insights(QUERY))

        assert fake_db(MongoDB.HISTORY).docs == []
        assert titles(snapshot)[-1] == "Demo Complete"

    def test_history_failure_is_silent(self, fake_db, retrieval, parser, user):
        fake_db(MongoDB.HISTORY).fail_inserts = True
        snapshot = asyncio.run(AssistantSession(user).get_insights(QUERY))

        assert snapshot.status == QueryStatus.SUCCESS
        assert snapshot.laws_result.laws == PARSED.laws
        assert titles(snapshot) == ["Insights Generated (Cloudflare)"]
        assert snapshot.history_id is None

    def test_previous_results_are_cleared(self, fake_db, retrieval, parser, user):
        session = AssistantSession(user)
        asyncio.run(session.get_insights(QUERY))
        retrieval["result"] = RetrievalError(message="down")
        snapshot = asyncio.run(session.get_insights(QUERY))

        assert snapshot.laws_result is None
        assert snapshot.precedents_result is None
        assert snapshot.checklist_result is None

    def test_unexpected_error_ends_in_error_state(self, monkeypatch, retrieval, user):
        async def explode(raw_text):
            raise RuntimeError("boom")

        monkeypatch.setattr(orchestrator, "parse_structured_legal_info", explode)
        snapshot = asyncio.run(AssistantSession(user).get_insights(QUERY))

        assert snapshot.status == QueryStatus.ERROR
        assert snapshot.is_processing is False
        assert titles(snapshot) == ["Error"]


class TestCustomLibraryPath:
    def test_runs_all_three_flows(self, fake_db, flows, retrieval, user):
        fake_db(MongoDB.LIBRARY).insert_one({"user_id": "user-1", "text": "Judgment text", "timestamp": 1})
        snapshot = asyncio.run(AssistantSession(user).get_insights(QUERY, use_custom_library=True))

        assert retrieval["calls"] == []
        assert set(flows["calls"]) == {"laws", "precedents", "checklist"}
        assert flows["calls"]["precedents"][1]["use_custom_library"] is True
        assert flows["calls"]["precedents"][1]["library_documents"] == ["Judgment text"]
        assert flows["calls"]["checklist"][0][1] == "India"
        assert snapshot.status == QueryStatus.SUCCESS
        assert titles(snapshot) == ["Insights Generated (Custom Library)"]
        assert len(fake_db(MongoDB.HISTORY).docs) == 1

    def test_one_failure_does_not_cancel_siblings(self, fake_db, flows, user):
        flows["fail"].add("precedents")
        snapshot = asyncio.run(AssistantSession(user).get_insights(QUERY, use_custom_library=True))

        assert snapshot.laws_result.laws == ["Article 21"]
        assert snapshot.precedents_result is None
        assert snapshot.checklist_result.checklist == ["Step 1"]
        assert "Error Retrieving Precedents" in titles(snapshot)
        assert snapshot.status == QueryStatus.SUCCESS

        saved = fake_db(MongoDB.HISTORY).docs[0]
        assert saved["precedents_result"] is None
        assert saved["laws_result"] == {"laws": ["Article 21"]}

    def test_all_failures_report_no_insights(self, fake_db, flows, user):
        flows["fail"].update({"laws", "precedents", "checklist"})
        snapshot = asyncio.run(AssistantSession(user).get_insights(QUERY, use_custom_library=True))

        assert snapshot.status == QueryStatus.ERROR
        assert titles(snapshot) == [
            "Error Identifying Laws",
            "Error Retrieving Precedents",
            "Error Generating Checklist",
            "No Insights (Custom Library)",
        ]
        assert snapshot.is_processing is False
        assert fake_db(MongoDB.HISTORY).docs == []

    def test_anonymous_user_gets_empty_library(self, fake_db, flows):
        asyncio.run(AssistantSession().get_insights(QUERY, use_custom_library=True))
        assert flows["calls"]["laws"][0] == (QUERY, [])


class TestRestore:
    def test_restore_from_history(self):
        entry = QueryHistoryEntry(
            id="abc123",
            user_id="user-1",
            query="Old query",
            laws_result=LawsResult(laws=["Article 14"]),
            checklist_result=ChecklistResult(checklist=["Step"]),
        )
        session = AssistantSession()
        snapshot = session.restore_from_history(entry)

        assert snapshot.query == "Old query"
        assert snapshot.laws_result.laws == ["Article 14"]
        assert snapshot.precedents_result is None
        assert snapshot.history_id == "abc123"


class TestSummarize:
    def test_blank_document(self, monkeypatch):
        async def must_not_run(text):
            raise AssertionError

        monkeypatch.setattr(orchestrator, "summarize_document", must_not_run)
        snapshot = asyncio.run(AssistantSession().summarize("  "))
        assert titles(snapshot) == ["Input Required"]
        assert snapshot.summary_result is None

    def test_summary_success(self, monkeypatch):
        async def summarize(text):
            return SummaryResult(summary="A rent agreement for 11 months.")

        monkeypatch.setattr(orchestrator, "summarize_document", summarize)
        session = AssistantSession()
        snapshot = asyncio.run(session.summarize("This agreement is made..."))

        assert snapshot.summary_result.summary == "A rent agreement for 11 months."
        assert titles(snapshot) == ["Document Summarized"]
        assert session.is_summarizing is False

    def test_summary_failure(self, monkeypatch):
        async def summarize(text):
            raise RuntimeError("model overloaded")

        monkeypatch.setattr(orchestrator, "summarize_document", summarize)
        snapshot = asyncio.run(AssistantSession().summarize("text"))

        assert snapshot.summary_result is None
        assert titles(snapshot) == ["Summarization Error"]
        assert snapshot.notices[0].description == "model overloaded"


class TestLibrary:
    def test_requires_user(self, fake_db):
        snapshot = asyncio.run(AssistantSession().add_to_library("text"))
        assert titles(snapshot) == ["Authentication Required"]

    def test_requires_content(self, fake_db, user):
        snapshot = asyncio.run(AssistantSession(user).add_to_library(""))
        assert titles(snapshot) == ["No Content"]
        assert fake_db(MongoDB.LIBRARY).docs == []

    def test_adds_document(self, fake_db, user):
        session = AssistantSession(user)
        asyncio.run(session.add_to_library("First judgment"))
        snapshot = asyncio.run(session.add_to_library("Second judgment"))

        assert snapshot.notices[-1].title == "Library Updated"
        assert "Library now contains 2 document(s)." in snapshot.notices[-1].description

    def test_failure_is_reported(self, monkeypatch, user):
        async def broken(user_id, text):
            raise RuntimeError("quota exceeded")

        monkeypatch.setattr(orchestrator, "add_document_to_custom_library", broken)
        snapshot = asyncio.run(AssistantSession(user).add_to_library("text"))
        assert titles(snapshot) == ["Error Adding Document"]
