import asyncio
from typing import Any, Awaitable, List, Optional

from agents.checklist.checklist_agent import generate_checklist
from agents.laws.laws_agent import identify_laws
from agents.precedent.precedent_agent import retrieve_precedent
from agents.summary.summarization_agent import summarize_document
from common.autorag_api import autorag_api
from common.config import Config
from common.logging import logger
from common.models import (
    ChecklistResult, LawsResult, Notice, NoticeVariant, PrecedentsResult,
    QueryHistoryEntry, QueryStatus, SessionSnapshot, UserContext
)
from model.history_model import save_query_history
from model.library_model import add_document_to_custom_library, get_library_documents
from model.structured_info_parser import parse_structured_legal_info

AUTORAG_SOURCE = "Cloudflare AutoRAG"


class AssistantSession:
    """State of one user's assistant screen: the query, its three result
    sections, the document summary, and the notices raised along the way.

    A query moves idle -> processing -> success | error. Whatever happens,
    ``is_processing`` is cleared when the query finishes so input is accepted again.
    """

    def __init__(self, user: Optional[UserContext] = None):
        self.user = user
        self.query = ""
        self.status = QueryStatus.IDLE
        self.is_processing = False
        self.laws_result: Optional[LawsResult] = None
        self.precedents_result: Optional[PrecedentsResult] = None
        self.checklist_result: Optional[ChecklistResult] = None
        self.summary_result = None
        self.is_summarizing = False
        self.is_adding_to_library = False
        self.history_id: Optional[str] = None
        self.notices: List[Notice] = []

    def notify(self, title: str, description: str, destructive: bool = False) -> None:
        variant = NoticeVariant.DESTRUCTIVE if destructive else NoticeVariant.DEFAULT
        self.notices.append(Notice(title=title, description=description, variant=variant))

    def has_content(self) -> bool:
        return bool(
            (self.laws_result and self.laws_result.laws)
            or (self.precedents_result and self.precedents_result.precedents)
            or (self.checklist_result and self.checklist_result.checklist)
        )

    def snapshot(self) -> SessionSnapshot:
        return SessionSnapshot(
            query=self.query,
            status=self.status,
            is_processing=self.is_processing,
            laws_result=self.laws_result,
            precedents_result=self.precedents_result,
            checklist_result=self.checklist_result,
            summary_result=self.summary_result,
            history_id=self.history_id,
            notices=list(self.notices),
        )

    async def get_insights(self, query: str, use_custom_library: bool = False) -> SessionSnapshot:
        self.query = query
        if not query.strip():
            self.notify("Input Required", "Please enter a legal query.", destructive=True)
            return self.snapshot()

        self.status = QueryStatus.PROCESSING
        self.is_processing = True
        self.laws_result = None
        self.precedents_result = None
        self.checklist_result = None
        self.history_id = None

        try:
            if use_custom_library:
                await self._insights_from_custom_library(query)
            else:
                await self._insights_from_autorag(query)

            if self.user and self.user.is_demo:
                self.notify("Demo Complete",
                            "Sign in to continue using NYAI and save your query history.")
        except Exception as e:
            logger.error("Error processing query: %s", e)
            self.status = QueryStatus.ERROR
            self.notify("Error", str(e) or "An unknown error occurred.", destructive=True)
        finally:
            self.is_processing = False

        return self.snapshot()

    async def _guarded(self, flow: Awaitable[Any], label: str, title: str) -> Optional[Any]:
        """Run one fan-out flow; a failure is reported and becomes no result."""
        try:
            return await flow
        except Exception as e:
            logger.error("Error %s (custom): %s", label, e)
            self.notify(title, str(e) or "An unknown error occurred.", destructive=True)
            return None

    async def _insights_from_custom_library(self, query: str) -> None:
        library = await get_library_documents(self.user.user_id) if self.user else []

        laws, precedents, checklist = await asyncio.gather(
            self._guarded(identify_laws(query, library),
                          "identifying laws", "Error Identifying Laws"),
            self._guarded(retrieve_precedent(query, use_custom_library=True, library_documents=library),
                          "retrieving precedents", "Error Retrieving Precedents"),
            self._guarded(generate_checklist(query, Config.DEFAULT_JURISDICTION, library),
                          "generating checklist", "Error Generating Checklist"),
        )

        self.laws_result = laws
        self.precedents_result = precedents
        self.checklist_result = checklist

        if laws or precedents or checklist:
            self.status = QueryStatus.SUCCESS
            self.notify("Insights Generated (Custom Library)",
                        "Legal insights from your library have been processed.")
        else:
            self.status = QueryStatus.ERROR
            self.notify("No Insights (Custom Library)",
                        "Could not generate insights from your custom library.", destructive=True)

        await self._save_history()

    async def _insights_from_autorag(self, query: str) -> None:
        retrieval = await autorag_api.fetch(query)

        if retrieval.type == "error":
            logger.error("Cloudflare RAG Error: %s %s", retrieval.message, retrieval.details)
            self.status = QueryStatus.ERROR
            self.notify("Cloudflare RAG Error", retrieval.message, destructive=True)
            return

        if not retrieval.raw_text_response.strip():
            self.status = QueryStatus.ERROR
            self.notify("Empty Response from Cloudflare",
                        "Cloudflare AutoRAG returned an empty response.", destructive=True)
            self.laws_result = LawsResult()
            self.precedents_result = PrecedentsResult(source_type=f"{AUTORAG_SOURCE} (Empty)")
            self.checklist_result = ChecklistResult()
            return

        parsed = await parse_structured_legal_info(retrieval.raw_text_response)

        self.laws_result = LawsResult(laws=parsed.laws)
        self.precedents_result = PrecedentsResult(precedents=parsed.precedents, source_type=AUTORAG_SOURCE)
        self.checklist_result = ChecklistResult(checklist=parsed.checklist)

        if self.has_content():
            self.status = QueryStatus.SUCCESS
            self.notify("Insights Generated (Cloudflare)",
                        "Legal insights via Cloudflare AutoRAG have been processed.")
        else:
            self.status = QueryStatus.ERROR
            self.notify("No Structured Insights (Cloudflare)",
                        "Could not structure insights from Cloudflare response. The raw response "
                        "might be incomplete or not in the expected format.", destructive=True)

        await self._save_history()

    async def _save_history(self) -> None:
        # Best effort: the results are already on screen
        if not self.user or self.user.is_demo or not self.has_content():
            return
        try:
            self.history_id = await save_query_history(QueryHistoryEntry(
                user_id=self.user.user_id,
                query=self.query,
                laws_result=self.laws_result,
                precedents_result=self.precedents_result,
                checklist_result=self.checklist_result,
            ))
        except Exception as e:
            logger.error("Error saving query history: %s", e)

    def restore_from_history(self, entry: QueryHistoryEntry) -> SessionSnapshot:
        self.query = entry.query
        if entry.laws_result:
            self.laws_result = entry.laws_result
        if entry.precedents_result:
            self.precedents_result = entry.precedents_result
        if entry.checklist_result:
            self.checklist_result = entry.checklist_result
        self.history_id = entry.id
        return self.snapshot()

    async def summarize(self, document_text: str) -> SessionSnapshot:
        if not document_text.strip():
            self.notify("Input Required", "Please upload or paste a document to summarize.",
                        destructive=True)
            return self.snapshot()

        self.is_summarizing = True
        self.summary_result = None
        try:
            self.summary_result = await summarize_document(document_text)
            self.notify("Document Summarized", "The document has been successfully summarized.")
        except Exception as e:
            logger.error("Error summarizing document: %s", e)
            self.notify("Summarization Error", str(e) or "Failed to summarize the document.",
                        destructive=True)
        finally:
            self.is_summarizing = False
        return self.snapshot()

    async def add_to_library(self, document_text: Optional[str]) -> SessionSnapshot:
        if not self.user:
            self.notify("Authentication Required", "Please sign in to build your library.",
                        destructive=True)
            return self.snapshot()
        if not document_text or not document_text.strip():
            self.notify("No Content", "Please select a document file and ensure it has content.",
                        destructive=True)
            return self.snapshot()

        self.is_adding_to_library = True
        try:
            result = await add_document_to_custom_library(self.user.user_id, document_text)
            self.notify("Library Updated",
                        f"{result.message} Library now contains {result.library_size} document(s).")
        except Exception as e:
            logger.error("Error adding document to custom library: %s", e)
            self.notify("Error Adding Document", str(e) or "Failed to add document.",
                        destructive=True)
        finally:
            self.is_adding_to_library = False
        return self.snapshot()
