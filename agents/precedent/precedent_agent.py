from typing import List, Optional
from langchain_core.prompts import ChatPromptTemplate
from pydantic import BaseModel, Field
from common.llm import run_structured_prompt, format_library_context
from common.logging import logger
from common.models import Precedent, PrecedentsResult

CUSTOM_LIBRARY_SOURCE = "Custom Library"
MODEL_KNOWLEDGE_SOURCE = "AI Knowledge Base"


class RetrievedPrecedents(BaseModel):
    precedents: List[Precedent] = Field(default_factory=list)


retrieve_precedent_prompt = ChatPromptTemplate.from_messages([
    ("system", """You are a legal research assistant specializing in Indian case law.
Find past court cases that are relevant to the user's legal question.
For every case give the case name, its citation, a brief summary of the case and its relevance,
and, where notable, the key differences between that case and the user's situation.
{source_instruction}
If no relevant precedent can be found, return an empty list. Do not fabricate cases.

Custom library:
{library}"""),
    ("user", "Legal question: {legal_question}")
])


async def retrieve_precedent(legal_question: str, use_custom_library: bool = False,
                             library_documents: Optional[List[str]] = None) -> PrecedentsResult:
    if use_custom_library:
        source_instruction = "Only use cases that appear in the custom library below."
        library = format_library_context(library_documents)
        source_type = CUSTOM_LIBRARY_SOURCE
    else:
        source_instruction = "Use your knowledge of reported Indian judgments."
        library = "(not used)"
        source_type = MODEL_KNOWLEDGE_SOURCE

    output = await run_structured_prompt(
        retrieve_precedent_prompt, RetrievedPrecedents,
        legal_question=legal_question, source_instruction=source_instruction, library=library)
    precedents = output.precedents if output else []
    logger.info(f"Retrieved {len(precedents)} precedents from {source_type}")
    return PrecedentsResult(precedents=precedents, source_type=source_type)
