from typing import List, Optional
from langchain_core.prompts import ChatPromptTemplate
from common.llm import run_structured_prompt, format_library_context
from common.logging import logger
from common.models import LawsResult

identify_laws_prompt = ChatPromptTemplate.from_messages([
    ("system", """You are a legal expert specializing in Indian law.
Identify the statutes, sections, and constitutional articles that are potentially applicable to the user's legal query.
Each entry must name a single law, section, or article, e.g. "Section 420, Indian Penal Code, 1860".
Prefer the documents in the user's custom library when they are relevant.
If nothing applies, return an empty list. Do not invent provisions.

Custom library:
{library}"""),
    ("user", "Legal query: {query}")
])


async def identify_laws(query: str, library_documents: Optional[List[str]] = None) -> LawsResult:
    output = await run_structured_prompt(
        identify_laws_prompt, LawsResult,
        query=query, library=format_library_context(library_documents))
    result = output or LawsResult()
    logger.info(f"Identified {len(result.laws)} laws")
    return result
