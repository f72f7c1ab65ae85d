from typing import List, Optional
from langchain_core.prompts import ChatPromptTemplate
from common.config import Config
from common.llm import run_structured_prompt, format_library_context
from common.models import ChecklistResult

generate_checklist_prompt = ChatPromptTemplate.from_messages([
    ("system", """You are an experienced litigation practitioner in {jurisdiction}.
Produce an ordered procedural checklist for the user's legal matter: the steps to take,
documents to gather, forums to approach, and limitation periods to watch.
Each item must be a single actionable step. Use the custom library where it is relevant.

Custom library:
{library}"""),
    ("user", "Legal matter: {query}")
])


async def generate_checklist(query: str, jurisdiction: str = None,
                             library_documents: Optional[List[str]] = None) -> ChecklistResult:
    output = await run_structured_prompt(
        generate_checklist_prompt, ChecklistResult,
        query=query, jurisdiction=jurisdiction or Config.DEFAULT_JURISDICTION,
        library=format_library_context(library_documents))
    return output or ChecklistResult()
