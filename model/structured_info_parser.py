from langchain_core.prompts import ChatPromptTemplate
from agents.citation.citation_service import enhance_citations, is_usable_citation
from common.llm import run_structured_prompt
from common.logging import logger
from common.models import StructuredLegalInfo

parse_structured_legal_info_prompt = ChatPromptTemplate.from_messages([
    ("system", """You are an expert text processing AI. Your task is to parse raw text, which is an output from another AI assistant.
The text contains information about applicable laws, similar legal precedents, and a procedural checklist.
Extract this information and structure it strictly according to the JSON schema provided for your output.

Ensure the following:
- "laws" should be an array of strings, where each string is a distinct law, section, or article.
- "precedents" should be an array of objects. Each object must have "case_name", "citation", and "summary". It can optionally have "differences".
- "checklist" should be an array of strings, where each string is a distinct procedural step.

If any section is missing or cannot be reliably extracted from the text, return an empty array for that section. Do not invent information."""),
    ("user", "Raw text to parse:\n{raw_text}")
])


async def parse_structured_legal_info_flow(raw_text: str) -> StructuredLegalInfo:
    if not raw_text.strip():
        return StructuredLegalInfo()
    try:
        output = await run_structured_prompt(
            parse_structured_legal_info_prompt, StructuredLegalInfo, temperature=0.0, raw_text=raw_text)
    except Exception as e:
        logger.error(f"Error parsing structured legal info: {e}")
        return StructuredLegalInfo()
    return output or StructuredLegalInfo()


async def parse_structured_legal_info(raw_text: str) -> StructuredLegalInfo:
    """Extract laws, precedents and checklist from free text.

    Precedent citations are then looked up again by case name; a looked-up
    citation replaces the extracted one only when the lookup succeeded.
    """
    parsed = await parse_structured_legal_info_flow(raw_text)
    if not parsed.precedents:
        return parsed

    citation_map = await enhance_citations([p.case_name for p in parsed.precedents])

    enhanced_precedents = []
    replaced = 0
    for precedent in parsed.precedents:
        enhanced_citation = citation_map.get(precedent.case_name)
        if is_usable_citation(enhanced_citation):
            precedent = precedent.model_copy(update={"citation": enhanced_citation})
            replaced += 1
        enhanced_precedents.append(precedent)

    logger.info(f"Parsed {len(parsed.laws)} laws, {len(enhanced_precedents)} precedents "
                f"({replaced} citations enhanced), {len(parsed.checklist)} checklist items")
    return parsed.model_copy(update={"precedents": enhanced_precedents})
