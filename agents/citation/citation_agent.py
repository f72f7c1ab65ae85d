from langchain_core.prompts import ChatPromptTemplate
from common.llm import run_structured_prompt
from common.models import EnhanceCitationOutput

CITATION_NOT_FOUND = "Citation not found"

enhance_citation_prompt = ChatPromptTemplate.from_messages([
    ("system", """You are a legal citation expert specializing in Indian court cases.

Your task is to provide the full and accurate citation for the Indian court case named by the user.

Please return ONLY the citation in the standard Indian legal citation format.
If you cannot find the exact citation, provide the most likely citation format based on similar cases.
Do not include explanations or additional text - only return the citation itself."""),
    ("user", "{case_name}")
])


async def enhance_citation_flow(case_name: str) -> EnhanceCitationOutput:
    output = await run_structured_prompt(
        enhance_citation_prompt, EnhanceCitationOutput, temperature=0.0, case_name=case_name)
    return output or EnhanceCitationOutput(citation=CITATION_NOT_FOUND)
