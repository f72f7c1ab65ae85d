import asyncio
from crewai import Agent, Crew, Task, LLM
from common.config import Config
from common.logging import logger
from common.models import SummaryResult

MAX_DOCUMENT_CHARS = 12000


def build_summarization_agent() -> Agent:
    if not Config.API_KEY:
        raise ValueError("OPENAI_API_KEY not configured")
    llm = LLM(model=Config.MODEL_NAME, temperature=Config.TEMPERATURE,
              api_key=Config.API_KEY, base_url=Config.API_BASE_URL)

    return Agent(
        role="Legal Document Simplification Specialist",
        goal="""Turn a single legal document into a short summary a layperson can follow, including:
    - What the document is and who the parties are
    - The obligations, rights, or findings it sets out
    - Deadlines, amounts, and other figures that matter
    - Anything the reader should act on""",
        backstory="""You are an Indian advocate who spends much of your practice explaining
    contracts, notices, pleadings, and judgments to clients without legal training.
    You keep every legally significant detail while replacing jargon with plain language,
    and you never add facts that are not in the document.""",
        llm=llm,
        verbose=False
    )


async def summarize_document(document_text: str) -> SummaryResult:
    agent = build_summarization_agent()
    task = Task(
        description=f"Summarize the following legal document in plain language. Document text: {document_text[:MAX_DOCUMENT_CHARS]}",
        agent=agent,
        expected_output="A plain-language summary of the document in a few short paragraphs"
    )
    crew = Crew(agents=[agent], tasks=[task], verbose=False)

    # kickoff blocks, keep it off the event loop
    result = await asyncio.to_thread(crew.kickoff)
    summary = str(result.raw) if hasattr(result, 'raw') else str(result)
    logger.info(f"Summarized document of {len(document_text)} characters")
    return SummaryResult(summary=summary.strip())
