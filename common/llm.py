"""Chat model construction and schema-constrained prompt execution."""
from functools import lru_cache
from typing import Optional, Type, TypeVar

from langchain_core.prompts import ChatPromptTemplate
from langchain_openai import ChatOpenAI
from pydantic import BaseModel

from common.config import Config

T = TypeVar("T", bound=BaseModel)


@lru_cache(maxsize=8)
def get_llm(temperature: Optional[float] = None) -> ChatOpenAI:
    """Build the chat model on first use so importing a flow needs no API key."""
    if not Config.API_KEY:
        raise ValueError("OPENAI_API_KEY not configured")
    return ChatOpenAI(
        model=Config.MODEL_NAME,
        temperature=Config.TEMPERATURE if temperature is None else temperature,
        api_key=Config.API_KEY,
        base_url=Config.API_BASE_URL,
        timeout=Config.LLM_TIMEOUT,
    )


async def run_structured_prompt(prompt: ChatPromptTemplate, schema: Type[T],
                                temperature: Optional[float] = None, **variables) -> Optional[T]:
    """Render ``prompt`` with ``variables`` and validate the reply against ``schema``.

    Returns None when the model produced no structured output.
    """
    chain = prompt | get_llm(temperature).with_structured_output(schema)
    return await chain.ainvoke(variables)


def format_library_context(documents: list) -> str:
    if not documents:
        return "(The custom library is empty.)"
    return "\n\n".join(
        f"--- Document {i + 1} ---\n{doc}" for i, doc in enumerate(documents))
