"""
Expense categorization through a labeling oracle.
The resolver never raises: any failure or unknown reply maps to "Other".
"""
import asyncio
from typing import Optional, Protocol

from core.logger import setup_logger
from core.schema import CATEGORIES, DEFAULT_CATEGORY
from llm.client import get_client
from llm.prompts import build_messages

logger = setup_logger(__name__)

_CATEGORY_LOOKUP = {name.lower(): name for name in CATEGORIES}


class CategoryOracle(Protocol):
    """Anything that can label a transaction with a category name."""

    def label(self, description: str, amount: float) -> str:
        ...


class LLMCategoryOracle:
    """Labels transactions through the chat completions gateway."""

    def __init__(self, temperature: float = 0.3, max_tokens: int = 10):
        self.temperature = temperature
        self.max_tokens = max_tokens

    def label(self, description: str, amount: float) -> str:
        client = get_client()
        return client.complete(
            build_messages(description, amount),
            temperature=self.temperature,
            max_tokens=self.max_tokens,
        )


def coerce_category(reply: Optional[str]) -> str:
    """
    Map an oracle reply onto the closed category set.

    Matching is deliberately lenient: case is ignored and wrapping quotes
    or a trailing period are removed, so "food." maps to "Food". Any other
    text, including near misses like "Groceries", maps to "Other".

    Args:
        reply: Raw reply text

    Returns:
        Canonical category name, or "Other" if the reply is not one
    """
    if not isinstance(reply, str):
        return DEFAULT_CATEGORY
    cleaned = reply.strip().strip("\"'`").rstrip(".").strip()
    return _CATEGORY_LOOKUP.get(cleaned.lower(), DEFAULT_CATEGORY)


async def resolve_category(
    description: str,
    amount: float,
    oracle: CategoryOracle,
    timeout: float,
) -> str:
    """
    Ask the oracle for a category with a bounded wait.

    Args:
        description: Transaction narration
        amount: Transaction amount
        oracle: Labeling oracle
        timeout: Seconds to wait before falling back

    Returns:
        Member of the closed category set
    """
    loop = asyncio.get_running_loop()
    try:
        reply = await asyncio.wait_for(
            loop.run_in_executor(None, oracle.label, description, amount),
            timeout=timeout,
        )
    except asyncio.TimeoutError:
        logger.warning(f"Categorization timed out after {timeout}s for '{description}'")
        return DEFAULT_CATEGORY
    except Exception as e:
        logger.warning(f"Categorization failed for '{description}': {e}")
        return DEFAULT_CATEGORY

    category = coerce_category(reply)
    if category == DEFAULT_CATEGORY and reply != DEFAULT_CATEGORY:
        logger.debug(f"Oracle reply {reply!r} is not a known category, using {DEFAULT_CATEGORY}")
    return category
