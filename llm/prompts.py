"""
Prompts for LLM expense categorization.
"""
from typing import Dict, List

from core.schema import CATEGORIES


def build_category_prompt(description: str, amount: float) -> str:
    """
    Build the single-turn categorization prompt.

    Args:
        description: Transaction narration
        amount: Transaction amount

    Returns:
        Prompt asking for exactly one category name
    """
    return (
        "Categorize this expense into one category: \n"
        f"{', '.join(CATEGORIES)}.\n\n"
        f"Description: {description}\n"
        f"Amount: ₹{amount:,.2f}\n\n"
        "Reply ONLY with the category name."
    )


def build_messages(description: str, amount: float) -> List[Dict[str, str]]:
    """Wrap the prompt as chat messages."""
    return [{"role": "user", "content": build_category_prompt(description, amount)}]
