"""Tongue twister generation.

One LLM call per game: the model is asked for ``count`` twisters about the
chosen topic, one per line. The lines are cleaned, de-duplicated
case-insensitively and turned into ``Phrase`` objects.
"""

import logging
import random
import re
import string
import time
from typing import List, Optional

from langchain_core.prompts import ChatPromptTemplate
from langchain_core.runnables import Runnable, RunnableLambda
from langchain_openai import ChatOpenAI

from config.settings import get_env_settings
from game.errors import GenerationFailure
from game.models import Phrase

logger = logging.getLogger(__name__)

LENGTH_INSTRUCTIONS = {
    "short": "Keep each tongue twister very brief, around 5 words.",
    "medium": "Make each tongue twister moderately long, around 10 words.",
    "long": "Make each tongue twister quite lengthy, around 20 words.",
}

DIFFICULTY_BY_LENGTH = {"short": 1, "medium": 2, "long": 3, "custom": 2}

_LIST_MARKER_RE = re.compile(r"^\s*(?:[-*•]|\d+[.)])\s*")
_ID_ALPHABET = string.ascii_lowercase + string.digits


def is_api_key_configured() -> bool:
    return bool(get_env_settings().openai_api_key)


def get_length_instruction(length: str, custom_word_count: Optional[int] = None) -> str:
    """Prompt line describing how long each twister should be."""
    if length == "custom" and custom_word_count:
        return f"Each tongue twister must be exactly {custom_word_count} words long."
    return LENGTH_INSTRUCTIONS.get(length, LENGTH_INSTRUCTIONS["medium"])


def message_text(message) -> str:
    """Extract plain text from an AIMessage (or anything string-like)."""
    if hasattr(message, "content"):
        return str(message.content or "")
    if isinstance(message, str):
        return message
    return str(message)


def parse_twister_lines(text: str, limit: Optional[int] = None) -> List[str]:
    """Split model output into unique twister texts, keeping first occurrences."""
    seen = set()
    twisters = []
    for line in text.splitlines():
        line = _LIST_MARKER_RE.sub("", line).strip().strip('"').strip()
        if not line:
            continue
        key = line.lower()
        if key in seen:
            continue
        seen.add(key)
        twisters.append(line)
    if limit is not None:
        twisters = twisters[:limit]
    return twisters


def _phrase_id(index: int) -> str:
    suffix = "".join(random.choice(_ID_ALPHABET) for _ in range(5))
    return f"ai-{int(time.time() * 1000)}-{index}-{suffix}"


def _default_llm() -> ChatOpenAI:
    settings = get_env_settings()
    return ChatOpenAI(
        model=settings.twister_model,
        temperature=0.8,
        api_key=settings.openai_api_key,
    )


def generate_twisters(
    topic: str,
    length: str,
    custom_word_count: Optional[int],
    count: int,
    llm: Optional[Runnable] = None,
) -> List[Phrase]:
    """Generate ``count`` tongue twisters about ``topic``.

    Args:
        topic: Theme the words should relate to
        length: Length class (short, medium, long or custom)
        custom_word_count: Exact word count when ``length`` is custom
        count: Number of twisters (rounds) requested
        llm: Chat model runnable; defaults to ChatOpenAI from the environment

    Returns:
        Ordered list of Phrase objects, at most ``count`` long

    Raises:
        GenerationFailure: If no API key is configured, the call fails, or
            the model returns nothing usable
    """
    if llm is None:
        if not is_api_key_configured():
            raise GenerationFailure(
                "OpenAI API key is not configured. Set OPENAI_API_KEY in your .env file."
            )
        llm = _default_llm()

    prompt = ChatPromptTemplate.from_messages(
        [
            (
                "system",
                """You are a tongue twister generator. Generate {count} unique, fun, and challenging tongue twisters that are difficult to say quickly.
Each tongue twister should feature words related to the topic: {topic}.
{length_instruction}
Return only the tongue twisters, one per line, with no numbering, no explanations, and no additional text.""",
            ),
            ("human", "Generate {count} unique tongue twisters about {topic}."),
        ]
    )
    chain = prompt | llm | RunnableLambda(message_text)

    logger.info(
        "Generating %d tongue twisters (topic=%s, length=%s)", count, topic, length
    )
    try:
        raw = chain.invoke(
            {
                "count": count,
                "topic": topic,
                "length_instruction": get_length_instruction(length, custom_word_count),
            }
        )
    except Exception as e:  # noqa: BLE001
        logger.error("Tongue twister generation failed: %s", e)
        raise GenerationFailure(f"Failed to generate tongue twisters: {e}") from e

    texts = parse_twister_lines(raw, limit=count)
    if not texts:
        raise GenerationFailure("The model returned no tongue twisters.")

    difficulty = DIFFICULTY_BY_LENGTH.get(length, 2)
    phrases = [
        Phrase(
            id=_phrase_id(index),
            text=text,
            difficulty=difficulty,
            topic=topic,
            length=length,
        )
        for index, text in enumerate(texts)
    ]
    logger.info("Generated %d tongue twisters", len(phrases))
    return phrases
