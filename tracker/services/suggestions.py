"""AI task suggestions for a week.

``suggest`` never raises: a missing key, a network error, a timeout or an
unexpected response all resolve to a fixed fallback list.
"""

import asyncio
import json
import logging
from typing import List, Optional

from openai import AsyncOpenAI

from tracker.core import config

logger = logging.getLogger(__name__)

DEFAULT_SUBJECT = "English Basics (Vocab & Grammar)"
DEFAULT_AGE_GROUP = "8-12"

NO_KEY_FALLBACK = [
    "Learn 5 new animals",
    "Read page 10",
    "Practice counting 1-20 in English",
]
ERROR_FALLBACK = ["Error connecting to AI", "Please add tasks manually"]

SYSTEM_PROMPT = (
    "You plan weekly homework for a young English learner. "
    'Reply with a JSON object of the form {"tasks": ["...", "..."]}.'
)

# Initialize OpenAI client lazily
_client: Optional[AsyncOpenAI] = None


def get_openai_client() -> AsyncOpenAI:
    global _client
    if _client is None:
        _client = AsyncOpenAI(api_key=config.cfg.openai_api_key)
    return _client


def build_prompt(subject: str, age_group: str) -> str:
    return (
        "Suggest 5 concise English language learning tasks for a student.\n"
        f"Focus: {subject} (Vocabulary, Grammar, Reading, or Speaking).\n"
        f"Age Group: {age_group}.\n"
        "Output Language: English (keep it simple).\n"
        'Examples: "Memorize 5 colors", "Read the short story", '
        '"Write 3 sentences about family".'
    )


def parse_tasks(content: Optional[str]) -> List[str]:
    """Extract task strings from the model reply; ValueError on bad shape."""
    if not content:
        return []
    data = json.loads(content)
    if isinstance(data, dict):
        data = data.get("tasks")
    if not isinstance(data, list) or not all(isinstance(x, str) for x in data):
        raise ValueError("expected a list of strings")
    return [x.strip() for x in data if x.strip()]


async def _ask(subject: str, age_group: str) -> List[str]:
    client = get_openai_client()
    resp = await client.chat.completions.create(
        model=config.cfg.openai_model,
        messages=[
            {"role": "system", "content": SYSTEM_PROMPT},
            {"role": "user", "content": build_prompt(subject, age_group)},
        ],
        response_format={"type": "json_object"},
        temperature=0.7,
    )
    return parse_tasks(resp.choices[0].message.content)


async def suggest(
    subject: str = DEFAULT_SUBJECT, age_group: str = DEFAULT_AGE_GROUP
) -> List[str]:
    if not config.cfg.openai_api_key:
        logger.warning("suggestions: OPENAI_API_KEY missing, using fallback")
        return list(NO_KEY_FALLBACK)
    try:
        return await asyncio.wait_for(
            _ask(subject, age_group), timeout=config.cfg.ai_timeout_sec
        )
    except Exception:
        logger.exception("suggestions: request failed, using fallback")
        return list(ERROR_FALLBACK)
