# proofing/llm.py

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

import litellm

from proofing.errors import AIUnavailable

logger = logging.getLogger(__name__)

# kept as a module attribute so tests can swap the completion call
_acompletion = litellm.acompletion

PROOFREAD_PROMPT = """You are a proofreading and writing improvement assistant.

Your task: Fix ALL errors in the user's text and improve its clarity.

Rules:
- Fix every spelling mistake (e.g. "teh" -> "the", "recieve" -> "receive")
- Fix all grammar errors (e.g. "I seen him" -> "I saw him", "him and me went" -> "he and I went")
- Fix punctuation and capitalization
- Remove repeated/duplicated words (e.g. "the the" -> "the")
- Improve sentence clarity if awkward, but keep the meaning and tone
- Do NOT add new information or change the intent
- Return ONLY the corrected text, with no explanations, quotes or commentary
- If the text is already correct, return it unchanged"""

TONE_PROMPTS: Dict[str, str] = {
    "friendly": "Rephrase the user's text so it sounds warm and friendly.",
    "professional": "Rephrase the user's text so it sounds clear and professional.",
    "casual": "Rephrase the user's text so it sounds relaxed and casual.",
}

TONES = tuple(TONE_PROMPTS)

_TONE_RULES = """
Keep the meaning. Do NOT add new information.
Return ONLY the rephrased text, with no explanations, quotes or commentary."""


def build_messages(text: str, tone: Optional[str] = None) -> List[Dict[str, str]]:
    if tone is None:
        return [
            {"role": "system", "content": PROOFREAD_PROMPT},
            {"role": "user", "content": f"Fix all errors and improve this text:\n{text}"},
        ]
    if tone not in TONE_PROMPTS:
        raise ValueError(f"Unknown tone {tone!r}; expected one of {TONES}")
    return [
        {"role": "system", "content": TONE_PROMPTS[tone] + _TONE_RULES},
        {"role": "user", "content": text},
    ]


class LiteLLMRewriter:
    """Rewrite callable backed by any model litellm can route to."""

    def __init__(self, model: str, timeout: float = 30.0):
        self.model = model
        self.timeout = timeout

    async def __call__(self, text: str, tone: Optional[str] = None) -> Optional[str]:
        messages = build_messages(text, tone)
        try:
            response: Any = await _acompletion(
                model=self.model,
                messages=messages,
                timeout=self.timeout,
            )
            content = response.choices[0].message.content
        except Exception as exc:
            raise AIUnavailable(f"{self.model}: {exc}") from exc

        if content is None:
            return None
        return str(content)
