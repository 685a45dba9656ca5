from __future__ import annotations

import logging
from typing import Any, Dict, Optional

import aiohttp

log = logging.getLogger("openai")

SYSTEM_PROMPT = (
    "You are a trading study assistant. Focus on education, not guaranteed-profit signals. "
    "Explain the market condition simply, point out what to watch, and suggest practice exercises "
    "(not calls to open positions). Avoid promising profit; talk only about probabilities and learning."
)

USER_PROMPT_PREFIX = (
    "Give an educational analysis based on the following summary (market structure, indicators, "
    "BOS, candlestick pattern and confluence) to practice reading the market:\n\n"
)

UNREADABLE_REPLY = "The AI did not return a readable response."


def extract_reply(data: Optional[Dict[str, Any]]) -> str:
    try:
        return data["choices"][0]["message"]["content"]
    except (KeyError, IndexError, TypeError):
        return UNREADABLE_REPLY


class OpenAICommentator:
    def __init__(
        self,
        api_key: str,
        *,
        base_url: str = "https://api.openai.com/v1",
        model: str = "gpt-4.1-mini",
        temperature: float = 0.7,
        timeout_s: int = 30,
    ):
        self.api_key = (api_key or "").strip()
        self.base_url = base_url.rstrip("/")
        self.model = model
        self.temperature = temperature
        self.timeout_s = int(timeout_s) if timeout_s is not None else 30

    def enabled(self) -> bool:
        return bool(self.api_key)

    def build_request(self, summary_text: str) -> Dict[str, Any]:
        return {
            "model": self.model,
            "messages": [
                {"role": "system", "content": SYSTEM_PROMPT},
                {"role": "user", "content": USER_PROMPT_PREFIX + summary_text},
            ],
            "temperature": self.temperature,
        }

    async def comment(self, summary_text: str) -> str:
        if not self.enabled():
            raise RuntimeError("OPENAI_API_KEY is not configured")

        url = self.base_url + "/chat/completions"
        headers = {"Content-Type": "application/json", "Authorization": f"Bearer {self.api_key}"}
        timeout = aiohttp.ClientTimeout(total=self.timeout_s)
        async with aiohttp.ClientSession(timeout=timeout) as sess:
            async with sess.post(url, json=self.build_request(summary_text), headers=headers) as resp:
                if resp.status != 200:
                    body = await resp.text()
                    log.warning("openai_bad_status status=%s body=%s", resp.status, body[:500])
                    raise RuntimeError(f"OpenAI chat completion failed: {resp.status} {body[:500]}")
                try:
                    data = await resp.json(content_type=None)
                except ValueError:
                    data = None

        reply = extract_reply(data)
        log.info("openai_reply model=%s chars=%d", self.model, len(reply))
        return reply
