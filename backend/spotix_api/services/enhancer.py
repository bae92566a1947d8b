import logging
from typing import Optional

import httpx

from spotix_api.core.errors import ConfigurationError, UpstreamError

logger = logging.getLogger(__name__)

PROMPT_TEMPLATE = """
You are an expert event copywriter. Create a captivating and professional event description for the following event:

Event Name: {event_name}
Event Type: {event_type}
Event Date: {event_date}
Event Venue: {event_venue}

Original Description: "{event_description}"

Please enhance this description to make it more engaging, professional, and appealing to potential attendees.
The enhanced description should:
1. Be approximately 150-250 words
2. Highlight the unique aspects of the event
3. Create excitement and urgency
4. Include relevant details about what attendees can expect
5. Use professional but engaging language
6. Maintain the core information from the original description

Return only the enhanced description text without any additional commentary or formatting.
"""


def build_prompt(event_name: str, event_description: str, event_date: str, event_venue: str, event_type: str) -> str:
    return PROMPT_TEMPLATE.format(
        event_name=event_name,
        event_description=event_description,
        event_date=event_date,
        event_venue=event_venue,
        event_type=event_type,
    )


class GeminiClient:
    base_url = "https://generativelanguage.googleapis.com/v1beta"

    def __init__(self, api_key: Optional[str], model: str = "gemini-1.5-pro", timeout: float = 30.0, transport: Optional[httpx.AsyncBaseTransport] = None):
        self.api_key = api_key
        self.model = model
        self.timeout = timeout
        self._transport = transport

    async def generate(self, prompt: str) -> str:
        if not self.api_key:
            raise ConfigurationError("Generative text service is not configured")
        body = {"contents": [{"role": "user", "parts": [{"text": prompt}]}]}
        try:
            async with httpx.AsyncClient(base_url=self.base_url, timeout=self.timeout, transport=self._transport) as client:
                resp = await client.post(f"/models/{self.model}:generateContent", json=body, headers={"x-goog-api-key": self.api_key})
        except httpx.HTTPError as exc:
            raise UpstreamError("Failed to enhance description", details=str(exc)) from exc
        try:
            data = resp.json()
        except ValueError:
            data = {}
        if not resp.is_success:
            message = (data.get("error") or {}).get("message") if isinstance(data, dict) else None
            raise UpstreamError("Failed to enhance description", details=message or f"status {resp.status_code}")
        parts = []
        for candidate in data.get("candidates") or []:
            for part in (candidate.get("content") or {}).get("parts") or []:
                if part.get("text"):
                    parts.append(part["text"])
            if parts:
                break
        text = "".join(parts).strip()
        if not text:
            raise UpstreamError("Failed to enhance description", details="Empty response from model")
        return text
