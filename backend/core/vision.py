"""
Vision-model client that turns a photo into {item name: quantity}.

Backed by the OpenAI chat-completions API with the image inlined as a data
URL. One request per scan, no retries; any failure raises ScanError.
"""

import base64
import json
import os
import re
from typing import Any, Dict, Optional

from openai import APIError, AsyncOpenAI, OpenAIError

from core.config import settings
from core.logging import get_logger

log = get_logger("vision")

SYSTEM_PROMPT = (
    "Return a JSON structure based on the requirements of the user. "
    "Only return the JSON structure, nothing else. Do not return ```JSON"
)
USER_PROMPT = (
    "Identify the inventory items in the image as well as their quantity. "
    "Use the name of item as key and its corresponding quantity as its value"
)


class ScanError(Exception):
    """The image could not be turned into an item list."""


def image_data_url(image: bytes, content_type: Optional[str], filename: Optional[str] = None) -> str:
    mime = (content_type or "").strip().lower()
    if not mime.startswith("image/"):
        ext = os.path.splitext(filename or "")[1].lower().lstrip(".")
        mime = f"image/{'jpeg' if ext in ('', 'jpg') else ext}"
    b64 = base64.b64encode(image).decode("ascii")
    return f"data:{mime};base64,{b64}"


def _extract_json_object(text: str) -> Optional[Any]:
    if not text:
        return None

    candidates = [text.strip()]

    # Models sometimes wrap JSON in ``` fences despite the prompt
    fenced = re.search(r"```(?:json)?\s*(.*?)```", text, re.DOTALL | re.IGNORECASE)
    if fenced and fenced.group(1):
        candidates.append(fenced.group(1).strip())

    start, end = text.find("{"), text.rfind("}")
    if start != -1 and end > start:
        candidates.append(text[start:end + 1])

    for candidate in candidates:
        try:
            return json.loads(candidate)
        except ValueError:
            continue
    return None


def parse_scan_reply(text: str) -> Dict[str, Any]:
    data = _extract_json_object(text)
    if not isinstance(data, dict):
        raise ScanError("Vision model did not return a JSON object")
    return data


class VisionClient:
    def __init__(
        self,
        api_key: Optional[str] = None,
        model: Optional[str] = None,
        timeout: Optional[float] = None,
        client: Optional[AsyncOpenAI] = None,
    ):
        self.model = model or settings.openai_model
        self.api_key = api_key or settings.openai_api_key or None
        self.timeout = timeout or settings.scan_timeout_seconds
        self._client = client

    @property
    def client(self) -> AsyncOpenAI:
        if self._client is None:
            try:
                self._client = AsyncOpenAI(api_key=self.api_key, timeout=self.timeout, max_retries=0)
            except OpenAIError as e:
                raise ScanError(f"Vision client is not configured: {e}") from e
        return self._client

    async def scan(self, image: bytes, content_type: Optional[str] = None, filename: Optional[str] = None) -> Dict[str, Any]:
        """Return the raw name -> quantity mapping the model reports for ``image``."""
        url = image_data_url(image, content_type, filename)
        messages = [
            {"role": "system", "content": [{"type": "text", "text": SYSTEM_PROMPT}]},
            {
                "role": "user",
                "content": [
                    {"type": "text", "text": USER_PROMPT},
                    {"type": "image_url", "image_url": {"url": url}},
                ],
            },
        ]
        try:
            completion = await self.client.chat.completions.create(model=self.model, messages=messages)
        except APIError as e:
            log.error("Vision request failed (model=%s): %s", self.model, e)
            raise ScanError(f"Vision request failed: {e}") from e

        try:
            content = completion.choices[0].message.content or ""
        except (AttributeError, IndexError) as e:
            raise ScanError("Vision response had no content") from e

        data = parse_scan_reply(content)
        log.info("Vision model reported %d item(s)", len(data))
        return data


_vision_client: Optional[VisionClient] = None


def get_vision_client() -> VisionClient:
    global _vision_client
    if _vision_client is None:
        _vision_client = VisionClient()
    return _vision_client
