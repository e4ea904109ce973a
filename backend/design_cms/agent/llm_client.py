import base64
import json
import logging
import re
from dataclasses import dataclass
from typing import Any, TypeVar

from openai import AsyncOpenAI
from pydantic import BaseModel, ValidationError

from design_cms.core.config import settings

logger = logging.getLogger(__name__)

T = TypeVar("T", bound=BaseModel)


class LLMNotConfiguredError(RuntimeError):
    """No API key is configured for the LLM vendor."""


@dataclass(frozen=True)
class ImageInput:
    data: bytes
    media_type: str = "image/png"

    def as_data_url(self) -> str:
        encoded = base64.b64encode(self.data).decode("ascii")
        return f"data:{self.media_type};base64,{encoded}"


def strip_code_fences(text: str) -> str:
    """Remove a single surrounding markdown fence (```json, ```tsx, ...)."""
    if not text:
        return ""
    fenced = re.match(r"^\s*```[a-zA-Z0-9_-]*\s*([\s\S]*?)\s*```\s*$", text)
    if fenced:
        return fenced.group(1).strip()
    return text.strip()


def _first_fenced_block(text: str) -> str | None:
    blocks = re.findall(r"```(?:json)?\s*(.*?)\s*```", text, re.DOTALL | re.IGNORECASE)
    return blocks[0].strip() if blocks else None


def _balanced_json_span(text: str) -> str | None:
    """First balanced top-level JSON object or array in `text`, ignoring braces inside strings."""
    starts = [(text.find(open_ch), open_ch, close_ch) for open_ch, close_ch in (("{", "}"), ("[", "]"))]
    starts = [s for s in starts if s[0] != -1]
    if not starts:
        return None

    start_idx, open_ch, close_ch = min(starts, key=lambda s: s[0])
    depth = 0
    in_string = False
    escape = False
    for i in range(start_idx, len(text)):
        ch = text[i]
        if in_string:
            if escape:
                escape = False
            elif ch == "\\":
                escape = True
            elif ch == '"':
                in_string = False
            continue
        if ch == '"':
            in_string = True
        elif ch == open_ch:
            depth += 1
        elif ch == close_ch:
            depth -= 1
            if depth == 0:
                return text[start_idx:i + 1]
    return None


def json_candidates(raw_text: str) -> list[str]:
    """Strings worth handing to `json.loads`, most likely first, without duplicates."""
    text = (raw_text or "").strip()
    if not text:
        return []
    candidates = [_first_fenced_block(text), strip_code_fences(text), text, _balanced_json_span(text)]
    unique: list[str] = []
    for candidate in candidates:
        if candidate and candidate.strip() and candidate.strip() not in unique:
            unique.append(candidate.strip())
    return unique


def parse_json_response(raw_text: str) -> Any:
    errors: list[str] = []
    for candidate in json_candidates(raw_text):
        try:
            return json.loads(candidate, strict=False)
        except json.JSONDecodeError as exc:
            errors.append(str(exc))
    if not errors:
        raise ValueError("Model returned empty content for a JSON response")
    raise ValueError("Model response is not valid JSON: " + " | ".join(errors[:3]))


class LLMClient:
    """Chat-completions client for an OpenAI-compatible vendor, with JSON and image helpers."""

    def __init__(
        self,
        model_name: str | None = None,
        base_url: str | None = None,
        api_key: str | None = None,
    ):
        self.model_name = model_name or settings.MODEL_DEFAULT
        resolved_api_key = api_key or settings.LLM_API_KEY
        if not resolved_api_key:
            raise LLMNotConfiguredError("LLM API key not configured")

        self.client = AsyncOpenAI(
            base_url=base_url or settings.LLM_BASE_URL,
            api_key=resolved_api_key,
        )

    def _chat_completion_kwargs(self, *, temperature: float | None) -> dict:
        model_name = (self.model_name or "").lower()
        # GPT-5 family rejects non-default temperature values on some endpoints.
        if model_name.startswith("gpt-5") or temperature is None:
            return {}
        return {"temperature": temperature}

    @staticmethod
    def _user_content(user_prompt: str, image: ImageInput | None) -> str | list[dict]:
        if image is None:
            return user_prompt
        return [
            {"type": "image_url", "image_url": {"url": image.as_data_url()}},
            {"type": "text", "text": user_prompt},
        ]

    async def _complete(
        self,
        system_prompt: str,
        user_prompt: str,
        *,
        image: ImageInput | None,
        temperature: float | None,
    ) -> str:
        logger.info("Issuing request to model %s (image=%s)", self.model_name, image is not None)
        response = await self.client.chat.completions.create(
            model=self.model_name,
            messages=[
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": self._user_content(user_prompt, image)},
            ],
            **self._chat_completion_kwargs(temperature=temperature),
        )
        if not getattr(response, "choices", None):
            logger.error("Received no choices from %s: %s", self.model_name, response)
            raise ValueError(f"Provider {self.model_name} returned no output")
        return (response.choices[0].message.content or "").strip()

    async def generate_structured(
        self,
        system_prompt: str,
        user_prompt: str,
        response_schema: type[T],
        *,
        image: ImageInput | None = None,
        temperature: float | None = 0.2,
    ) -> T:
        """Ask for JSON matching `response_schema`; a second, stricter prompt is tried on parse failure."""
        attempt_prompts = [
            system_prompt,
            (
                f"{system_prompt}\n\n"
                "RETRY INSTRUCTIONS: Your previous response was not valid JSON. "
                "Return ONLY a single JSON object with no prose and no markdown fences."
            ),
        ]
        for attempt_idx, system_prompt_attempt in enumerate(attempt_prompts, start=1):
            text_response = await self._complete(
                system_prompt_attempt,
                user_prompt,
                image=image,
                temperature=0 if attempt_idx > 1 else temperature,
            )
            try:
                return response_schema.model_validate(parse_json_response(text_response))
            except (ValidationError, ValueError) as e:
                if attempt_idx < len(attempt_prompts):
                    logger.warning(
                        "Structured parsing failed for %s on attempt %s/%s: %s. Retrying...",
                        self.model_name,
                        attempt_idx,
                        len(attempt_prompts),
                        e,
                    )
                    continue
                logger.error("Error parsing structured LLM response from %s: %s", self.model_name, e)
                raise
        raise RuntimeError("Structured generation failed without a captured error")

    async def generate_text(
        self,
        system_prompt: str,
        user_prompt: str,
        *,
        temperature: float | None = 0.2,
    ) -> str:
        """Plain text answer (source code), with any surrounding markdown fence removed."""
        text_response = strip_code_fences(
            await self._complete(system_prompt, user_prompt, image=None, temperature=temperature)
        )
        if not text_response:
            raise ValueError("Model returned empty content")
        logger.info("Received text response from %s (%s chars)", self.model_name, len(text_response))
        return text_response
