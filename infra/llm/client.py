import asyncio
import json
import logging
from typing import Dict, List, Optional

import httpx
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from app.settings import Settings
from domain.errors import LLMNotConfiguredError
from domain.schemas import EvaluationResult, LearningResource, SkillMatch
from infra.llm.prompts import CONTEXT_PREAMBLE

logger = logging.getLogger(__name__)

_decoder = json.JSONDecoder()


class EvaluationPayload(BaseModel):
    """Shape the model must return; anything else counts as a failed call."""
    model_config = ConfigDict(extra="ignore")

    skill_matches: List[SkillMatch]
    missing_skills: List[str]
    strength_areas: List[str] = Field(default_factory=list)
    improvement_areas: List[str] = Field(default_factory=list)
    career_suggestions: List[str] = Field(default_factory=list)
    learning_resources: List[LearningResource] = Field(default_factory=list)

    @field_validator("missing_skills", "strength_areas", "improvement_areas", "career_suggestions", mode="before")
    @classmethod
    def _ensure_list(cls, value):
        if value is None:
            return []
        if isinstance(value, str):
            return [value]
        if isinstance(value, list):
            return [str(item) for item in value if item is not None]
        raise ValueError("must be a string or list of strings")

    def to_result(self) -> EvaluationResult:
        return EvaluationResult(
            skill_matches=self.skill_matches,
            missing_skills=self.missing_skills,
            strength_areas=self.strength_areas,
            improvement_areas=self.improvement_areas,
            career_suggestions=self.career_suggestions,
            learning_resources=self.learning_resources,
            source="llm",
        )


async def _post_with_retries(
    url: str,
    headers: Dict[str, str],
    payload: Dict,
    *,
    timeout: float = 15,
    max_attempts: int = 3,
    backoff: float = 1.0,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> Dict:
    for attempt in range(1, max_attempts + 1):
        try:
            async with httpx.AsyncClient(timeout=timeout, transport=transport) as client:
                response = await client.post(url, headers=headers, json=payload)
            response.raise_for_status()
            return response.json()
        except httpx.HTTPStatusError as exc:
            status = exc.response.status_code
            retriable = status >= 500 or status in {408, 429}
            if not retriable or attempt == max_attempts:
                raise
            logger.warning(f"LLM call returned {status}, retrying (attempt {attempt}/{max_attempts})")
        except httpx.RequestError as exc:
            if attempt == max_attempts:
                raise
            logger.warning(f"LLM request failed: {exc!r}, retrying (attempt {attempt}/{max_attempts})")
        await asyncio.sleep(backoff)
        backoff *= 2
    raise RuntimeError("Unexpected retry exhaustion")


def extract_json_object(raw_text: str) -> Dict:
    """Return the first well-formed JSON object embedded in `raw_text`."""
    idx = raw_text.find("{")
    while idx != -1:
        try:
            obj, _ = _decoder.raw_decode(raw_text, idx)
            return obj
        except json.JSONDecodeError:
            idx = raw_text.find("{", idx + 1)
    raise ValueError("LLM response did not contain a JSON object")


def parse_evaluation_response(raw_text: str) -> EvaluationPayload:
    data = extract_json_object(raw_text)
    try:
        return EvaluationPayload.model_validate(data)
    except ValidationError as exc:
        raise ValueError(f"LLM response failed validation: {exc}") from exc


class LLMClient:
    """OpenAI-compatible chat-completions client (OpenAI, OpenRouter, ...)."""

    def __init__(
        self,
        api_key: Optional[str],
        model: str,
        base_url: str = "https://api.openai.com/v1",
        *,
        temperature: float = 0.2,
        timeout: float = 60.0,
        app_name: str = "Web3 Resume Screening",
        max_attempts: int = 3,
        backoff: float = 1.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.api_key = api_key
        self.model = model
        self.base_url = base_url.rstrip("/")
        self.temperature = temperature
        self.timeout = timeout
        self.app_name = app_name
        self.max_attempts = max_attempts
        self.backoff = backoff
        self.transport = transport

    @classmethod
    def from_settings(cls, settings: Settings, transport: Optional[httpx.AsyncBaseTransport] = None) -> "LLMClient":
        return cls(
            settings.OPENAI_API_KEY,
            settings.OPENAI_MODEL,
            settings.OPENAI_BASE_URL,
            temperature=settings.LLM_TEMPERATURE,
            timeout=settings.LLM_TIMEOUT_SECONDS,
            app_name=settings.APP_NAME,
            transport=transport,
        )

    @property
    def configured(self) -> bool:
        return bool(self.api_key)

    def _headers(self) -> Dict[str, str]:
        headers = {"Authorization": f"Bearer {self.api_key}"}
        if "openrouter.ai" in self.base_url:
            headers["HTTP-Referer"] = "http://localhost"
            headers["X-Title"] = self.app_name
        return headers

    async def chat(self, messages: List[Dict[str, str]]) -> str:
        if not self.configured:
            raise LLMNotConfiguredError("No LLM provider configured")
        payload = {"model": self.model, "messages": messages, "temperature": self.temperature}
        data = await _post_with_retries(
            f"{self.base_url}/chat/completions",
            self._headers(),
            payload,
            timeout=self.timeout,
            max_attempts=self.max_attempts,
            backoff=self.backoff,
            transport=self.transport,
        )
        content = data["choices"][0]["message"]["content"]
        if not content:
            raise ValueError("LLM returned empty content")
        return content

    async def complete(self, prompt: str, context: Optional[str] = None, system: Optional[str] = None) -> str:
        user = f"{CONTEXT_PREAMBLE}\n{context}\n\n{prompt}" if context else prompt
        messages = [{"role": "system", "content": system}] if system else []
        messages.append({"role": "user", "content": user})
        return await self.chat(messages)
