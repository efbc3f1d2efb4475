# cvportal/services/llm_backends.py
import logging

import google.generativeai as genai
from openai import OpenAI

from cvportal.errors import AssessmentError

logger = logging.getLogger(__name__)


class OpenAIBackend:
    """Chat completion in JSON mode; one blocking round trip per call."""

    def __init__(self, api_key, model="gpt-3.5-turbo", temperature=0.1, max_tokens=2000):
        self.api_key = api_key
        self.model = model
        self.temperature = temperature
        self.max_tokens = max_tokens
        self._client = None

    @property
    def client(self):
        """Lazy initialization of the OpenAI client"""
        if self._client is None:
            if not self.api_key:
                raise AssessmentError("OPENAI_API_KEY is not set")
            self._client = OpenAI(api_key=self.api_key)
        return self._client

    def complete(self, system_prompt: str, prompt: str) -> str:
        completion = self.client.chat.completions.create(
            model=self.model,
            messages=[
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": prompt},
            ],
            response_format={"type": "json_object"},
            temperature=self.temperature,
            max_tokens=self.max_tokens,
        )
        return completion.choices[0].message.content


class GeminiBackend:
    def __init__(self, api_key, model="models/gemini-2.5-flash", temperature=0.1):
        self.api_key = api_key
        self.model = model
        self.temperature = temperature
        self._ai_model = None

    @property
    def ai_model(self):
        """Lazy initialization of the Gemini model"""
        if self._ai_model is None:
            if not self.api_key:
                raise AssessmentError("GEMINI_API_KEY is not set")
            genai.configure(api_key=self.api_key)
            self._ai_model = genai.GenerativeModel(self.model)
            logger.info("Gemini model %s initialized", self.model)
        return self._ai_model

    def complete(self, system_prompt: str, prompt: str) -> str:
        response = self.ai_model.generate_content(
            f"{system_prompt}\n\n{prompt}",
            generation_config={
                "response_mime_type": "application/json",
                "temperature": self.temperature,
            },
        )
        return getattr(response, "text", "") or ""


def build_backend(config):
    provider = (config.get("ASSESSMENT_PROVIDER") or "openai").lower()
    if provider == "openai":
        return OpenAIBackend(config.get("OPENAI_API_KEY"), model=config.get("OPENAI_MODEL", "gpt-3.5-turbo"))
    if provider == "gemini":
        return GeminiBackend(config.get("GEMINI_API_KEY"), model=config.get("GEMINI_MODEL", "models/gemini-2.5-flash"))
    raise ValueError(f"Unknown ASSESSMENT_PROVIDER: {provider}")
