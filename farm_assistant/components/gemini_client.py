import base64
from typing import Any, Dict, List, Optional, Union

import requests
from langchain_core.callbacks import CallbackManagerForLLMRun
from langchain_core.language_models.llms import LLM
from pydantic import Field

from farm_assistant.common.circuit_breaker import CircuitBreaker, CircuitBreakerError, gemini_breaker
from farm_assistant.common.custom_exception import UpstreamAPIError
from farm_assistant.common.logger import get_logger
from farm_assistant.config.config import (
    API_TIMEOUT,
    GEMINI_API_KEY,
    GEMINI_BASE_URL,
    GEMINI_CHAT_MODEL,
    GEMINI_VISION_MODEL,
    SAMPLING,
)

logger = get_logger(__name__)


def strip_data_url(image: Union[str, bytes]) -> str:
    """Base64 payload for an image given as raw bytes, base64 text or a data: URL"""
    if isinstance(image, (bytes, bytearray)):
        return base64.b64encode(bytes(image)).decode("ascii")
    if image.startswith("data:") and "," in image:
        return image.split(",", 1)[1]
    return image


def _error_message(response: requests.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        body = {}
    error = body.get("error") if isinstance(body, dict) else None
    message = error.get("message") if isinstance(error, dict) else None
    return message or response.reason or f"HTTP {response.status_code}"


class GeminiLLM(LLM):
    """LangChain-compatible wrapper for the Gemini generateContent endpoint"""
    model_name: str = Field(default=GEMINI_CHAT_MODEL)
    api_key: str = Field(default_factory=lambda: GEMINI_API_KEY)
    base_url: str = Field(default=GEMINI_BASE_URL)
    temperature: float = Field(default=SAMPLING["chat"]["temperature"])
    top_k: int = Field(default=SAMPLING["chat"]["top_k"])
    top_p: float = Field(default=SAMPLING["chat"]["top_p"])
    max_output_tokens: int = Field(default=SAMPLING["chat"]["max_output_tokens"])
    timeout: int = Field(default=API_TIMEOUT)
    breaker: CircuitBreaker = Field(default_factory=gemini_breaker)

    class Config:
        arbitrary_types_allowed = True

    @property
    def _llm_type(self) -> str:
        return "gemini"

    @property
    def endpoint(self) -> str:
        return f"{self.base_url.rstrip('/')}/models/{self.model_name}:generateContent"

    def _generation_config(self) -> Dict[str, Any]:
        return {
            "temperature": self.temperature,
            "topK": self.top_k,
            "topP": self.top_p,
            "maxOutputTokens": self.max_output_tokens,
        }

    def _generate_content(self, parts: List[Dict[str, Any]]) -> str:
        """One request, no retries. Errors surface as UpstreamAPIError."""

        def _execute():
            payload = {
                "contents": [{"parts": parts}],
                "generationConfig": self._generation_config(),
            }
            try:
                response = requests.post(
                    self.endpoint,
                    params={"key": self.api_key},
                    headers={"Content-Type": "application/json"},
                    json=payload,
                    timeout=self.timeout,
                )
            except requests.RequestException as e:
                raise UpstreamAPIError(f"Gemini API request failed: {e}", e)
            if not response.ok:
                raise UpstreamAPIError(f"Gemini API error: {_error_message(response)}", status_code=response.status_code)

            try:
                result = response.json()
            except ValueError as e:
                raise UpstreamAPIError("Gemini API returned invalid JSON", e)
            if not isinstance(result, dict):
                raise UpstreamAPIError(f"Unexpected Gemini API response: {type(result).__name__} body")
            candidates = result.get("candidates") or []
            if not candidates:
                raise UpstreamAPIError("Gemini API returned no candidates")
            try:
                text = candidates[0]["content"]["parts"][0].get("text", "")
            except (KeyError, IndexError, TypeError, AttributeError) as e:
                raise UpstreamAPIError("Unexpected Gemini API response", e)
            if not isinstance(text, str):
                raise UpstreamAPIError("Unexpected Gemini API response: reply text is not a string")
            return text

        try:
            return self.breaker.call(_execute)
        except CircuitBreakerError as e:
            logger.error(f"Circuit breaker OPEN for Gemini: {str(e)}")
            raise UpstreamAPIError("Gemini API temporarily unavailable", e)
        except UpstreamAPIError as e:
            logger.error(f"Gemini model '{self.model_name}' failed: {e.user_message}")
            raise

    def _call(
        self,
        prompt: str,
        stop: Optional[List[str]] = None,
        run_manager: Optional[CallbackManagerForLLMRun] = None,
        **kwargs: Any,
    ) -> str:
        """Text-only generation"""
        return self._generate_content([{"text": prompt}])

    def generate_with_image(self, prompt: str, image: Union[str, bytes], mime_type: str = "image/jpeg") -> str:
        """Prompt plus one inline image"""
        parts = [
            {"text": prompt},
            {"inline_data": {"mime_type": mime_type, "data": strip_data_url(image)}},
        ]
        return self._generate_content(parts)


def get_chat_llm(breaker: Optional[CircuitBreaker] = None) -> GeminiLLM:
    """Chat model with the static chat sampling parameters"""
    params = SAMPLING["chat"]
    return GeminiLLM(
        model_name=GEMINI_CHAT_MODEL,
        breaker=breaker or gemini_breaker(),
        **params,
    )


def get_vision_llm(breaker: Optional[CircuitBreaker] = None) -> GeminiLLM:
    """Vision model with the static identification sampling parameters"""
    params = SAMPLING["identification"]
    return GeminiLLM(
        model_name=GEMINI_VISION_MODEL,
        breaker=breaker or gemini_breaker(),
        **params,
    )
