# farm_assistant/components/identification_service.py
"""
Identification providers.

Both providers return the upstream result dict (see response_parser) and
raise UpstreamAPIError when the remote call fails. Which one is used is
decided once, in build_identification_provider, from the live flag.
"""
import copy
import random
from typing import Any, Dict, Optional, Union

from farm_assistant.common.logger import get_logger
from farm_assistant.common.templates import build_identification_prompt
from farm_assistant.components.gemini_client import GeminiLLM, get_vision_llm
from farm_assistant.components.mock_results import MOCK_RESULTS
from farm_assistant.components.response_parser import parse_identification_text

logger = get_logger(__name__)


class LiveIdentificationProvider:
    def __init__(self, llm: GeminiLLM):
        self.llm = llm

    def identify(
        self,
        image: Union[str, bytes],
        prompt: str,
        country: str,
        mime_type: str = "image/jpeg",
    ) -> Dict[str, Any]:
        full_prompt = build_identification_prompt(prompt, country)
        logger.info(f"Sending image to vision model '{self.llm.model_name}' (country={country})")
        text = self.llm.generate_with_image(full_prompt, image, mime_type=mime_type)
        result = parse_identification_text(text)
        logger.info(f"Vision model identified '{result.get('name')}'")
        return result


class MockIdentificationProvider:
    """Serves one of the fixed sample results; the rng decides which"""

    def __init__(self, rng: Optional[random.Random] = None):
        self._rng = rng or random.Random()

    def identify(self, image, prompt: str, country: str, mime_type: str = "image/jpeg") -> Dict[str, Any]:
        result = copy.deepcopy(self._rng.choice(MOCK_RESULTS))
        logger.info(f"Mock identification returned '{result['name']}'")
        return result


def build_identification_provider(use_live: bool, llm: Optional[GeminiLLM] = None, rng: Optional[random.Random] = None):
    if use_live:
        logger.info("Using live Gemini identification")
        return LiveIdentificationProvider(llm or get_vision_llm())
    logger.warning("No Gemini API key configured, using mock identification results")
    return MockIdentificationProvider(rng=rng)
