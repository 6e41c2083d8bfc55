# farm_assistant/components/chat_session.py
"""
ChatSession

Owns the message list of one conversation and runs one turn at a time:

    idle --send()--> awaiting-response --reply appended--> idle

A send while a turn is in flight is rejected, not queued. Every turn ends
with exactly one assistant message, whether the model call worked or not;
nothing is retried.

Text turns: the model is asked to answer or refuse by itself. Only when that
call fails does the local keyword classifier decide between the refusal
sentence, a canned knowledge-base answer and an error message.

Image turns: the identification provider result is normalized and the record
JSON becomes the assistant message text.
"""
import threading
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Optional, Union

from farm_assistant.common.custom_exception import CustomException
from farm_assistant.common.logger import get_logger
from farm_assistant.common.records import (
    ROLE_ASSISTANT,
    ROLE_USER,
    Message,
    error_record,
    new_record_id,
)
from farm_assistant.common.templates import (
    CHAT_WELCOME,
    DEFAULT_IDENTIFY_PROMPT,
    REFUSAL_SENTENCE,
    build_chat_prompt,
    image_error_message,
    request_error_message,
)
from farm_assistant.components.identification_normalizer import IdentificationNormalizer
from farm_assistant.components.keyword_classifier import KeywordClassifier
from farm_assistant.components.knowledge_base import find_agriculture_response
from farm_assistant.components.response_sanitizer import sanitize

logger = get_logger(__name__)

STATE_IDLE = "idle"
STATE_AWAITING = "awaiting-response"


class ChatSession:
    """
    Args:
        chat_llm: LangChain LLM answering text questions (invoke(prompt) -> str)
        identification_provider: object with identify(image, prompt, country, mime_type)
        normalizer: IdentificationNormalizer
        classifier: local in-domain check, used only when chat_llm fails
        country: callable returning the user's country for prompts
        history: optional IdentificationHistory; None disables history
        knowledge_lookup: canned answer finder for the offline fallback
        welcome: first assistant message of the session
    """

    def __init__(
        self,
        chat_llm,
        identification_provider,
        normalizer: IdentificationNormalizer,
        classifier: KeywordClassifier,
        country: Callable[[], str],
        history=None,
        knowledge_lookup: Callable[[str], Optional[str]] = find_agriculture_response,
        welcome: str = CHAT_WELCOME,
    ):
        self.chat_llm = chat_llm
        self.identification_provider = identification_provider
        self.normalizer = normalizer
        self.classifier = classifier
        self.country = country
        self.history = history
        self.knowledge_lookup = knowledge_lookup

        self._messages: List[Message] = []
        self._messages_lock = threading.Lock()
        self._in_flight = threading.Lock()
        if welcome:
            self._append(ROLE_ASSISTANT, welcome)

    # -------------------------
    # State
    # -------------------------
    @property
    def state(self) -> str:
        return STATE_AWAITING if self._in_flight.locked() else STATE_IDLE

    def messages(self) -> List[Message]:
        with self._messages_lock:
            return list(self._messages)

    def _append(self, role: str, text: str, image: Optional[bytes] = None) -> Message:
        message = Message(
            id=new_record_id(),
            role=role,
            text=text,
            created_at=datetime.now(timezone.utc),
            attached_image=image,
        )
        with self._messages_lock:
            self._messages.append(message)
        return message

    # -------------------------
    # Turns
    # -------------------------
    def send(
        self,
        text: str,
        image: Optional[Union[bytes, str]] = None,
        mime_type: str = "image/jpeg",
    ) -> Optional[Message]:
        """Run one turn; returns the assistant message, or None if the send was ignored"""
        text = (text or "").strip()
        if not text and image is None:
            return None
        if not self._in_flight.acquire(blocking=False):
            logger.warning("Send ignored, a response is still pending")
            return None

        try:
            logger.info(f"Session turn started ({'image' if image is not None else 'text'})")
            if image is not None:
                stored_image = image if isinstance(image, bytes) else None
                self._append(ROLE_USER, text or DEFAULT_IDENTIFY_PROMPT, stored_image)
                reply = self._identify(image, text, mime_type)
            else:
                self._append(ROLE_USER, text)
                reply = self._answer(text)
            return self._append(ROLE_ASSISTANT, reply)
        finally:
            self._in_flight.release()
            logger.info("Session turn finished")

    def _answer(self, question: str) -> str:
        prompt = build_chat_prompt(question, self.country())
        try:
            answer = sanitize(self.chat_llm.invoke(prompt))
        except CustomException as e:
            logger.error(f"Chat model unavailable: {e}")
            return self._offline_answer(question, e)
        except Exception as e:
            logger.exception(f"Chat turn failed unexpectedly: {e}")
            return request_error_message(str(e))
        if not answer:
            logger.warning("Chat model returned an empty answer")
            return request_error_message("the assistant returned an empty answer")
        return answer

    def _offline_answer(self, question: str, error: CustomException) -> str:
        if not self.classifier.is_in_domain(question):
            return REFUSAL_SENTENCE
        canned = self.knowledge_lookup(question)
        if canned:
            logger.info("Answered from the local knowledge base")
            return canned
        return request_error_message(error.message)

    def _identify(self, image: Union[bytes, str], prompt: str, mime_type: str) -> str:
        try:
            raw: Dict[str, Any] = self.identification_provider.identify(
                image, prompt or DEFAULT_IDENTIFY_PROMPT, self.country(), mime_type=mime_type
            )
        except CustomException as e:
            logger.error(f"Identification failed: {e}")
            return error_record(image_error_message(e.message)).to_json()
        except Exception as e:
            logger.exception(f"Identification failed unexpectedly: {e}")
            return error_record(image_error_message(str(e))).to_json()

        if not isinstance(raw, dict) or not raw.get("name"):
            logger.error(f"Identification returned an unusable result: {type(raw).__name__}")
            return error_record(image_error_message("the analysis returned no result")).to_json()

        try:
            record = self.normalizer.normalize(raw)
        except Exception as e:
            logger.exception(f"Could not normalize identification result: {e}")
            return error_record(image_error_message("the analysis result could not be read")).to_json()
        record_json = record.to_json()
        if self.history is not None:
            try:
                self.history.add(record_json)
            except OSError as e:
                logger.error(f"Could not save identification to history: {e}")
        logger.info(f"Identification finished with status '{record.status}'")
        return record_json
