import json
import threading

from conftest import FakeChatLLM, FakeIdentificationProvider

from farm_assistant.common.custom_exception import UpstreamAPIError
from farm_assistant.common.templates import CHAT_WELCOME, REFUSAL_SENTENCE
from farm_assistant.components.chat_session import STATE_AWAITING, STATE_IDLE


def test_new_session_starts_with_welcome(make_session):
    session = make_session()
    messages = session.messages()
    assert len(messages) == 1
    assert messages[0].role == "assistant"
    assert messages[0].text == CHAT_WELCOME
    assert session.state == STATE_IDLE


def test_in_domain_question_gets_one_model_answer(make_session):
    llm = FakeChatLLM(reply="**Fall armyworm** control:\n# Steps\nSpray early.\n\n\n\nNote: ask an agronomist.")
    session = make_session(llm=llm)

    reply = session.send("My maize has armyworm")

    messages = session.messages()
    assert [m.role for m in messages] == ["assistant", "user", "assistant"]
    assert messages[1].text == "My maize has armyworm"
    assert reply is messages[-1]
    assert reply.text == "Fall armyworm control:\n\nSpray early."
    assert not reply.text.startswith(REFUSAL_SENTENCE)
    assert len(llm.prompts) == 1
    assert "Kenya" in llm.prompts[0]


def test_out_of_domain_question_refused_when_model_fails(make_session, upstream_down):
    session = make_session(llm=FakeChatLLM(error=upstream_down))
    reply = session.send("tell me a joke")
    assert reply.text == REFUSAL_SENTENCE


def test_in_domain_question_uses_knowledge_base_when_model_fails(make_session, upstream_down):
    session = make_session(llm=FakeChatLLM(error=upstream_down))
    reply = session.send("How should I water my tomato garden?")
    assert reply.text.startswith("Water deeply but infrequently")


def test_in_domain_question_without_canned_answer_shows_error(make_session, upstream_down):
    session = make_session(llm=FakeChatLLM(error=upstream_down), knowledge_lookup=lambda q: None)
    reply = session.send("My maize has armyworm damage on the farm")
    assert reply.text == (
        "Sorry, I encountered an error processing your request: "
        "Gemini API error: quota exceeded. Please try again."
    )
    assert len(session.messages()) == 3


def test_empty_send_is_ignored(make_session, chat_llm):
    session = make_session()
    assert session.send("   ") is None
    assert len(session.messages()) == 1
    assert chat_llm.prompts == []


def test_send_while_awaiting_response_is_a_no_op(make_session):
    llm = FakeChatLLM(reply="Answer")
    llm.release = threading.Event()
    session = make_session(llm=llm)

    results = {}
    worker = threading.Thread(target=lambda: results.setdefault("first", session.send("How do I grow maize?")))
    worker.start()
    assert llm.started.wait(timeout=5)

    assert session.state == STATE_AWAITING
    assert session.send("How do I grow beans?") is None

    llm.release.set()
    worker.join(timeout=5)

    assert results["first"].text == "Answer"
    assert len(llm.prompts) == 1
    user_texts = [m.text for m in session.messages() if m.role == "user"]
    assert user_texts == ["How do I grow maize?"]
    assert session.state == STATE_IDLE


def test_image_turn_appends_normalized_record(make_session, provider, history):
    session = make_session()
    reply = session.send("", image=b"\x89PNG", mime_type="image/png")

    record = json.loads(reply.text)
    assert record["status"] == "identified"
    assert record["identification"]["name"] == "Fall Armyworm"
    assert "*" not in reply.text

    user = session.messages()[1]
    assert user.text == "Identify what's in this image"
    assert user.attached_image == b"\x89PNG"
    assert provider.calls[0]["country"] == "Kenya"
    assert provider.calls[0]["mime_type"] == "image/png"
    assert len(history.entries()) == 1


def test_image_turn_failure_becomes_error_record(make_session, history):
    failing = FakeIdentificationProvider(error=UpstreamAPIError("Gemini API error: bad image"))
    session = make_session(identification_provider=failing)

    reply = session.send("what is this", image=b"img")

    record = json.loads(reply.text)
    assert record["status"] == "error"
    assert "Gemini API error: bad image" in record["message"]
    assert history.entries() == []


def test_healthy_image_is_kept_in_history(make_session, history):
    healthy = FakeIdentificationProvider(result={"name": "No Disease", "confidence": 95, "type": "plant"})
    session = make_session(identification_provider=healthy)
    reply = session.send("", image=b"img")
    assert json.loads(reply.text)["status"] == "healthy"
    assert len(history.entries()) == 1


def test_unexpected_model_failure_still_ends_the_turn(make_session):
    session = make_session(llm=FakeChatLLM(error=RuntimeError("socket closed")))

    reply = session.send("How do I grow maize?")

    assert [m.role for m in session.messages()] == ["assistant", "user", "assistant"]
    assert reply.text == "Sorry, I encountered an error processing your request: socket closed. Please try again."
    assert session.state == STATE_IDLE


def test_unexpected_provider_failure_becomes_error_record(make_session, history):
    session = make_session(identification_provider=FakeIdentificationProvider(error=RuntimeError("decoder crashed")))

    reply = session.send("", image=b"img")

    assert [m.role for m in session.messages()] == ["assistant", "user", "assistant"]
    assert json.loads(reply.text)["status"] == "error"
    assert history.entries() == []


def test_malformed_provider_fields_fall_back(make_session):
    session = make_session(identification_provider=FakeIdentificationProvider(
        result={"name": "x", "causes": 5, "plants_affected": {"a": 1}, "control_measures": "none"}
    ))

    reply = session.send("", image=b"img")

    assert len(session.messages()) == 3
    record = json.loads(reply.text)
    assert record["status"] == "identified"
    assert record["identification"]["causes"]
    assert record["identification"]["affected_plants"]
