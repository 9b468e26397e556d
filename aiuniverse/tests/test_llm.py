from unittest.mock import MagicMock, patch

from aiuniverse.catalog.models import Category, ToolRecord
from aiuniverse.llm.config import LLMConfig
from aiuniverse.llm.groq_client import _build_user_message, compare_tools

SAMPLE_TOOLS = [
    ToolRecord(id="1", name="ChatGPT", pricing_type="Freemium", rating=4.8, views=150000,
               description="Conversational assistant", category=Category(name="Chat")),
    ToolRecord(id="2", name="Claude", pricing_type="Freemium", rating=4.7, views=90000,
               description="Long document assistant", tags=["writing"]),
]

ENABLED_CONFIG = LLMConfig(api_key="test-key", enabled=True)
DISABLED_CONFIG = LLMConfig(api_key="test-key", enabled=False)
NO_KEY_CONFIG = LLMConfig(api_key="", enabled=True)


def _mock_groq_response(content: str | None) -> MagicMock:
    message = MagicMock()
    message.content = content
    choice = MagicMock()
    choice.message = message
    response = MagicMock()
    response.choices = [choice]
    return response


@patch("aiuniverse.llm.groq_client.Groq")
def test_compare_tools_returns_analysis(mock_groq_cls):
    mock_groq_cls.return_value.chat.completions.create.return_value = _mock_groq_response(
        "  Summary: both are strong assistants.  "
    )

    result = compare_tools(SAMPLE_TOOLS, "Which is better for essays?", config=ENABLED_CONFIG)

    assert result == "Summary: both are strong assistants."
    kwargs = mock_groq_cls.return_value.chat.completions.create.call_args.kwargs
    assert kwargs["model"] == ENABLED_CONFIG.model
    assert kwargs["messages"][0]["role"] == "system"
    assert "Which is better for essays?" in kwargs["messages"][1]["content"]


@patch("aiuniverse.llm.groq_client.Groq")
def test_compare_tools_fallback_on_api_error(mock_groq_cls):
    mock_groq_cls.return_value.chat.completions.create.side_effect = Exception("API timeout")

    assert compare_tools(SAMPLE_TOOLS, config=ENABLED_CONFIG) is None


@patch("aiuniverse.llm.groq_client.Groq")
def test_compare_tools_empty_output(mock_groq_cls):
    mock_groq_cls.return_value.chat.completions.create.return_value = _mock_groq_response(None)

    assert compare_tools(SAMPLE_TOOLS, config=ENABLED_CONFIG) is None


@patch("aiuniverse.llm.groq_client.Groq")
def test_compare_tools_disabled(mock_groq_cls):
    assert compare_tools(SAMPLE_TOOLS, config=DISABLED_CONFIG) is None
    assert compare_tools(SAMPLE_TOOLS, config=NO_KEY_CONFIG) is None
    mock_groq_cls.assert_not_called()


@patch("aiuniverse.llm.groq_client.Groq")
def test_compare_tools_needs_two(mock_groq_cls):
    assert compare_tools(SAMPLE_TOOLS[:1], config=ENABLED_CONFIG) is None
    mock_groq_cls.assert_not_called()


def test_user_message_contents():
    message = _build_user_message(SAMPLE_TOOLS, None)

    assert '"name": "ChatGPT"' in message
    assert '"category": "Chat"' in message
    assert '"category": null' in message
    assert "User question" not in message
