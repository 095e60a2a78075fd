"""
Tests for prompt rendering.

WHAT: Test negotiation, seller-summary, vibe-analysis and chat prompts
WHY: Prompts carry the output contract and persona the parser relies on
HOW: Exact-string and containment assertions on rendered prompts
"""

import pytest

from fairfare.agents.prompts import (
    CHAT_SYSTEM_PROMPT,
    MISSING_FIELD,
    SELLER_ANALYSIS_PLACEHOLDER,
    persona_instruction,
    render_chat_messages,
    render_negotiation_messages,
    render_negotiation_prompt,
    render_seller_summary_prompt,
    render_vibe_analysis_prompt,
)
from fairfare.models.negotiation import ChatTurn, MediaAttachment, NegotiationRequest, Vibe
from fairfare.utils.exceptions import ConfigurationError


@pytest.mark.unit
class TestPersonaTable:
    """Test persona lookup."""

    def test_every_vibe_has_an_instruction(self):
        """Test the persona table covers the whole enum."""
        for vibe in Vibe:
            assert persona_instruction(vibe)

    def test_instructions_are_distinct(self):
        """Test each persona renders a different tone."""
        instructions = {persona_instruction(vibe) for vibe in Vibe}
        assert len(instructions) == len(Vibe)

    def test_unknown_vibe_raises_configuration_error(self):
        """Test a value outside the table raises ConfigurationError."""
        with pytest.raises(ConfigurationError, match="Sarcastic"):
            persona_instruction("Sarcastic")


@pytest.mark.unit
class TestNegotiationPrompt:
    """Test the plan-generation prompt."""

    def test_prompt_is_deterministic(self, negotiation_request):
        """Test identical inputs give byte-identical prompts."""
        first = render_negotiation_prompt(negotiation_request, SELLER_ANALYSIS_PLACEHOLDER)
        second = render_negotiation_prompt(
            NegotiationRequest.model_validate(negotiation_request.model_dump(by_alias=True)),
            SELLER_ANALYSIS_PLACEHOLDER,
        )
        assert first == second

    def test_prompt_contains_request_fields(self, negotiation_request):
        """Test item, location, price and currency are embedded."""
        prompt = render_negotiation_prompt(negotiation_request, SELLER_ANALYSIS_PLACEHOLDER)

        assert '- Item: "Used iPhone 11"' in prompt
        assert '- Location: "Addis Ababa"' in prompt
        assert "- Seller's Asking Price: 27000 ETB" in prompt

    def test_missing_optional_fields_use_sentinel(self, negotiation_request):
        """Test absent category, description and media render as N/A."""
        prompt = render_negotiation_prompt(negotiation_request, SELLER_ANALYSIS_PLACEHOLDER)

        assert f'- Category: "{MISSING_FIELD}"' in prompt
        assert f"- Seller's Description: \"{MISSING_FIELD}\"" in prompt
        assert f"- Attached Media: {MISSING_FIELD}" in prompt

    def test_prompt_states_both_output_shapes(self, negotiation_request):
        """Test the literal JSON schema for both branches is present."""
        prompt = render_negotiation_prompt(negotiation_request, SELLER_ANALYSIS_PLACEHOLDER)

        assert '{"isValid": false, "reason": ' in prompt
        assert '{"isValid": true, "priceRange": "...", "reasoning": "...", "scripts": [' in prompt
        assert '{"title": "Initial Offer", "content": "..."}' in prompt

    def test_seller_analysis_is_embedded_verbatim(self, negotiation_request):
        """Test the seller analysis string appears unchanged."""
        analysis = "The seller sounds firm and in a hurry to sell."
        prompt = render_negotiation_prompt(negotiation_request, analysis)
        assert f"- Seller Vibe Analysis: {analysis}" in prompt

    def test_vibes_differ_only_at_persona_span(self, request_data):
        """Test Friendly vs Direct prompts differ exactly at the persona instruction."""
        friendly = NegotiationRequest.model_validate({**request_data, "vibe": "Friendly"})
        direct = NegotiationRequest.model_validate({**request_data, "vibe": "Direct"})

        friendly_prompt = render_negotiation_prompt(friendly, SELLER_ANALYSIS_PLACEHOLDER)
        direct_prompt = render_negotiation_prompt(direct, SELLER_ANALYSIS_PLACEHOLDER)

        friendly_span = persona_instruction(Vibe.FRIENDLY)
        direct_span = persona_instruction(Vibe.DIRECT)

        assert friendly_prompt != direct_prompt
        assert friendly_prompt.count(friendly_span) == 1
        assert direct_prompt.count(direct_span) == 1
        assert friendly_prompt.replace(friendly_span, direct_span) == direct_prompt

        start = friendly_prompt.index(friendly_span)
        assert friendly_prompt[:start] == direct_prompt[:start]
        assert friendly_prompt[start + len(friendly_span):] == direct_prompt[start + len(direct_span):]


@pytest.mark.unit
class TestNegotiationMessages:
    """Test chat-message wrapping of the negotiation prompt."""

    def test_text_only_request_is_single_string_message(self, negotiation_request):
        """Test no attachments gives a plain user message."""
        messages = render_negotiation_messages(negotiation_request, SELLER_ANALYSIS_PLACEHOLDER)

        assert len(messages) == 1
        assert messages[0]["role"] == "user"
        assert isinstance(messages[0]["content"], str)

    def test_attachments_become_content_parts(self, request_data):
        """Test inline image, remote image and audio are converted to parts after the text."""
        request = NegotiationRequest.model_validate({
            **request_data,
            "attachments": [
                {"kind": "image", "mimeType": "image/png", "data": "aW1n"},
                {"kind": "image", "mimeType": "image/jpeg", "url": "https://files.example.com/phone.jpg"},
                {"kind": "audio", "mimeType": "audio/mpeg", "data": "YXVk"},
            ],
        })

        content = render_negotiation_messages(request, SELLER_ANALYSIS_PLACEHOLDER)[0]["content"]

        assert content[0]["type"] == "text"
        assert "image (image/png)" in content[0]["text"]
        assert content[1] == {"type": "image_url", "image_url": {"url": "data:image/png;base64,aW1n"}}
        assert content[2] == {"type": "image_url", "image_url": {"url": "https://files.example.com/phone.jpg"}}
        assert content[3] == {"type": "input_audio", "input_audio": {"data": "YXVk", "format": "mp3"}}


@pytest.mark.unit
class TestAuxiliaryPrompts:
    """Test seller summary, vibe analysis and chat prompts."""

    def test_seller_summary_prompt_asks_for_one_sentence(self):
        """Test the summary prompt quotes the description and asks for one sentence."""
        messages = render_seller_summary_prompt("  Price is final, no lowballers.  ")
        content = messages[0]["content"]

        assert 'Description: "Price is final, no lowballers."' in content
        assert "one sentence" in content

    def test_vibe_analysis_prompt_states_json_shape(self):
        """Test the live analysis prompt lists every output key."""
        content = render_vibe_analysis_prompt("Barely used, price is firm.")[0]["content"]

        for key in ("vibe", "key_phrases", "strategy_tip", "emoji"):
            assert f'"{key}"' in content

    def test_chat_messages_start_with_system_prompt(self):
        """Test chat history follows the co-pilot system prompt."""
        history = [
            ChatTurn(role="user", content="How much for a used bike?"),
            ChatTurn(role="assistant", content="What's the condition?"),
            ChatTurn(role="user", content="Good, two years old."),
        ]

        messages = render_chat_messages(history)

        assert messages[0] == {"role": "system", "content": CHAT_SYSTEM_PROMPT}
        assert [m["role"] for m in messages[1:]] == ["user", "assistant", "user"]

    def test_chat_image_attaches_to_last_user_turn(self):
        """Test the image becomes a part of the latest user message."""
        history = [
            ChatTurn(role="user", content="First"),
            ChatTurn(role="assistant", content="Reply"),
            ChatTurn(role="user", content="What about this?"),
        ]
        image = MediaAttachment(kind="image", mime_type="image/png", data="aW1n")

        messages = render_chat_messages(history, image)

        assert messages[1]["content"] == "First"
        assert messages[3]["content"][0] == {"type": "text", "text": "What about this?"}
        assert messages[3]["content"][1]["image_url"]["url"] == "data:image/png;base64,aW1n"
