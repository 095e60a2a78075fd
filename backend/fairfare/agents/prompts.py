"""
Prompt templates for the negotiation co-pilot.

WHAT: Instruction strings and chat-message rendering for every generation stage
WHY: Prompts embed the JSON contracts the parser later enforces
HOW: Pure template functions over request models and a static persona table
"""

from typing import Optional

from ..llm.types import ChatMessage
from ..models.negotiation import ChatTurn, MediaAttachment, NegotiationRequest, Vibe
from ..utils.exceptions import ConfigurationError

MISSING_FIELD = "N/A"
SELLER_ANALYSIS_PLACEHOLDER = "No seller description provided."

_PERSONA_INSTRUCTIONS: dict[Vibe, str] = {
    Vibe.FRIENDLY: (
        "Persona: Friendly. Write warm, polite and relationship-focused messages. "
        "Compliment the item, show genuine interest and frame every counter-offer as a "
        "fair deal for both sides."
    ),
    Vibe.DIRECT: (
        "Persona: Direct. Write short, confident and to-the-point messages. "
        "State the offer plainly, avoid small talk and be ready to walk away."
    ),
    Vibe.ANALYTICAL: (
        "Persona: Analytical. Write calm, fact-based messages. "
        "Justify every number with market comparisons, item condition and depreciation."
    ),
}

_NEGOTIATION_TEMPLATE = """You are an expert price negotiator and a data validator. Your response MUST be a single JSON object.

A user wants advice on negotiating the price for an item.

Item Details:
- Item: "{item_name}"
- Category: "{category}"
- Location: "{location}"
- Seller's Asking Price: {price} {currency}
- Seller's Description: "{seller_description}"
- Seller Vibe Analysis: {seller_analysis}
- Attached Media: {attachments}

Negotiation Tone:
{persona}

Your Task (in two steps):
1. Validation: First, analyze the "Item". Is it a real, sellable product? A "Used iPhone 11" is VALID. Gibberish like "blah blah blah" or "lskdjf" or an unsellable concept like "happiness" is INVALID.

2. Generate Response based on Validation:
   * If the item is INVALID, respond with exactly this JSON structure:
     {{"isValid": false, "reason": "A short explanation of why the item is not a real, sellable product."}}
   * If the item is VALID, respond with exactly this JSON structure:
     {{"isValid": true, "priceRange": "...", "reasoning": "...", "scripts": [{{"title": "Initial Offer", "content": "..."}}, {{"title": "Follow-up", "content": "..."}}]}}

Fill out the plan with your expert advice: a realistic price range in {currency} for the location, a brief reasoning, and 2-3 short, effective scripts the user can copy and paste, written in the negotiation tone above. Use the seller vibe analysis to adapt your approach."""

_SELLER_SUMMARY_TEMPLATE = """Read the following seller's item description and characterize the seller's tone and negotiation stance in exactly one sentence.
Respond with that one sentence only, without quotes or any other text.

Description: "{description}"
"""

_VIBE_ANALYSIS_TEMPLATE = """Analyze the following seller's item description to understand their personality and negotiation stance.
Description: "{description}"

Respond with ONLY a single, valid JSON object with the following structure:
{{
  "vibe": "A short, descriptive vibe title (e.g., 'Friendly & Eager', 'Firm but Fair', 'Corporate & Professional', 'Low-Effort Seller')",
  "key_phrases": ["A list of 2-3 specific phrases from the text that support your analysis"],
  "strategy_tip": "A one-sentence tip for the user on how to approach this seller.",
  "emoji": "A single emoji that best represents this vibe"
}}"""

CHAT_SYSTEM_PROMPT = """You are "FairFare Co-pilot", a friendly and expert negotiation assistant in a chat window.
- Your goal is to help the user get a fair price for an item they are buying or selling.
- Be conversational. Ask clarifying questions if needed (e.g., "What's the condition?", "Where is it located?").
- If the user shares a picture, identify the item and its visible condition before giving advice.
- If you have enough information, provide a realistic price range and 1-2 sample negotiation messages.
- Keep your responses concise and easy to read in a chat format."""


def persona_instruction(vibe: Vibe) -> str:
    """
    Look up the tone instruction for a persona.

    Raises:
        ConfigurationError: vibe has no entry in the persona table
    """
    try:
        return _PERSONA_INSTRUCTIONS[vibe]
    except KeyError:
        raise ConfigurationError(f"No persona instruction for vibe: {vibe!r}") from None


def _or_missing(value: Optional[str]) -> str:
    return value if value else MISSING_FIELD


def _format_price(request: NegotiationRequest) -> str:
    return format(request.price, "f")


def _describe_attachments(attachments: list[MediaAttachment]) -> str:
    if not attachments:
        return MISSING_FIELD
    kinds = [f"{a.kind} ({a.mime_type})" for a in attachments]
    return f"{', '.join(kinds)}. Use them to confirm the item and judge its condition."


def render_negotiation_prompt(request: NegotiationRequest, seller_analysis: str) -> str:
    """
    Render the plan-generation instruction string.

    WHAT: Two-stage validate-then-advise task with the literal output schema
    WHY: The parser enforces exactly the shape stated here
    HOW: Fixed template; optional fields fall back to "N/A"; the vibe only
         surfaces through its persona instruction

    Raises:
        ConfigurationError: unknown vibe
    """
    return _NEGOTIATION_TEMPLATE.format(
        item_name=request.item_name,
        category=_or_missing(request.category),
        location=request.location,
        price=_format_price(request),
        currency=request.currency,
        seller_description=_or_missing(request.seller_description),
        seller_analysis=seller_analysis,
        attachments=_describe_attachments(request.attachments),
        persona=persona_instruction(request.vibe),
    )


def attachment_part(attachment: MediaAttachment) -> dict:
    """Convert an attachment to an OpenAI-style content part."""
    if attachment.kind == "audio":
        return {
            "type": "input_audio",
            "input_audio": {"data": attachment.data, "format": attachment.audio_format},
        }
    url = attachment.url or f"data:{attachment.mime_type};base64,{attachment.data}"
    return {"type": "image_url", "image_url": {"url": url}}


def render_negotiation_messages(request: NegotiationRequest, seller_analysis: str) -> list[ChatMessage]:
    """
    Wrap the negotiation prompt into chat messages.

    Text-only requests produce a plain string message; requests with
    attachments produce multi-part content (text first, then media).
    """
    prompt = render_negotiation_prompt(request, seller_analysis)
    if not request.attachments:
        return [{"role": "user", "content": prompt}]

    parts = [{"type": "text", "text": prompt}]
    parts.extend(attachment_part(a) for a in request.attachments)
    return [{"role": "user", "content": parts}]


def render_seller_summary_prompt(description: str) -> list[ChatMessage]:
    """Free-text prompt for the one-sentence seller tone summary."""
    return [{"role": "user", "content": _SELLER_SUMMARY_TEMPLATE.format(description=description.strip())}]


def render_vibe_analysis_prompt(description: str) -> list[ChatMessage]:
    """Prompt for the live seller-vibe analysis JSON."""
    return [{"role": "user", "content": _VIBE_ANALYSIS_TEMPLATE.format(description=description.strip())}]


def render_chat_messages(
    history: list[ChatTurn],
    image: Optional[MediaAttachment] = None
) -> list[ChatMessage]:
    """
    Render co-pilot chat messages.

    The image, when given, is attached to the most recent user turn.
    """
    messages: list[ChatMessage] = [{"role": "system", "content": CHAT_SYSTEM_PROMPT}]
    messages.extend({"role": turn.role, "content": turn.content} for turn in history)

    if image is not None:
        for message in reversed(messages):
            if message["role"] == "user":
                message["content"] = [
                    {"type": "text", "text": message["content"]},
                    attachment_part(image),
                ]
                break
        else:
            messages.append({"role": "user", "content": [attachment_part(image)]})

    return messages
