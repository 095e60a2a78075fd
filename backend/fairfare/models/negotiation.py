"""
Negotiation domain models.

WHAT: Core data structures flowing through the negotiation pipeline
WHY: Consistent typing between prompt builder, parser, pipeline and API
HOW: Pydantic v2 models with camelCase wire aliases and invariant validators
"""

import enum
from decimal import Decimal
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, StrictStr, field_validator, model_validator


class Vibe(str, enum.Enum):
    """Negotiation persona selected by the user."""
    FRIENDLY = "Friendly"
    DIRECT = "Direct"
    ANALYTICAL = "Analytical"


# input_audio accepts wav and mp3 only
AUDIO_FORMATS = {"mpeg": "mp3", "mp3": "mp3", "wav": "wav", "x-wav": "wav", "wave": "wav"}


class MediaAttachment(BaseModel):
    """Image or audio attached to a negotiation request."""

    model_config = ConfigDict(populate_by_name=True)

    kind: Literal["image", "audio"]
    mime_type: str = Field(..., alias="mimeType", min_length=1)
    data: Optional[str] = Field(default=None, description="Inline base64 payload")
    url: Optional[str] = Field(default=None, description="Remote file reference")

    @model_validator(mode="after")
    def validate_source(self):
        """Exactly one of data/url; audio must be inline wav or mp3."""
        if bool(self.data) == bool(self.url):
            raise ValueError("attachment needs exactly one of 'data' or 'url'")
        if self.kind == "audio":
            if not self.data:
                raise ValueError("audio attachments must be inline base64 data")
            if self.audio_format is None:
                raise ValueError(f"unsupported audio type {self.mime_type!r}; use wav or mp3")
        return self

    @property
    def audio_format(self) -> Optional[str]:
        return AUDIO_FORMATS.get(self.mime_type.split("/")[-1].lower())


class NegotiationRequest(BaseModel):
    """A single user submission, consumed once by the pipeline."""

    model_config = ConfigDict(populate_by_name=True)

    item_name: str = Field(..., alias="itemName", min_length=1, max_length=200)
    category: Optional[str] = Field(default=None, max_length=100)
    location: str = Field(..., min_length=1, max_length=200)
    price: Decimal = Field(..., gt=0, max_digits=14, decimal_places=2, description="Seller's asking price")
    currency: str = Field(default="ETB", min_length=1, max_length=10)
    vibe: Vibe
    seller_description: Optional[str] = Field(default=None, alias="sellerDesc", max_length=5000)
    attachments: list[MediaAttachment] = Field(default_factory=list, max_length=4)

    @field_validator("item_name", "location", mode="before")
    @classmethod
    def strip_required_text(cls, v):
        """Trim required text fields so whitespace-only input fails min_length."""
        if isinstance(v, str):
            return v.strip()
        return v

    @field_validator("category", "seller_description", mode="before")
    @classmethod
    def blank_to_none(cls, v):
        """Treat blank optional text as absent."""
        if isinstance(v, str) and not v.strip():
            return None
        return v

    @field_validator("price", mode="before")
    @classmethod
    def parse_price(cls, v):
        """Accept numbers or numeric strings such as '27,000'."""
        if isinstance(v, bool):
            raise ValueError("price must be a number")
        if isinstance(v, str):
            return v.strip().replace(",", "")
        return v

    @property
    def has_seller_description(self) -> bool:
        return bool(self.seller_description and self.seller_description.strip())


class SellerVibeAnalysis(BaseModel):
    """One-sentence characterization of the seller's tone."""
    summary: str


class NegotiationScript(BaseModel):
    """A copy-pasteable message for the user."""

    title: StrictStr = Field(..., min_length=1)
    content: StrictStr = Field(..., min_length=1)


class NegotiationPlan(BaseModel):
    """
    Validated generator output.

    is_valid discriminates the populated side: reason when False,
    price_range/reasoning/scripts when True. Mixed or partial shapes are refused.
    """

    model_config = ConfigDict(populate_by_name=True)

    is_valid: bool = Field(..., alias="isValid")
    reason: Optional[StrictStr] = None
    price_range: Optional[StrictStr] = Field(default=None, alias="priceRange")
    reasoning: Optional[StrictStr] = None
    scripts: Optional[list[NegotiationScript]] = None

    @model_validator(mode="after")
    def validate_discriminant(self):
        plan_fields = (self.price_range, self.reasoning, self.scripts)
        if self.is_valid:
            if any(f is None for f in plan_fields) or not self.scripts:
                raise ValueError("a valid plan needs priceRange, reasoning and at least one script")
            if self.reason is not None:
                raise ValueError("a valid plan must not carry a rejection reason")
        else:
            if not self.reason:
                raise ValueError("a rejected plan needs a reason")
            if any(f is not None for f in plan_fields):
                raise ValueError("a rejected plan must not carry plan fields")
        return self

    def plan_payload(self) -> dict:
        """Plan fields in wire shape (accepted plans only)."""
        return {
            "priceRange": self.price_range,
            "reasoning": self.reasoning,
            "scripts": [script.model_dump() for script in self.scripts or []],
        }


class VibeAnalysis(BaseModel):
    """Live seller-vibe analysis shown while the user types."""

    vibe: StrictStr = Field(..., min_length=1)
    key_phrases: list[StrictStr]
    strategy_tip: StrictStr
    emoji: StrictStr


class ChatTurn(BaseModel):
    """One message of a co-pilot chat history."""
    role: Literal["user", "assistant"]
    content: str = Field(..., max_length=4000)
