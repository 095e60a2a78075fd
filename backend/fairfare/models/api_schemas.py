"""
Pydantic API schemas for the v1 endpoints.

WHAT: Request and response models for FastAPI
WHY: Type-safe validation and serialization matching the frontend contract
HOW: Pydantic v2 models with camelCase aliases
"""

from typing import Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, model_validator

from .negotiation import ChatTurn, MediaAttachment, NegotiationScript, VibeAnalysis


# ========== Negotiate ==========

class PlanPayload(BaseModel):
    """Accepted plan in wire shape."""

    model_config = ConfigDict(populate_by_name=True)

    price_range: str = Field(..., alias="priceRange")
    reasoning: str
    scripts: list[NegotiationScript]


class AcceptedPlanData(BaseModel):
    """Item passed validation; plan attached."""

    model_config = ConfigDict(populate_by_name=True)

    is_valid: Literal[True] = Field(default=True, alias="isValid")
    plan: PlanPayload


class RejectedPlanData(BaseModel):
    """Item rejected by the validation stage."""

    model_config = ConfigDict(populate_by_name=True)

    is_valid: Literal[False] = Field(default=False, alias="isValid")
    reason: str


class NegotiateResponse(BaseModel):
    """Successful pipeline outcome (accepted or rejected)."""
    data: Union[AcceptedPlanData, RejectedPlanData]


class ErrorResponse(BaseModel):
    """Transport or upstream failure."""
    error: str


# ========== Analyze vibe ==========

class AnalyzeVibeRequest(BaseModel):
    """Seller description typed so far."""

    model_config = ConfigDict(populate_by_name=True)

    seller_description: str = Field(default="", alias="sellerDesc", max_length=5000)


class AnalyzeVibeResponse(BaseModel):
    """Live analysis, null while the description is too short."""
    analysis: Optional[VibeAnalysis] = None


# ========== Chat ==========

class ChatRequest(BaseModel):
    """Co-pilot chat history with an optional inline image."""

    model_config = ConfigDict(populate_by_name=True)

    messages: list[ChatTurn] = Field(default_factory=list, max_length=50)
    image: Optional[str] = Field(default=None, description="Base64 image or data URL")
    mime_type: Optional[str] = Field(default=None, alias="mimeType")

    @model_validator(mode="after")
    def validate_image(self):
        """An image needs its MIME type and a non-empty payload."""
        if not self.image:
            return self
        if not self.mime_type:
            raise ValueError("mimeType is required when an image is attached")
        if not self._image_payload().strip():
            raise ValueError("image must be base64 data or a data URL with a payload")
        return self

    def _image_payload(self) -> str:
        """Base64 payload with any data URL prefix removed ('' for a malformed data URL)."""
        if not self.image.startswith("data:"):
            return self.image
        _, sep, payload = self.image.partition(",")
        return payload if sep else ""

    def image_attachment(self) -> Optional[MediaAttachment]:
        """Convert the inline image to an attachment (data URL prefix stripped)."""
        if not self.image:
            return None
        return MediaAttachment(kind="image", mime_type=self.mime_type, data=self._image_payload())


class ChatResponse(BaseModel):
    """Assistant reply."""
    message: str
