"""Chat turn models accepted by the request encoder."""

from typing import Annotated, Literal

from pydantic import BaseModel, Field


class TextPart(BaseModel):
    """Text content part."""

    type: Literal["text"] = "text"
    text: str = ""


class ImageURL(BaseModel):
    """Image reference; either a data URI or an external URL."""

    url: str


class ImagePart(BaseModel):
    """Image content part."""

    type: Literal["image_url"] = "image_url"
    image_url: ImageURL


ContentPart = Annotated[TextPart | ImagePart, Field(discriminator="type")]


class ChatTurn(BaseModel):
    """One turn of a chat conversation."""

    role: Literal["system", "user", "assistant"]
    content: str | list[ContentPart] | None = Field(default=None, description="Plain text or typed parts")

    @property
    def is_system(self) -> bool:
        return self.role == "system"

    def text_parts(self) -> list[str]:
        """Return the text of every text part, in order."""
        if self.content is None:
            return []
        if isinstance(self.content, str):
            return [self.content]
        return [part.text for part in self.content if isinstance(part, TextPart)]

    def image_urls(self) -> list[str]:
        """Return the URL of every image part, in order."""
        if not isinstance(self.content, list):
            return []
        return [part.image_url.url for part in self.content if isinstance(part, ImagePart)]

    @classmethod
    def create_text(cls, role: str, text: str) -> "ChatTurn":
        """Create a plain-text turn."""
        return cls(role=role, content=text)

    @classmethod
    def create_image(cls, role: str, text: str, url: str) -> "ChatTurn":
        """Create a turn with one text part and one image part."""
        return cls(
            role=role,
            content=[TextPart(text=text), ImagePart(image_url=ImageURL(url=url))],
        )
