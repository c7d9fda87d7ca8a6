from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class ImageRequest:
    """Parameters of one image generation call."""

    model: str
    prompt: str
    attachment_urls: tuple[str, ...] = field(default_factory=tuple)

    def with_prompt(self, prompt: str) -> "ImageRequest":
        return ImageRequest(model=self.model, prompt=prompt, attachment_urls=self.attachment_urls)

    def to_body(self) -> dict[str, Any]:
        """Chat-completion body with one text block followed by the image blocks."""
        content: list[dict[str, Any]] = [{"type": "text", "text": self.prompt}]
        for url in self.attachment_urls:
            content.append({"type": "image_url", "image_url": {"url": url}})
        return {
            "model": self.model,
            "messages": [{"role": "user", "content": content}],
        }
