from typing import Any

from imagechat.extraction.extractor import ImageExtractor, collect_text_chunks
from imagechat.extraction.models import ExtractionInput, ImageReference, RawResponse
from imagechat.extraction.response_parser import parse_payload
from imagechat.generation.exceptions import NO_IMAGE_MESSAGE, TerminalNoAssetError
from imagechat.generation.prompts import strict_retry_prompt
from imagechat.generation.request import ImageRequest
from imagechat.logging.logger import Log
from imagechat.transport.base import BaseChatTransport
from imagechat.transport.exceptions import TransportError

_REFUSAL_PREFIX = "REFUSED:"


class RetryController:
    """Re-sends an image request once, with a stricter instruction, when the
    first response carried no image.

    The retry budget is exactly one request. A second empty result is
    terminal and reported with the provider's refusal text when present.
    """

    def __init__(self, transport: BaseChatTransport, extractor: ImageExtractor) -> None:
        self._transport = transport
        self._extractor = extractor

    async def recover(
        self,
        request: ImageRequest,
        first_result: tuple[ImageReference, ...] = (),
    ) -> tuple[ImageReference, ...]:
        """Return ``first_result`` if non-empty, otherwise the retried extraction.

        Raises:
            TransportError: if the retried request fails.
            TerminalNoAssetError: if the retried response has no image either.
        """
        if first_result:
            return first_result

        Log.warning("Response contained no image, retrying once with a strict instruction")
        retry_request = request.with_prompt(strict_retry_prompt(request.prompt))
        raw = await self._transport.send(retry_request.to_body())
        if not raw.ok:
            raise TransportError.from_response(raw)

        payload = parse_payload(raw)
        Log.payload("Retry response", payload)
        images = self._extractor.extract(ExtractionInput.from_response(raw, payload))
        if images:
            Log.info(f"Retry recovered {len(images)} image(s)")
            return images

        reason = refusal_reason(payload, raw)
        Log.error(f"No image after retry: {reason}")
        raise TerminalNoAssetError(reason)


def refusal_reason(payload: Any, raw: RawResponse) -> str:
    """Best-effort explanation text from an image-less response."""
    text = "\n".join(chunk.text for chunk in collect_text_chunks(payload)).strip()
    if not text and payload is None:
        text = raw.text.strip()
    if text.upper().startswith(_REFUSAL_PREFIX):
        text = text[len(_REFUSAL_PREFIX):].strip()
    return text[:200] or NO_IMAGE_MESSAGE
