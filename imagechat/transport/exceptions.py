from imagechat.exceptions import ImageChatError
from imagechat.extraction.models import RawResponse
from imagechat.extraction.response_parser import error_message, parse_payload


class TransportError(ImageChatError):
    """Raised on a non-2xx response or a network failure."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code

    @classmethod
    def from_response(cls, raw: RawResponse) -> "TransportError":
        """Describe a failed response by its ``error.message`` or its status code."""
        message = error_message(parse_payload(raw)) or f"HTTP {raw.status_code}"
        return cls(message, status_code=raw.status_code)
