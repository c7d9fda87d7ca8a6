from fastapi import HTTPException

from imagechat.chat.exceptions import EmptyReplyError
from imagechat.exceptions import ImageChatError
from imagechat.generation.exceptions import TerminalNoAssetError
from imagechat.transport.exceptions import TransportError
from imagechat.validation.exceptions import InputValidationError

_STATUS_BY_ERROR: tuple[tuple[type[ImageChatError], int], ...] = (
    (InputValidationError, 422),
    (TransportError, 502),
    (TerminalNoAssetError, 502),
    (EmptyReplyError, 502),
)


def to_http_exception(exc: ImageChatError) -> HTTPException:
    """Map a domain failure to an HTTP error carrying its short message."""
    for error_cls, status_code in _STATUS_BY_ERROR:
        if isinstance(exc, error_cls):
            return HTTPException(status_code=status_code, detail=exc.message)
    return HTTPException(status_code=500, detail=exc.message)
