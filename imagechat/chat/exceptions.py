from imagechat.exceptions import ImageChatError


class EmptyReplyError(ImageChatError):
    """Raised when a completion response carries no assistant text."""

    def __init__(self, message: str = "no result returned") -> None:
        super().__init__(message)
