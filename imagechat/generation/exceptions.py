from imagechat.exceptions import ImageChatError

NO_IMAGE_MESSAGE = "no image returned"


class TerminalNoAssetError(ImageChatError):
    """Raised when the retried request still yields no image.

    The message is the provider's refusal text when one was given.
    """

    def __init__(self, message: str = NO_IMAGE_MESSAGE) -> None:
        super().__init__(message or NO_IMAGE_MESSAGE)
