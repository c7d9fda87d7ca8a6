MAX_MESSAGE_LENGTH = 200


class ImageChatError(Exception):
    """Base exception for all user-facing failures.

    The message is capped so it can be shown directly as a status line.
    """

    def __init__(self, message: str = "") -> None:
        super().__init__(message[:MAX_MESSAGE_LENGTH])

    @property
    def message(self) -> str:
        return str(self)
