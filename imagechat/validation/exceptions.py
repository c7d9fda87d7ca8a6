from imagechat.exceptions import ImageChatError


class InputValidationError(ImageChatError):
    """Raised for a bad or missing prompt or credential; nothing is sent."""
