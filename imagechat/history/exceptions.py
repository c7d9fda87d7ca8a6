from imagechat.exceptions import ImageChatError


class StorageQuotaExceededError(ImageChatError):
    """Raised by a storage backend when a write would exceed its quota."""
