IMAGE_ONLY_SUFFIX = (
    "\n\n---\n\n"
    "Output a Markdown image summary, and nothing else. No explanation, no talking."
)

STRICT_RETRY_SUFFIX = (
    "\n\n---\n\n"
    "IMPORTANT: Your previous reply contained no image. Respond with exactly one "
    "Markdown image `![image](<url>)` or an inline data:image URL and nothing else. "
    "If you cannot produce an image, reply with a single line starting with "
    "`REFUSED:` followed by the reason."
)


def ensure_image_return(prompt: str) -> str:
    """Append the image-only instruction once."""
    text = prompt.strip()
    return text if text.endswith(IMAGE_ONLY_SUFFIX) else text + IMAGE_ONLY_SUFFIX


def strict_retry_prompt(prompt: str) -> str:
    """Prompt used for the single retry after an image-less reply."""
    return ensure_image_return(prompt) + STRICT_RETRY_SUFFIX
