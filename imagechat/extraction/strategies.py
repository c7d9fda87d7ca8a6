"""Extraction tiers.

Each strategy is a pure function from an ExtractionInput to candidate URL
strings. The extractor validates candidates and stops at the first tier that
yields anything, so the order of ``DEFAULT_STRATEGIES`` is significant.
"""

import json
from collections.abc import Callable
from typing import Any

from imagechat.extraction.models import ExtractionInput, first_message
from imagechat.extraction.text_scanner import (
    extract_data_uris,
    extract_image_urls_from_text,
)

Strategy = Callable[[ExtractionInput], list[str]]


def structured_content(source: ExtractionInput) -> list[str]:
    """Tier 1: explicit image blocks and text blocks of a multimodal content array."""
    found: list[str] = []
    for block in source.content:
        if not isinstance(block, dict):
            continue
        block_type = block.get("type")
        if block_type == "image_url":
            url = _image_url_of(block)
            if url:
                found.append(url)
        elif block_type == "text" and isinstance(block.get("text"), str):
            found.extend(extract_data_uris(block["text"]))
            found.extend(extract_image_urls_from_text(block["text"]))
    return found


def embedded_data_uris(source: ExtractionInput) -> list[str]:
    """Tier 2: base64 image literals inside the scanned texts."""
    found: list[str] = []
    for text in scanned_texts(source):
        found.extend(extract_data_uris(text))
    return found


def plain_urls(source: ExtractionInput) -> list[str]:
    """Tier 3: Markdown image targets and bare links inside the scanned texts."""
    found: list[str] = []
    for text in scanned_texts(source):
        found.extend(extract_image_urls_from_text(text))
    return found


def whole_payload(source: ExtractionInput) -> list[str]:
    """Tier 4: scan the serialized payload for URLs nested in unexpected fields."""
    if source.payload is None:
        return []
    serialized = json.dumps(source.payload, ensure_ascii=False)
    return extract_data_uris(serialized) + extract_image_urls_from_text(serialized)


def images_container(source: ExtractionInput) -> list[str]:
    """Tier 5: the top-level ``images[].image_url.url`` container."""
    payload = source.payload
    if not isinstance(payload, dict) or not isinstance(payload.get("images"), list):
        return []
    found: list[str] = []
    for item in payload["images"]:
        if isinstance(item, dict):
            url = _image_url_of(item)
            if url:
                found.append(url)
    return found


def scanned_texts(source: ExtractionInput) -> list[str]:
    """Texts that tiers 2 and 3 look at.

    The message content when it is a plain string, string-valued ``choices``
    some gateways return, and the raw body when it did not decode as JSON.
    """
    texts: list[str] = []
    payload = source.payload
    if payload is None:
        if source.text:
            texts.append(source.text)
        return texts
    message = first_message(payload)
    if isinstance(message, dict) and isinstance(message.get("content"), str):
        texts.append(message["content"])
    if isinstance(payload, dict):
        choices = payload.get("choices")
        if isinstance(choices, str):
            texts.append(choices)
        elif isinstance(choices, list):
            texts.extend(choice for choice in choices if isinstance(choice, str))
    elif isinstance(payload, str):
        texts.append(payload)
    return texts


def _image_url_of(block: dict[str, Any]) -> str | None:
    image_url = block.get("image_url")
    if isinstance(image_url, dict):
        url = image_url.get("url")
    else:
        url = image_url
    return url if isinstance(url, str) and url else None


DEFAULT_STRATEGIES: tuple[Strategy, ...] = (
    structured_content,
    embedded_data_uris,
    plain_urls,
    whole_payload,
    images_container,
)
