"""User input models, checked before any request leaves the process."""

from typing import Any, TypeVar

from pydantic import BaseModel, Field, ValidationError, field_validator

from imagechat.validation.exceptions import InputValidationError

MAX_ATTACHMENTS = 8

FormT = TypeVar("FormT", bound=BaseModel)


class ImageAttachment(BaseModel):
    """A reference image already encoded as an embeddable URL."""

    name: str = ""
    url: str = Field(min_length=1)


class ImagePromptForm(BaseModel):
    prompt: str = Field(min_length=1, max_length=1000)
    attachments: list[ImageAttachment] = Field(default_factory=list)

    @field_validator("prompt")
    @classmethod
    def _prompt_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("prompt is required")
        return value

    @field_validator("attachments")
    @classmethod
    def _limit_attachments(cls, value: list[ImageAttachment]) -> list[ImageAttachment]:
        if len(value) > MAX_ATTACHMENTS:
            raise ValueError(f"at most {MAX_ATTACHMENTS} images")
        return value


class ChatMessageForm(BaseModel):
    message: str = Field(min_length=1, max_length=10000)

    @field_validator("message")
    @classmethod
    def _message_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("message is required")
        return value.strip()


class ReviewForm(BaseModel):
    article: str = Field(min_length=1, max_length=20000)
    reference_article: str = Field(min_length=1, max_length=20000)


def validate_form(form_cls: type[FormT], **data: Any) -> FormT:
    """Build a form, turning the first pydantic issue into InputValidationError."""
    try:
        return form_cls(**data)
    except ValidationError as exc:
        issue = exc.errors()[0]
        field = ".".join(str(part) for part in issue.get("loc", ()))
        message = issue.get("msg", "invalid input")
        raise InputValidationError(f"{field}: {message}" if field else message) from exc


def require_credential(has_credential: bool) -> None:
    if not has_credential:
        raise InputValidationError("missing API key")
