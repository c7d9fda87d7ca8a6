from imagechat.generation.prompts import (
    IMAGE_ONLY_SUFFIX,
    STRICT_RETRY_SUFFIX,
    ensure_image_return,
    strict_retry_prompt,
)
from imagechat.generation.request import ImageRequest


class TestPrompts:
    def test_appends_image_only_instruction(self) -> None:
        assert ensure_image_return(" a cat ") == "a cat" + IMAGE_ONLY_SUFFIX

    def test_instruction_is_not_duplicated(self) -> None:
        once = ensure_image_return("a cat")
        assert ensure_image_return(once) == once

    def test_strict_retry_prompt(self) -> None:
        prompt = strict_retry_prompt("a cat")
        assert prompt == "a cat" + IMAGE_ONLY_SUFFIX + STRICT_RETRY_SUFFIX
        assert "REFUSED:" in prompt


class TestImageRequest:
    def test_body_without_attachments(self) -> None:
        body = ImageRequest(model="m", prompt="p").to_body()
        assert body == {
            "model": "m",
            "messages": [{"role": "user", "content": [{"type": "text", "text": "p"}]}],
        }

    def test_body_with_attachments_keeps_order(self) -> None:
        request = ImageRequest(model="m", prompt="p", attachment_urls=("data:a", "data:b"))
        content = request.to_body()["messages"][0]["content"]
        assert [block["type"] for block in content] == ["text", "image_url", "image_url"]
        assert [block["image_url"]["url"] for block in content[1:]] == ["data:a", "data:b"]

    def test_with_prompt_keeps_attachments(self) -> None:
        request = ImageRequest(model="m", prompt="p", attachment_urls=("data:a",))
        changed = request.with_prompt("q")
        assert changed.prompt == "q"
        assert changed.attachment_urls == ("data:a",)
        assert request.prompt == "p"
