from collections.abc import AsyncIterator
from dataclasses import dataclass
from typing import Any

from imagechat.chat.exceptions import EmptyReplyError
from imagechat.chat.models import ConversationMessage
from imagechat.extraction.extractor import collect_text_chunks
from imagechat.extraction.response_parser import parse_payload
from imagechat.history.store import AppendResult, BoundedHistoryStore
from imagechat.logging.logger import Log
from imagechat.streaming.content_filter import filter_ai_response
from imagechat.streaming.ingestor import StreamIngestor
from imagechat.streaming.models import StreamSnapshot
from imagechat.transport.base import BaseChatTransport
from imagechat.transport.exceptions import TransportError
from imagechat.validation.forms import ChatMessageForm, require_credential, validate_form


@dataclass(frozen=True)
class ChatOptions:
    model: str
    temperature: float = 0.7
    top_p: float = 0.9
    max_tokens: int = 4000


class ChatService:
    """Runs a conversation whose transcript lives in a bounded history store."""

    def __init__(
        self,
        transport: BaseChatTransport,
        history: BoundedHistoryStore,
        options: ChatOptions,
        ingestor: StreamIngestor | None = None,
    ) -> None:
        self._transport = transport
        self._history = history
        self._options = options
        self._ingestor = ingestor or StreamIngestor()
        self.last_warning: str | None = None

    def messages(self) -> list[ConversationMessage]:
        messages: list[ConversationMessage] = []
        for entry in self._history.load():
            try:
                messages.append(ConversationMessage.from_dict(entry))
            except (KeyError, ValueError) as exc:
                Log.warning(f"Skipping malformed chat message: {exc}")
        return messages

    async def stream_reply(self, text: str) -> AsyncIterator[StreamSnapshot]:
        """Send a user message and yield snapshots of the streamed reply.

        The user message is stored before the request; the assistant message
        is stored once the stream is done. Closing the iterator early
        releases the connection and stores nothing for the reply.

        Raises:
            InputValidationError: on a bad message or missing credential.
            TransportError: if the stream cannot be opened.
        """
        user_text = self._validate(text)
        body = self._body(user_text, stream=True)
        self._store(ConversationMessage(role="user", content=user_text, complete=True))

        reply = ConversationMessage(role="assistant", content="", raw_content="")
        async with self._transport.stream(body) as chunks:
            snapshots = self._ingestor.ingest(chunks)
            try:
                async for snapshot in snapshots:
                    reply.apply(snapshot)
                    yield snapshot
            finally:
                await snapshots.aclose()

        if reply.complete and reply.content:
            self._store(reply)
            Log.info(f"Stored streamed reply ({len(reply.content)} chars)")

    async def complete(self, text: str) -> ConversationMessage:
        """Non-streaming variant of ``stream_reply``.

        Raises:
            InputValidationError: on a bad message or missing credential.
            TransportError: on a non-2xx response or network failure.
            EmptyReplyError: if the response has no assistant text.
        """
        user_text = self._validate(text)
        body = self._body(user_text, stream=False)
        self._store(ConversationMessage(role="user", content=user_text, complete=True))

        raw = await self._transport.send(body)
        if not raw.ok:
            raise TransportError.from_response(raw)
        payload = parse_payload(raw)
        Log.payload("Chat response", payload)
        raw_text = "".join(chunk.text for chunk in collect_text_chunks(payload))
        if not raw_text:
            raise EmptyReplyError()

        reply = ConversationMessage(
            role="assistant",
            content=filter_ai_response(raw_text),
            raw_content=raw_text,
            api_response=[payload],
            complete=True,
        )
        self._store(reply)
        return reply

    def trim(self, keep: int = 50) -> int:
        """Keep the ``keep`` most recent messages; return how many remain."""
        remaining = len(self._history.trim(keep))
        Log.info(f"Trimmed chat history to {remaining} message(s)")
        return remaining

    def clear(self) -> None:
        self._history.clear()
        Log.info("Chat history cleared")

    def size_bytes(self) -> int:
        return self._history.size_bytes()

    def _validate(self, text: str) -> str:
        form = validate_form(ChatMessageForm, message=text)
        require_credential(self._transport.has_credential)
        return form.message

    def _body(self, user_text: str, *, stream: bool) -> dict[str, Any]:
        conversation = [
            {"role": message.role, "content": message.content} for message in self.messages()
        ]
        conversation.append({"role": "user", "content": user_text})
        body: dict[str, Any] = {
            "model": self._options.model,
            "messages": conversation,
            "temperature": self._options.temperature,
            "top_p": self._options.top_p,
            "max_tokens": self._options.max_tokens,
        }
        if stream:
            body["stream"] = True
        return body

    def _store(self, message: ConversationMessage) -> AppendResult:
        result = self._history.append(message.to_dict())
        self.last_warning = result.warning
        if result.warning:
            Log.warning(result.warning)
        return result
