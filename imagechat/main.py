from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI, Request

from imagechat.chat.service import ChatOptions, ChatService
from imagechat.config.settings import Settings
from imagechat.generation.image_generator import ImageGenerator
from imagechat.history.storage import BaseStorage
from imagechat.logging.logger import Log
from imagechat.review.service import ReviewService
from imagechat.routes.chat_route import router as chat_router
from imagechat.routes.download_route import router as download_router
from imagechat.routes.generation_route import router as generation_router
from imagechat.routes.review_route import router as review_router
from imagechat.session.state import Session, close_session, init_session
from imagechat.transport.base import BaseChatTransport


def build_services(app: FastAPI, session: Session) -> None:
    """Attach the generation, chat and review services to ``app.state``."""
    settings = session.settings
    app.state.session = session
    app.state.progress = None
    app.state.image_generator = ImageGenerator(
        session.transport,
        session.runs,
        model=settings.image_model,
        max_batch_size=settings.max_batch_size,
    )
    app.state.chat_service = ChatService(
        session.transport,
        session.messages,
        ChatOptions(
            model=settings.chat_model,
            temperature=settings.chat_temperature,
            top_p=settings.chat_top_p,
            max_tokens=settings.chat_max_tokens,
        ),
    )
    app.state.review_service = ReviewService(
        session.transport,
        session.review_runs,
        session.storage,
        model=settings.chat_model,
        temperature=settings.chat_temperature,
        top_p=settings.chat_top_p,
    )


def create_app(
    settings: Settings | None = None,
    transport: BaseChatTransport | None = None,
    storage: BaseStorage | None = None,
) -> FastAPI:
    """Create the application; the session is opened and closed by the lifespan."""

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        app_settings = settings or Settings()
        Log.configure(app_settings.log_level)
        session = init_session(app_settings, transport=transport, storage=storage)
        build_services(app, session)
        try:
            yield
        finally:
            await close_session()

    app = FastAPI(lifespan=lifespan)

    @app.get("/health")
    async def health(request: Request):
        session = getattr(request.app.state, "session", None)
        return {
            "ok": True,
            "provider": session.settings.transport_provider if session else None,
            "has_credential": bool(session and session.transport.has_credential),
        }

    app.include_router(generation_router)
    app.include_router(chat_router)
    app.include_router(review_router)
    app.include_router(download_router)
    return app


app = create_app()


def main() -> None:
    """Entry point: load settings -> serve the API."""
    settings = Settings()
    uvicorn.run(app, host=settings.server_host, port=settings.server_port)


if __name__ == "__main__":
    main()
