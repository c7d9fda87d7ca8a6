import pytest
from pydantic import ValidationError

from imagechat.config.settings import Settings


class TestSettingsDefaults:
    def test_default_app_env(self) -> None:
        s = Settings()
        assert s.app_env == "dev"

    def test_default_transport_provider(self) -> None:
        s = Settings()
        assert s.transport_provider == "httpx"

    def test_default_models(self) -> None:
        s = Settings()
        assert s.image_model == "gemini-2.5-flash-image"
        assert s.chat_model == "gemini-2.5-flash"

    def test_default_history_budget(self) -> None:
        s = Settings()
        assert s.history_budget_bytes == 5 * 1024 * 1024
        assert s.history_soft_threshold_bytes == 4 * 1024 * 1024
        assert s.history_keep_recent == 30
        assert s.history_fallback_keep == 20

    def test_default_max_batch_size(self) -> None:
        s = Settings()
        assert s.max_batch_size == 5

    def test_default_history_path_is_in_memory(self) -> None:
        s = Settings()
        assert s.history_path == ""


class TestSettingsFromEnv:
    def test_loads_api_key(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("API_KEY", "sk-live")
        s = Settings()
        assert s.api_key == "sk-live"

    def test_loads_log_level(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("LOG_LEVEL", "DEBUG")
        s = Settings()
        assert s.log_level == "DEBUG"

    def test_loads_transport_provider(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("TRANSPORT_PROVIDER", "openai")
        s = Settings()
        assert s.transport_provider == "openai"

    def test_loads_budget(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("HISTORY_BUDGET_BYTES", "1024")
        s = Settings()
        assert s.history_budget_bytes == 1024


class TestSettingsValidation:
    def test_invalid_timeout_raises(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("REQUEST_TIMEOUT_SECONDS", "soon")
        with pytest.raises(ValidationError):
            Settings()

    def test_invalid_temperature_raises(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("CHAT_TEMPERATURE", "warm")
        with pytest.raises(ValidationError):
            Settings()
