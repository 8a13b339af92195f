"""Settings parsing and validation."""

import pytest
from pydantic import ValidationError

from hotornot.config import Settings


class TestSettings:

    def test_allowed_extensions_normalized(self):
        settings = Settings(allowed_extensions=" PNG, .jpg ,,webp")

        assert settings.allowed_extensions_set == {".png", ".jpg", ".webp"}

    def test_uploads_prefix_normalized(self):
        assert Settings(uploads_url_prefix="media/").uploads_url_prefix == "/media"

    def test_uploads_prefix_cannot_be_root(self):
        with pytest.raises(ValidationError):
            Settings(uploads_url_prefix="/")

    def test_log_level_uppercased(self):
        assert Settings(log_level="debug").log_level == "DEBUG"

    def test_invalid_log_level(self):
        with pytest.raises(ValidationError):
            Settings(log_level="verbose")

    def test_cors_origins_list(self):
        settings = Settings(cors_origins="http://a.test, http://b.test")

        assert settings.cors_origins_list == ["http://a.test", "http://b.test"]

    def test_is_sqlite(self):
        assert Settings(database_url="sqlite+aiosqlite:///x.db").is_sqlite
        assert not Settings(database_url="postgresql+asyncpg://u:p@h/db").is_sqlite
