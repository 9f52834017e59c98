import pytest
from pydantic import ValidationError

from core.utils.constants import REPOSITORY_PAGE_SIZE_HARD_CAP
from core.utils.settings import Settings, get_settings


class TestSettings:
    def test_defaults(self) -> None:
        settings = Settings()

        assert settings.max_page_size == 20
        assert settings.query_batch_size == 100
        assert settings.upload_workers == 4
        assert settings.cors_origin == "*"

    def test_from_env(self, monkeypatch) -> None:
        monkeypatch.setenv("IMAGE_S3_BUCKET_NAME", "bucket")
        monkeypatch.setenv("IMAGE_METADATA_TABLE_NAME", "table")
        monkeypatch.setenv("MAX_PAGE_SIZE", "50")
        monkeypatch.setenv("IMAGE_PUBLIC_BASE_URL", "https://cdn.example.com/")

        settings = Settings.from_env()

        assert settings.bucket_name == "bucket"
        assert settings.table_name == "table"
        assert settings.max_page_size == 50
        assert settings.public_base_url == "https://cdn.example.com"

    def test_max_page_size_is_capped(self) -> None:
        settings = Settings(max_page_size=10_000)
        assert settings.max_page_size == REPOSITORY_PAGE_SIZE_HARD_CAP

    def test_invalid_value_rejected(self, monkeypatch) -> None:
        monkeypatch.setenv("UPLOAD_WORKERS", "0")

        with pytest.raises(ValidationError):
            Settings.from_env()

    def test_empty_variable_falls_back_to_default(self, monkeypatch) -> None:
        monkeypatch.setenv("MAX_PAGE_SIZE", "")
        assert Settings.from_env().max_page_size == 20

    def test_get_settings_is_cached(self) -> None:
        assert get_settings() is get_settings()
