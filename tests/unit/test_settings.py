from idscan.config.settings import Settings, get_settings


class TestSettings:

    def test_defaults(self, monkeypatch):
        monkeypatch.delenv("CACHE_SIZE", raising=False)
        monkeypatch.delenv("ID_CHECKSUM_STRICT", raising=False)
        settings = Settings(_env_file=None)
        assert settings.cache_enabled is True
        assert settings.cache_size == 50
        assert settings.id_checksum_strict is False
        assert settings.ocr_lang == "ch"

    def test_environment_overrides(self, monkeypatch):
        monkeypatch.setenv("CACHE_SIZE", "7")
        monkeypatch.setenv("CACHE_ENABLED", "false")
        monkeypatch.setenv("ID_CHECKSUM_STRICT", "true")
        settings = Settings(_env_file=None)
        assert settings.cache_size == 7
        assert settings.cache_enabled is False
        assert settings.id_checksum_strict is True

    def test_get_settings_is_cached(self):
        assert get_settings() is get_settings()
