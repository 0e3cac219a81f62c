import pytest
from pydantic import ValidationError

from medreport.config.settings import Settings


class TestSettingsDefaults:
    def test_default_app_env(self) -> None:
        s = Settings()
        assert s.app_env == "dev"

    def test_default_job_store(self) -> None:
        s = Settings()
        assert s.job_store == "file"

    def test_default_db_port(self) -> None:
        s = Settings()
        assert s.db_port == 5432

    def test_external_phi_processing_disabled_by_default(self) -> None:
        s = Settings()
        assert s.allow_external_phi_processing is False

    def test_default_min_native_text_length(self) -> None:
        s = Settings()
        assert s.min_native_text_length == 50

    def test_default_max_file_size(self) -> None:
        s = Settings()
        assert s.max_file_size_mb == 10

    def test_default_pdf_engine(self) -> None:
        s = Settings()
        assert s.pdf_engine == "pdfplumber"


class TestSettingsFromEnv:
    def test_loads_log_level(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("LOG_LEVEL", "DEBUG")
        s = Settings()
        assert s.log_level == "DEBUG"

    def test_loads_phi_flag(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("ALLOW_EXTERNAL_PHI_PROCESSING", "true")
        s = Settings()
        assert s.allow_external_phi_processing is True

    def test_loads_llama_api_url(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("LLAMA_API_URL", "http://localhost:11434")
        s = Settings()
        assert s.llama_api_url == "http://localhost:11434"

    def test_loads_max_concurrent_jobs(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("MAX_CONCURRENT_JOBS", "8")
        s = Settings()
        assert s.max_concurrent_jobs == 8


class TestSettingsValidation:
    def test_invalid_db_port_raises(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("DB_PORT", "not_a_number")
        with pytest.raises(ValidationError):
            Settings()

    def test_invalid_max_file_size_raises(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("MAX_FILE_SIZE_MB", "abc")
        with pytest.raises(ValidationError):
            Settings()
