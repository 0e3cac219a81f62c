from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    app_env: str = "dev"
    log_level: str = "INFO"

    job_store: str = "file"
    jobs_dir: str = "./uploads/processed"
    files_root: str = "./uploads/original"
    scratch_dir: str = "./uploads/temp"

    db_host: str = "host.docker.internal"
    db_port: int = 5432
    db_database: str = "medreport"
    db_username: str = "medreport"
    db_password: str = "secret"

    max_concurrent_jobs: int = 4
    max_file_size_mb: int = 10

    encrypt_files: bool = False
    encryption_key: str = ""

    allow_external_phi_processing: bool = False

    pdf_engine: str = "pdfplumber"
    min_native_text_length: int = 50
    ocr_language: str = "eng"
    ocr_dpi: int = 200

    openai_api_key: str = ""
    openai_model_name: str = "gpt-4"
    openai_timeout_seconds: int = 60
    openai_temperature: float = 0.1
    openai_max_tokens: int = 2000

    llama_api_url: str = ""
    llama_model_name: str = "llama3"
    llama_timeout_seconds: int = 120
    llama_temperature: float = 0.1
    llama_max_tokens: int = 2000
