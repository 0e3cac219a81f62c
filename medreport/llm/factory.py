from medreport.config.settings import Settings
from medreport.llm.client import ModelClient
from medreport.llm.ollama_client_adapter import OllamaClientAdapter
from medreport.llm.openai_client_adapter import OpenAIClientAdapter
from medreport.llm.providers import ExternalModelProvider, LocalModelProvider, ModelProvider
from medreport.logging.logger import Log


class ModelClientFactory:
    """Creates the model client with every provider the settings configure."""

    @classmethod
    def create(cls, settings: Settings) -> ModelClient:
        providers: list[ModelProvider] = []
        if settings.openai_api_key:
            providers.append(cls._create_openai(settings))
        if settings.llama_api_url:
            providers.append(cls._create_llama(settings))

        if not providers:
            Log.warning("No AI provider is configured; analysis requests will be rejected")
        if settings.allow_external_phi_processing:
            Log.warning("External PHI processing is enabled; documents may leave this host")

        return ModelClient(providers, allow_external=settings.allow_external_phi_processing)

    @staticmethod
    def _create_openai(settings: Settings) -> ModelProvider:
        client = OpenAIClientAdapter(
            api_key=settings.openai_api_key,
            timeout_seconds=settings.openai_timeout_seconds,
            max_tokens=settings.openai_max_tokens,
        )
        return ExternalModelProvider(
            name="openai",
            display_name=f"OpenAI {settings.openai_model_name}",
            description="External API (requires PHI consent)",
            client=client,
            model=settings.openai_model_name,
            temperature=settings.openai_temperature,
        )

    @staticmethod
    def _create_llama(settings: Settings) -> ModelProvider:
        client = OllamaClientAdapter(
            base_url=settings.llama_api_url,
            timeout_seconds=settings.llama_timeout_seconds,
            max_tokens=settings.llama_max_tokens,
        )
        return LocalModelProvider(
            name="llama",
            display_name=f"{settings.llama_model_name} (Local)",
            description="Local model (PHI-safe)",
            client=client,
            model=settings.llama_model_name,
            temperature=settings.llama_temperature,
        )
