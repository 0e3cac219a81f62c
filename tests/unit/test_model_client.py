from unittest.mock import MagicMock

import pytest

from medreport.config.settings import Settings
from medreport.llm.client import ModelClient
from medreport.llm.exceptions import ExternalProcessingDisallowed, ProviderUnavailable
from medreport.llm.factory import ModelClientFactory
from medreport.llm.providers import ExternalModelProvider, LocalModelProvider
from medreport.policy.phi import ProviderKind
from medreport.rules.models import BaselineRecord


def _provider(name: str, kind: ProviderKind) -> MagicMock:
    provider = MagicMock()
    provider.name = name
    provider.display_name = name.title()
    provider.description = f"{name} provider"
    provider.kind = kind
    provider.model = f"{name}-model"
    return provider


def _client(allow_external: bool = False) -> tuple[ModelClient, MagicMock, MagicMock]:
    external = _provider("openai", ProviderKind.EXTERNAL)
    local = _provider("llama", ProviderKind.LOCAL)
    return ModelClient([external, local], allow_external=allow_external), external, local


class TestAnalyze:
    def test_dispatches_by_name(self) -> None:
        client, external, local = _client()
        baseline = BaselineRecord()

        result = client.analyze("text", baseline, "llama", consent_given=True)

        local.analyze.assert_called_once_with("text", baseline)
        external.analyze.assert_not_called()
        assert result is local.analyze.return_value

    def test_unknown_provider(self) -> None:
        client, _external, _local = _client()
        with pytest.raises(ProviderUnavailable, match="gemini"):
            client.analyze("text", BaselineRecord(), "gemini", consent_given=True)

    def test_external_blocked_without_flag(self) -> None:
        client, external, _local = _client(allow_external=False)
        with pytest.raises(ExternalProcessingDisallowed):
            client.analyze("text", BaselineRecord(), "openai", consent_given=True)
        external.analyze.assert_not_called()

    def test_external_blocked_without_consent(self) -> None:
        client, external, _local = _client(allow_external=True)
        with pytest.raises(ExternalProcessingDisallowed):
            client.analyze("text", BaselineRecord(), "openai", consent_given=False)
        external.analyze.assert_not_called()

    def test_external_allowed_with_flag_and_consent(self) -> None:
        client, external, _local = _client(allow_external=True)
        client.analyze("text", BaselineRecord(), "openai", consent_given=True)
        external.analyze.assert_called_once()


class TestDescribe:
    def test_lists_providers_with_policy(self) -> None:
        client, _external, _local = _client(allow_external=False)
        infos = {info.id: info for info in client.describe()}
        assert infos["openai"].requires_phi is True
        assert infos["openai"].enabled is False
        assert infos["llama"].requires_phi is False
        assert infos["llama"].enabled is True

    def test_default_provider_is_first_enabled(self) -> None:
        client, _external, _local = _client(allow_external=False)
        assert client.default_provider() == "llama"
        client, _external, _local = _client(allow_external=True)
        assert client.default_provider() == "openai"

    def test_no_providers(self) -> None:
        client = ModelClient([], allow_external=True)
        assert client.describe() == []
        assert client.default_provider() is None


class TestModelClientFactory:
    def test_no_configured_providers(self) -> None:
        client = ModelClientFactory.create(Settings(openai_api_key="", llama_api_url=""))
        assert client.describe() == []

    def test_openai_configured_by_api_key(self) -> None:
        client = ModelClientFactory.create(Settings(openai_api_key="sk-test", llama_api_url=""))
        provider = client.provider("openai")
        assert isinstance(provider, ExternalModelProvider)
        assert provider.model == "gpt-4"

    def test_llama_configured_by_url(self) -> None:
        client = ModelClientFactory.create(
            Settings(openai_api_key="", llama_api_url="http://localhost:11434")
        )
        provider = client.provider("llama")
        assert isinstance(provider, LocalModelProvider)
        assert provider.model == "llama3"
        with pytest.raises(ProviderUnavailable):
            client.provider("openai")

    def test_external_flag_is_applied(self) -> None:
        client = ModelClientFactory.create(
            Settings(
                openai_api_key="sk-test",
                llama_api_url="http://localhost:11434",
                allow_external_phi_processing=False,
            )
        )
        assert client.default_provider() == "llama"
