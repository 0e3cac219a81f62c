from medreport.llm.exceptions import ExternalProcessingDisallowed, ProviderUnavailable
from medreport.llm.models import ProviderInfo, RawLLMResult
from medreport.llm.providers import ModelProvider
from medreport.logging.logger import Log
from medreport.policy import phi
from medreport.rules.models import BaselineRecord


class ModelClient:
    """Dispatches analysis requests to configured providers behind the PHI gate."""

    def __init__(self, providers: list[ModelProvider], *, allow_external: bool) -> None:
        self._providers: dict[str, ModelProvider] = {p.name: p for p in providers}
        self._allow_external = allow_external

    def provider(self, name: str) -> ModelProvider:
        """Look up a configured provider.

        Raises:
            ProviderUnavailable: if no provider is configured under `name`.
        """
        provider = self._providers.get(name)
        if provider is None:
            raise ProviderUnavailable(f"AI provider '{name}' is not configured")
        return provider

    def check(self, name: str, *, consent_given: bool) -> ModelProvider:
        """Resolve a provider and apply the PHI policy to it.

        Raises:
            ProviderUnavailable: if the provider is not configured.
            ExternalProcessingDisallowed: if the policy forbids it.
        """
        provider = self.provider(name)
        if not phi.is_allowed(provider.kind, self._allow_external, consent_given):
            raise ExternalProcessingDisallowed(
                f"External processing with '{name}' is disabled for PHI documents"
            )
        return provider

    def analyze(
        self,
        text: str,
        baseline: BaselineRecord,
        provider: str,
        *,
        consent_given: bool,
    ) -> RawLLMResult:
        """Analyze `text` with the named provider.

        The policy is re-checked here so no call path can reach an external
        provider without it.
        """
        selected = self.check(provider, consent_given=consent_given)
        Log.info(f"Analyzing with {selected.name} ({selected.model})")
        return selected.analyze(text, baseline)

    def describe(self) -> list[ProviderInfo]:
        """Configured providers and whether policy currently lets them run."""
        return [
            ProviderInfo(
                id=p.name,
                name=p.display_name,
                description=p.description,
                requires_phi=p.kind is phi.ProviderKind.EXTERNAL,
                enabled=phi.is_allowed(p.kind, self._allow_external, consent_given=True),
            )
            for p in self._providers.values()
        ]

    def default_provider(self) -> str | None:
        """First configured provider that policy allows."""
        for info in self.describe():
            if info.enabled:
                return info.id
        return None
