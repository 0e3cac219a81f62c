from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class RawLLMResult:
    """Unvalidated analysis as returned by a provider.

    `parsed` is False when the payload was constructed from the baseline
    because the model output could not be parsed.
    """

    payload: dict[str, Any]
    provider: str
    model: str
    parsed: bool = True


@dataclass(frozen=True)
class ProviderInfo:
    """Public description of a configured provider."""

    id: str
    name: str
    description: str
    requires_phi: bool
    enabled: bool
