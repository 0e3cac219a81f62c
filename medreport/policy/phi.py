from enum import Enum


class ProviderKind(str, Enum):
    """Whether a model provider sends document text off the host."""

    EXTERNAL = "external"
    LOCAL = "local"


def is_allowed(provider: ProviderKind | str, allow_external: bool, consent_given: bool) -> bool:
    """Decide whether PHI may be sent to a provider of the given kind.

    External providers need both the deployment-wide flag and the job's
    consent. Local providers are always allowed.
    """
    if ProviderKind(provider) is ProviderKind.LOCAL:
        return True
    return allow_external and consent_given
