from medreport.llm.client import ModelClient
from medreport.llm.factory import ModelClientFactory
from medreport.llm.models import ProviderInfo, RawLLMResult
from medreport.llm.providers import ExternalModelProvider, LocalModelProvider, ModelProvider

__all__ = [
    "ExternalModelProvider",
    "LocalModelProvider",
    "ModelClient",
    "ModelClientFactory",
    "ModelProvider",
    "ProviderInfo",
    "RawLLMResult",
]
