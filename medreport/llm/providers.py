"""Model providers: prompt construction plus provider-specific parsing."""

import json
from abc import ABC, abstractmethod
from dataclasses import asdict
from pathlib import Path
from typing import Any

from medreport.llm.client_base import BaseChatClient
from medreport.llm.exceptions import ProviderCallFailed
from medreport.llm.json_recovery import recover_json_object
from medreport.llm.models import RawLLMResult
from medreport.llm.prompt_loader import load_system_prompt, load_user_prompt_template
from medreport.logging.logger import Log
from medreport.policy.phi import ProviderKind
from medreport.rules.models import BaselineRecord

FALLBACK_IMPRESSION = "Analysis completed using local LLM. Please review results carefully."
FALLBACK_CONFIDENCE = 0.6
FALLBACK_NOTE = "LLM response could not be parsed as JSON. Using baseline extraction."
FALLBACK_PATIENT_SUMMARY = (
    "Your medical document has been processed. Please consult with a healthcare "
    "provider for proper interpretation of these results. This is not medical advice."
)


class ModelProvider(ABC):
    """A named LLM backend able to analyze a document against its baseline."""

    kind: ProviderKind

    def __init__(
        self,
        *,
        name: str,
        display_name: str,
        description: str,
        client: BaseChatClient,
        model: str,
        temperature: float = 0.1,
        system_prompt_path: Path | None = None,
        user_prompt_path: Path | None = None,
    ) -> None:
        self.name = name
        self.display_name = display_name
        self.description = description
        self.model = model
        self._client = client
        self._temperature = max(0.0, min(0.2, temperature))
        self._system_prompt = load_system_prompt(system_prompt_path)
        self._user_prompt_template = load_user_prompt_template(user_prompt_path)

    def analyze(self, text: str, baseline: BaselineRecord) -> RawLLMResult:
        """Send the text and baseline to the model and return its analysis.

        Raises:
            ProviderCallFailed: on transport errors, or unusable output where
                the provider does not degrade.
        """
        prompt = self.build_user_prompt(text, baseline)
        Log.debug(f"Analysis prompt for {self.name}:\n{prompt}")

        raw_response = self._client.complete(
            model=self.model,
            temperature=self._temperature,
            system_prompt=self._system_prompt,
            user_prompt=prompt,
            json_mode=self.kind is ProviderKind.EXTERNAL,
        )
        Log.debug(f"AI raw response from {self.name}:\n{raw_response}")
        return self._to_result(raw_response, baseline)

    def build_user_prompt(self, text: str, baseline: BaselineRecord) -> str:
        return self._user_prompt_template.format(
            extracted_text=text,
            baseline_json=json.dumps(asdict(baseline), indent=2),
        )

    @abstractmethod
    def _to_result(self, raw_response: str, baseline: BaselineRecord) -> RawLLMResult:
        """Turn the provider's text response into a RawLLMResult."""


class ExternalModelProvider(ModelProvider):
    """Hosted provider with a native JSON mode. Unparseable output is an error."""

    kind = ProviderKind.EXTERNAL

    def _to_result(self, raw_response: str, baseline: BaselineRecord) -> RawLLMResult:
        try:
            parsed = json.loads(raw_response)
        except json.JSONDecodeError as exc:
            raise ProviderCallFailed(f"Invalid JSON response: {exc}") from exc
        if not isinstance(parsed, dict):
            raise ProviderCallFailed("JSON response must be an object")
        return RawLLMResult(payload=parsed, provider=self.name, model=self.model)


class LocalModelProvider(ModelProvider):
    """On-host provider returning prose. Falls back to the baseline when no
    JSON object can be recovered from the response."""

    kind = ProviderKind.LOCAL

    def _to_result(self, raw_response: str, baseline: BaselineRecord) -> RawLLMResult:
        parsed = recover_json_object(raw_response)
        if parsed is not None:
            return RawLLMResult(payload=parsed, provider=self.name, model=self.model)

        Log.warning(f"Provider {self.name} returned no parseable JSON, using baseline")
        return RawLLMResult(
            payload=build_fallback_payload(baseline),
            provider=self.name,
            model=self.model,
            parsed=False,
        )


def build_fallback_payload(baseline: BaselineRecord) -> dict[str, Any]:
    """Raw analysis built from the baseline alone."""
    record = asdict(baseline)
    return {
        "patient": record["patient"],
        "medications": record["medications"],
        "diagnoses": record["diagnoses"],
        "labs": record["labs"],
        "vitals": record["vitals"],
        "impression": FALLBACK_IMPRESSION,
        "recommendations": [],
        "confidence_overall": FALLBACK_CONFIDENCE,
        "notes": [FALLBACK_NOTE],
        "patient_summary": FALLBACK_PATIENT_SUMMARY,
    }
