"""Merge an unvalidated model payload with the deterministic baseline.

Every field is resolved independently: model value if usable, else the
baseline value, else a safe default. Patient and vitals are resolved per
sub-field. Nothing here raises; malformed input degrades to defaults.
"""

import math
from collections.abc import Callable
from dataclasses import fields, replace
from datetime import date
from typing import Any

from medreport.llm.models import RawLLMResult
from medreport.logging.logger import Log
from medreport.reconciliation.models import (
    NON_URGENT,
    URGENT,
    AnalysisResult,
    Recommendation,
)
from medreport.rules.models import (
    BaselineRecord,
    Diagnosis,
    LabResult,
    Medication,
    Patient,
    Vitals,
    clamp_confidence,
)
from medreport.rules.patterns import lab_flag

DEFAULT_ITEM_CONFIDENCE = 0.5
DEFAULT_OVERALL_CONFIDENCE = 0.5
DEFAULT_IMPRESSION = "No clinical impression available."
DISCLAIMER = "This is not medical advice."
DEFAULT_PATIENT_SUMMARY = (
    "Your medical document has been processed. Please consult with a healthcare "
    f"provider for proper interpretation. {DISCLAIMER}"
)
LAB_FLAGS = ("low", "high", "normal")


class ResultReconciler:
    """Produces an AnalysisResult from a RawLLMResult and a BaselineRecord."""

    def merge(self, raw: RawLLMResult, baseline: BaselineRecord | None) -> AnalysisResult:
        payload = raw.payload if isinstance(raw.payload, dict) else {}
        baseline = baseline or BaselineRecord()
        if not raw.parsed:
            Log.warning(f"{raw.provider} output was not structured JSON, reconciling from baseline")

        result = AnalysisResult(
            patient=_patient(payload.get("patient"), baseline.patient),
            medications=_merge_list(payload.get("medications"), baseline.medications, _medication),
            diagnoses=_merge_list(payload.get("diagnoses"), baseline.diagnoses, _diagnosis),
            labs=_merge_list(payload.get("labs"), baseline.labs, _lab),
            vitals=_merge_fields(Vitals, payload.get("vitals"), baseline.vitals),
            impression=_text(payload.get("impression")) or DEFAULT_IMPRESSION,
            recommendations=_recommendations(payload.get("recommendations")),
            confidence_overall=_overall_confidence(
                payload.get("confidence_overall"), baseline.confidence_overall
            ),
            source_pages=_source_pages(payload.get("source_pages")),
            notes=_notes(payload.get("notes")),
            patient_summary=with_disclaimer(_text(payload.get("patient_summary"))),
            llm_provider=raw.provider,
            llm_model=raw.model,
        )
        Log.debug(
            f"Reconciled {len(result.medications)} medications, {len(result.labs)} labs, "
            f"{len(result.diagnoses)} diagnoses from {raw.provider}"
        )
        return result


def with_disclaimer(summary: str | None) -> str:
    """Return `summary` ending with the disclaimer, or the default summary."""
    if not summary:
        return DEFAULT_PATIENT_SUMMARY
    summary = summary.rstrip()
    if summary.endswith(DISCLAIMER):
        return summary
    if summary.endswith(DISCLAIMER[:-1]):
        return summary + "."
    return f"{summary} {DISCLAIMER}"


def _is_number(value: Any) -> bool:
    if not isinstance(value, (int, float)) or isinstance(value, bool):
        return False
    try:
        return math.isfinite(value)
    except OverflowError:
        # ints beyond float range
        return False


def _text(value: Any) -> str | None:
    if isinstance(value, str):
        return value.strip() or None
    if _is_number(value):
        return str(value)
    return None


def _to_float(value: Any) -> float | None:
    if _is_number(value):
        return float(value)
    if isinstance(value, str):
        try:
            number = float(value.strip())
        except ValueError:
            return None
        return number if math.isfinite(number) else None
    return None


def _item_confidence(value: Any) -> float:
    if not _is_number(value):
        return DEFAULT_ITEM_CONFIDENCE
    return clamp_confidence(float(value))


def _overall_confidence(value: Any, baseline_value: Any) -> float:
    for candidate in (value, baseline_value):
        if _is_number(candidate):
            return clamp_confidence(float(candidate))
    return DEFAULT_OVERALL_CONFIDENCE


def _merge_fields(cls: type, raw: Any, fallback: Any) -> Any:
    raw = raw if isinstance(raw, dict) else {}
    values = {}
    for f in fields(cls):
        values[f.name] = _text(raw.get(f.name)) or getattr(fallback, f.name, None)
    return cls(**values)


def _patient(raw: Any, fallback: Patient) -> Patient:
    """Model patient fields must keep the baseline domains, else the baseline wins."""
    raw = raw if isinstance(raw, dict) else {}
    return Patient(
        name=_text(raw.get("name")) or fallback.name,
        dob=_iso_date(raw.get("dob")) or fallback.dob,
        sex=_sex(raw.get("sex")) or fallback.sex,
        id=_text(raw.get("id")) or fallback.id,
    )


def _iso_date(value: Any) -> str | None:
    text = _text(value)
    if text is None:
        return None
    try:
        return date.fromisoformat(text).isoformat()
    except ValueError:
        return None


def _sex(value: Any) -> str | None:
    text = _text(value)
    if text is None:
        return None
    return {"m": "M", "f": "F"}.get(text[0].lower())


def _merge_list(
    raw: Any,
    fallback: list[Any],
    build: Callable[[dict[str, Any]], Any],
) -> list[Any]:
    if isinstance(raw, list):
        return [build(item) for item in raw if isinstance(item, dict)]
    return [replace(item, confidence=clamp_confidence(item.confidence)) for item in fallback]


def _medication(item: dict[str, Any]) -> Medication:
    return Medication(
        name=_text(item.get("name")),
        dose=_text(item.get("dose")),
        frequency=_text(item.get("frequency")),
        route=_text(item.get("route")),
        duration=_text(item.get("duration")),
        raw_text=_text(item.get("raw_text")) or "",
        confidence=_item_confidence(item.get("confidence")),
    )


def _diagnosis(item: dict[str, Any]) -> Diagnosis:
    return Diagnosis(
        text=_text(item.get("text")) or "",
        icd10=_text(item.get("icd10")),
        confidence=_item_confidence(item.get("confidence")),
    )


def _lab(item: dict[str, Any]) -> LabResult:
    value = _to_float(item.get("value"))
    ref_range = _text(item.get("ref_range"))
    flag = _text(item.get("flag"))
    flag = flag.lower() if flag else None
    if flag not in LAB_FLAGS:
        flag = lab_flag(value, ref_range) if value is not None else "normal"
    return LabResult(
        name=_text(item.get("name")) or "",
        value=value,
        units=_text(item.get("units")) or "",
        ref_range=ref_range,
        flag=flag,
        confidence=_item_confidence(item.get("confidence")),
    )


def _recommendations(raw: Any) -> list[Recommendation]:
    if not isinstance(raw, list):
        return []
    recommendations = []
    for item in raw:
        if isinstance(item, str) and item.strip():
            recommendations.append(Recommendation(text=item.strip(), urgency=NON_URGENT))
        elif isinstance(item, dict):
            urgency = _text(item.get("urgency")) or ""
            recommendations.append(
                Recommendation(
                    text=_text(item.get("text")) or "",
                    urgency=URGENT if urgency.lower() == URGENT else NON_URGENT,
                )
            )
    return recommendations


def _source_pages(raw: Any) -> list[int]:
    if not isinstance(raw, list):
        return []
    pages = []
    for item in raw:
        number = _to_float(item)
        if number is not None and number.is_integer() and number >= 1:
            pages.append(int(number))
    return pages


def _notes(raw: Any) -> list[str]:
    if isinstance(raw, str):
        raw = [raw]
    if not isinstance(raw, list):
        return []
    return [note for note in (_text(item) for item in raw) if note]
