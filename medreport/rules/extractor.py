"""Deterministic baseline extractor.

Every field is a regex cascade over the ordered rules in `patterns`. Singular
fields take the first rule that yields a value; list fields collect all
matches, skipping any match that overlaps text already claimed by an earlier
rule. Confidence values are fixed per category.
"""

from typing import Any

from medreport.logging.logger import Log
from medreport.rules.models import (
    BaselineRecord,
    Diagnosis,
    LabResult,
    Medication,
    Patient,
    Vitals,
)
from medreport.rules.patterns import (
    DIAGNOSIS_RULES,
    DOB_RULES,
    ID_RULES,
    LAB_RULES,
    MEDICATION_RULES,
    NAME_RULES,
    SEX_RULES,
    VITAL_RULES,
    Rule,
)


class RuleExtractor:
    """Builds a BaselineRecord from plain text. Never raises."""

    def extract(self, text: str) -> BaselineRecord:
        text = text or ""
        record = BaselineRecord(
            patient=self.extract_patient(text),
            medications=self.extract_medications(text),
            diagnoses=self.extract_diagnoses(text),
            labs=self.extract_labs(text),
            vitals=self.extract_vitals(text),
        )
        Log.info(
            f"Rule extraction found {len(record.medications)} medications, "
            f"{len(record.labs)} labs, {len(record.diagnoses)} diagnoses"
        )
        return record

    def extract_patient(self, text: str) -> Patient:
        return Patient(
            name=_first(NAME_RULES, text),
            dob=_first(DOB_RULES, text),
            sex=_first(SEX_RULES, text),
            id=_first(ID_RULES, text),
        )

    def extract_medications(self, text: str) -> list[Medication]:
        return _scan(MEDICATION_RULES, text)

    def extract_labs(self, text: str) -> list[LabResult]:
        return _scan(LAB_RULES, text)

    def extract_diagnoses(self, text: str) -> list[Diagnosis]:
        return _scan(DIAGNOSIS_RULES, text)

    def extract_vitals(self, text: str) -> Vitals:
        values = {name: _first([rule], text) for name, rule in VITAL_RULES.items()}
        return Vitals(**values)


def _first(rules: list[Rule], text: str) -> Any:
    for pattern, build in rules:
        match = pattern.search(text)
        if match is None:
            continue
        value = build(match)
        if value is not None:
            return value
    return None


def _scan(rules: list[Rule], text: str) -> list[Any]:
    claimed: list[tuple[int, int]] = []
    found: list[Any] = []
    for pattern, build in rules:
        for match in pattern.finditer(text):
            start, end = match.span()
            if any(start < c_end and c_start < end for c_start, c_end in claimed):
                continue
            item = build(match)
            if item is None:
                continue
            claimed.append((start, end))
            found.append(item)
    return found
