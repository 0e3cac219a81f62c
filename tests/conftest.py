import io
from collections.abc import Callable
from pathlib import Path

import pytest
from reportlab.lib.pagesizes import letter
from reportlab.pdfgen import canvas

from medreport.config.settings import Settings
from medreport.jobs.models import Job, JobStatus, new_job_id, utc_now

MEDICAL_LINES = [
    "Patient: John Doe",
    "DOB: 01/15/1980",
    "Medications: Amoxicillin 500mg TID",
]


def _pdf(*pages: list[str]) -> bytes:
    buf = io.BytesIO()
    c = canvas.Canvas(buf, pagesize=letter)
    for lines in pages:
        y = 720
        for line in lines:
            c.drawString(72, y, line)
            y -= 18
        c.showPage()
    c.save()
    return buf.getvalue()


@pytest.fixture()
def sample_pdf_bytes() -> bytes:
    """Generate a minimal single-page PDF with known text content."""
    return _pdf(["Hello PDF World"])


@pytest.fixture()
def multi_page_pdf_bytes() -> bytes:
    """Generate a two-page PDF with known text on each page."""
    return _pdf(["Page one content"], ["Page two content"])


@pytest.fixture()
def empty_pdf_bytes() -> bytes:
    """Generate a valid PDF with no text content (blank page)."""
    return _pdf([])


@pytest.fixture()
def medical_pdf_bytes() -> bytes:
    """Single-page report whose text layer is long enough to skip OCR."""
    return _pdf(MEDICAL_LINES)


@pytest.fixture()
def settings(tmp_path: Path) -> Settings:
    return Settings(
        jobs_dir=str(tmp_path / "jobs"),
        files_root=str(tmp_path / "original"),
        scratch_dir=str(tmp_path / "scratch"),
        max_concurrent_jobs=2,
    )


def _make_job(
    status: JobStatus = JobStatus.UPLOADED,
    consent_given: bool = True,
    file_path: str = "/nonexistent.pdf",
    **overrides: object,
) -> Job:
    job = Job(
        id=new_job_id(),
        original_filename="report.pdf",
        uploaded_at=utc_now(),
        file_size=1024,
        consent_given=consent_given,
        file_path=file_path,
        status=status,
    )
    for key, value in overrides.items():
        setattr(job, key, value)
    return job


@pytest.fixture()
def make_job() -> Callable[..., Job]:
    """Factory for job records that were never stored."""
    return _make_job
