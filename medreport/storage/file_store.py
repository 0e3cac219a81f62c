import uuid
from collections.abc import Generator
from contextlib import contextmanager
from pathlib import Path

from medreport.jobs.models import Job
from medreport.logging.logger import Log
from medreport.storage.encryption import FileCipher
from medreport.storage.exceptions import FileStoreError


class LocalFileStore:
    """Uploaded PDFs on local disk, optionally encrypted at rest.

    Pipelines never read the stored file directly: `scratch_copy` yields a
    plaintext copy that is removed on every exit path.
    """

    def __init__(
        self,
        *,
        files_root: str | Path,
        scratch_dir: str | Path,
        cipher: FileCipher | None = None,
    ) -> None:
        self._files_root = Path(files_root)
        self._scratch_dir = Path(scratch_dir)
        self._cipher = cipher
        self._files_root.mkdir(parents=True, exist_ok=True)
        self._scratch_dir.mkdir(parents=True, exist_ok=True)

    @property
    def encrypted(self) -> bool:
        return self._cipher is not None

    def save(self, job_id: str, data: bytes) -> Path:
        suffix = ".pdf.enc" if self._cipher else ".pdf"
        path = self._files_root / f"{job_id}{suffix}"
        payload = self._cipher.encrypt(data) if self._cipher else data
        try:
            path.write_bytes(payload)
        except OSError as exc:
            raise FileStoreError(f"Failed to store upload for job {job_id}: {exc}") from exc
        Log.info(f"Stored upload for job {job_id} ({len(data)} bytes, encrypted={self.encrypted})")
        return path

    def read(self, path: str | Path) -> bytes:
        try:
            data = Path(path).read_bytes()
        except OSError as exc:
            raise FileStoreError(f"Failed to read stored file {path}: {exc}") from exc
        return self._cipher.decrypt(data) if self._cipher else data

    @contextmanager
    def scratch_copy(self, job: Job) -> Generator[Path, None, None]:
        """Yield a plaintext copy of the job's upload, deleted on exit."""
        scratch = self._scratch_dir / f"{job.id}-{uuid.uuid4().hex}.pdf"
        try:
            scratch.write_bytes(self.read(job.file_path))
            yield scratch
        finally:
            scratch.unlink(missing_ok=True)
            Log.debug(f"Removed scratch copy for job {job.id}")
