from pathlib import Path

from medreport.llm.exceptions import ModelClientError

_DEFAULT_PROMPT_DIR = Path(__file__).parent / "prompts"


def load_system_prompt(path: Path | None = None) -> str:
    """Load the system instruction shared by all providers.

    Args:
        path: Path to the prompt file.
              Defaults to the bundled system_prompt.txt.

    Raises:
        ModelClientError: if the file cannot be read.
    """
    if path is None:
        path = _DEFAULT_PROMPT_DIR / "system_prompt.txt"
    try:
        return path.read_text(encoding="utf-8").strip()
    except OSError as exc:
        raise ModelClientError(f"Failed to load system prompt: {exc}") from exc


def load_user_prompt_template(path: Path | None = None) -> str:
    """Load the user prompt template.

    The template has `{extracted_text}` and `{baseline_json}` placeholders.

    Raises:
        ModelClientError: if the file cannot be read.
    """
    if path is None:
        path = _DEFAULT_PROMPT_DIR / "user_prompt.txt"
    try:
        return path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ModelClientError(f"Failed to load user prompt template: {exc}") from exc
