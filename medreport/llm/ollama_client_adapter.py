import httpx

from medreport.llm.client_base import BaseChatClient
from medreport.llm.exceptions import ProviderCallFailed


class OllamaClientAdapter(BaseChatClient):
    """Chat transport for a local Ollama server (`/api/generate`).

    Ollama takes a single prompt, so the system and user prompts are joined.
    """

    def __init__(
        self,
        *,
        base_url: str,
        timeout_seconds: int,
        max_tokens: int = 2000,
        http_client: httpx.Client | None = None,
    ) -> None:
        self._max_tokens = max_tokens
        self._client = http_client or httpx.Client(
            base_url=base_url.rstrip("/"),
            timeout=timeout_seconds,
        )

    def complete(
        self,
        *,
        model: str,
        temperature: float,
        system_prompt: str,
        user_prompt: str,
        json_mode: bool,
    ) -> str:
        payload: dict[str, object] = {
            "model": model,
            "prompt": f"{system_prompt}\n\n{user_prompt}",
            "stream": False,
            "options": {
                "temperature": temperature,
                "top_p": 0.9,
                "num_predict": self._max_tokens,
            },
        }
        if json_mode:
            payload["format"] = "json"
        try:
            response = self._client.post("/api/generate", json=payload)
            response.raise_for_status()
            data = response.json()
        except httpx.HTTPStatusError as exc:
            raise ProviderCallFailed(f"AI provider API error: {exc}") from exc
        except httpx.HTTPError as exc:
            raise ProviderCallFailed(f"AI provider network error: {exc}") from exc
        except ValueError as exc:
            raise ProviderCallFailed(f"AI provider returned invalid body: {exc}") from exc

        content = data.get("response") if isinstance(data, dict) else None
        if not isinstance(content, str):
            raise ProviderCallFailed("AI returned empty response")
        return content
