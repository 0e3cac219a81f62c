import httpx
import openai

from medreport.llm.client_base import BaseChatClient
from medreport.llm.exceptions import ProviderCallFailed


class OpenAIClientAdapter(BaseChatClient):
    """External chat transport over the OpenAI chat completions API.

    Every failure surfaces as ProviderCallFailed so the job runner can record
    it on the job; the SDK's own retries are the only retries.
    """

    def __init__(
        self,
        *,
        api_key: str,
        timeout_seconds: int,
        max_tokens: int = 2000,
        base_url: str | None = None,
    ) -> None:
        self._max_tokens = max_tokens
        self._client = openai.OpenAI(
            api_key=api_key,
            timeout=timeout_seconds,
            base_url=base_url,
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
        request_format = {"type": "json_object"} if json_mode else {"type": "text"}
        try:
            response = self._client.chat.completions.create(
                model=model,
                messages=[
                    {"role": "system", "content": system_prompt},
                    {"role": "user", "content": user_prompt},
                ],
                temperature=temperature,
                max_tokens=self._max_tokens,
                response_format=request_format,
            )
        except (openai.APIConnectionError, httpx.ConnectError, httpx.TimeoutException) as exc:
            raise ProviderCallFailed(f"AI provider network error: {exc}") from exc
        except openai.AuthenticationError as exc:
            raise ProviderCallFailed("AI provider rejected the API key") from exc
        except openai.RateLimitError as exc:
            raise ProviderCallFailed(f"AI provider rate limit exceeded: {exc}") from exc
        except openai.APIError as exc:
            raise ProviderCallFailed(f"AI provider API error: {exc}") from exc

        if not response.choices:
            raise ProviderCallFailed("AI returned no choices")
        choice = response.choices[0]
        # finish_reason "length" means the reply was cut at max_tokens.
        if json_mode and choice.finish_reason == "length":
            raise ProviderCallFailed(
                f"AI response truncated at {self._max_tokens} tokens"
            )
        if choice.message.content is None:
            raise ProviderCallFailed("AI returned empty response")
        return choice.message.content
