from abc import ABC, abstractmethod


class BaseChatClient(ABC):
    """Contract for provider-specific chat transports."""

    @abstractmethod
    def complete(
        self,
        *,
        model: str,
        temperature: float,
        system_prompt: str,
        user_prompt: str,
        json_mode: bool,
    ) -> str:
        """Return provider response as plain text.

        Raises:
            ProviderCallFailed: on transport or API errors.
        """
