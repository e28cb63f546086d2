from abc import ABC, abstractmethod
from dataclasses import dataclass, field


@dataclass(frozen=True)
class FunctionSpec:
    """Function the model is forced to call; parameters is a JSON schema."""

    name: str
    description: str
    parameters: dict[str, object] = field(default_factory=dict)


@dataclass(frozen=True)
class CompletionResponse:
    """Provider response: function-call arguments, free text, or neither."""

    arguments: str | None = None
    content: str | None = None


class BaseCompletionClient(ABC):
    """Contract for provider-specific AI completion clients."""

    @abstractmethod
    def create_chat_completion(
        self,
        *,
        model: str,
        temperature: float,
        messages: list[dict[str, str]],
        function: FunctionSpec | None = None,
    ) -> CompletionResponse:
        """Send one completion request and return the raw provider output.

        Raises:
            UpstreamError: on non-2xx responses and network failures.
        """
