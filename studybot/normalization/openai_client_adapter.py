from typing import Any

import httpx
import openai

from studybot.normalization.client_base import (
    BaseCompletionClient,
    CompletionResponse,
    FunctionSpec,
)
from studybot.normalization.exceptions import UpstreamError


class OpenAIClientAdapter(BaseCompletionClient):
    """Completion client built on the OpenAI-compatible chat API.

    Structured tasks force a single function call so the arguments come back
    as a JSON object. Automatic SDK retries are disabled.
    """

    def __init__(
        self,
        *,
        api_key: str,
        timeout_seconds: int,
        base_url: str | None = None,
    ) -> None:
        self._client = openai.OpenAI(
            api_key=api_key,
            timeout=timeout_seconds,
            base_url=base_url,
            max_retries=0,
        )

    def create_chat_completion(
        self,
        *,
        model: str,
        temperature: float,
        messages: list[dict[str, str]],
        function: FunctionSpec | None = None,
    ) -> CompletionResponse:
        kwargs: dict[str, Any] = {}
        if function is not None:
            kwargs["tools"] = [{
                "type": "function",
                "function": {
                    "name": function.name,
                    "description": function.description,
                    "parameters": function.parameters,
                },
            }]
            kwargs["tool_choice"] = {"type": "function", "function": {"name": function.name}}
        try:
            response = self._client.chat.completions.create(
                model=model,
                temperature=temperature,
                messages=messages,  # type: ignore[arg-type]
                **kwargs,
            )
        except openai.APIStatusError as exc:
            raise UpstreamError(
                f"AI provider API error: {exc.status_code}",
                status_code=exc.status_code,
            ) from exc
        except (openai.APIConnectionError, httpx.ConnectError, httpx.TimeoutException) as exc:
            raise UpstreamError(f"AI provider network error: {exc}") from exc
        except openai.APIError as exc:
            raise UpstreamError(f"AI provider API error: {exc}") from exc

        if not response.choices:
            return CompletionResponse()
        message = response.choices[0].message
        tool_calls = message.tool_calls or []
        if tool_calls:
            return CompletionResponse(
                arguments=tool_calls[0].function.arguments,
                content=message.content,
            )
        return CompletionResponse(content=message.content)
