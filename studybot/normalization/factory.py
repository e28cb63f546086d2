from typing import ClassVar

from studybot.config.settings import Settings
from studybot.normalization.base import BaseNormalizer
from studybot.normalization.example_client_adapter import ExampleClientAdapter
from studybot.normalization.exceptions import ConfigurationError
from studybot.normalization.normalizer import Normalizer
from studybot.normalization.openai_client_adapter import OpenAIClientAdapter


class NormalizerFactory:
    """Creates the configured normalizer adapter.

    All credential checks happen here so a misconfigured provider fails
    before any network call is made.
    """

    OPENAI_COMPATIBLE_BASE_URLS: ClassVar[dict[str, str]] = {
        "openrouter": "https://openrouter.ai/api/v1",
        "groq": "https://api.groq.com/openai/v1",
        "together": "https://api.together.xyz/v1",
        "deepseek": "https://api.deepseek.com/v1",
        "ollama": "http://localhost:11434/v1",
    }

    @classmethod
    def create(cls, settings: Settings) -> BaseNormalizer:
        """Create a configured normalizer from application settings.

        Raises:
            ConfigurationError: unknown provider, or missing key, model or base URL.
        """
        provider = settings.ai_provider.lower()
        if provider == "example":
            return Normalizer(
                client=ExampleClientAdapter(),
                model="example",
                temperature=settings.ai_temperature,
            )
        base_url = cls._resolve_base_url(provider, settings)
        api_key = cls._resolve_setting(provider, "api_key", settings)
        if not api_key:
            raise ConfigurationError(
                f"ai_{provider}_api_key is required for ai_provider={provider}"
            )
        model = cls._resolve_setting(provider, "model_name", settings)
        if not model:
            raise ConfigurationError(
                f"ai_{provider}_model_name is required for ai_provider={provider}"
            )
        client = OpenAIClientAdapter(
            api_key=api_key,
            timeout_seconds=int(cls._resolve_setting(provider, "timeout_seconds", settings) or 60),
            base_url=base_url,
        )
        return Normalizer(
            client=client,
            model=model,
            temperature=settings.ai_temperature,
        )

    @classmethod
    def _resolve_base_url(cls, provider: str, settings: Settings) -> str | None:
        if provider == "openai":
            return None
        if provider == "openai_compatible":
            url = (settings.ai_openai_compatible_base_url or "").strip()
            if not url:
                raise ConfigurationError(
                    "ai_openai_compatible_base_url is required for "
                    "ai_provider=openai_compatible"
                )
            return url
        default_base_url = cls.OPENAI_COMPATIBLE_BASE_URLS.get(provider)
        if default_base_url is not None:
            return default_base_url
        supported = [
            "example",
            "openai",
            "openai_compatible",
            *sorted(cls.OPENAI_COMPATIBLE_BASE_URLS),
        ]
        raise ConfigurationError(
            f"Unknown AI provider '{provider}'. Choose from: {supported}"
        )

    @staticmethod
    def _resolve_setting(provider: str, name: str, settings: Settings) -> str:
        value = getattr(settings, f"ai_{provider}_{name}", "")
        return str(value).strip() if value is not None else ""
