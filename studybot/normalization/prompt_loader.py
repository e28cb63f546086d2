import json
from pathlib import Path

from studybot.normalization.exceptions import ConfigurationError

_DEFAULT_PROMPT_DIR = Path(__file__).parent / "prompts"


def load_prompt_template(name: str, prompt_dir: Path | None = None) -> str:
    """Load a prompt template from the prompt directory.

    Args:
        name: File name of the template, e.g. ``note_prompt.txt``.
        prompt_dir: Directory holding prompt files.
                    Defaults to the bundled prompts/ directory.

    Returns:
        The raw template string with placeholders.

    Raises:
        ConfigurationError: if the file cannot be read.
    """
    path = (prompt_dir or _DEFAULT_PROMPT_DIR) / name
    try:
        return path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigurationError(f"Failed to load prompt template: {exc}") from exc


def load_json_schema(name: str, prompt_dir: Path | None = None) -> dict[str, object]:
    """Load and parse a JSON schema from the prompt directory.

    Raises:
        ConfigurationError: if the file cannot be read or is not a JSON object.
    """
    path = (prompt_dir or _DEFAULT_PROMPT_DIR) / name
    try:
        schema = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as exc:
        raise ConfigurationError(f"Failed to load JSON schema: {exc}") from exc
    if not isinstance(schema, dict):
        raise ConfigurationError(f"JSON schema {name} must be an object")
    return schema
