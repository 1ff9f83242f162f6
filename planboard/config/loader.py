"""Read planboard.yaml into a validated PlanboardConfig."""

import os
import re
from collections.abc import Iterator
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from .models import PlanboardConfig

# ${VAR} or ${VAR:-fallback}
_ENV_REF = re.compile(r"\$\{(\w+)(?::-([^}]*))?\}")


def load_config(cli_path: str | None = None) -> PlanboardConfig:
    """Return the first non-empty config found, else the defaults.

    Lookup order: ``cli_path`` > ./planboard.yaml > ~/.planboard/config.yaml.
    An explicit ``cli_path`` that does not exist is an error.
    """
    if cli_path and not Path(cli_path).is_file():
        raise ValueError(f"Config file not found: {cli_path}")

    for path in _candidate_paths(cli_path):
        raw = _read_yaml(path)
        if raw is None:
            continue
        try:
            return PlanboardConfig.model_validate(_expand_env_vars(raw))
        except ValidationError as e:
            raise ValueError(f"Invalid config in {path}: {e}") from e

    return PlanboardConfig()


def _candidate_paths(cli_path: str | None) -> Iterator[Path]:
    if cli_path:
        yield Path(cli_path)
    yield Path("planboard.yaml")
    yield Path.home() / ".planboard" / "config.yaml"


def _read_yaml(path: Path) -> Any:
    if not path.is_file():
        return None
    try:
        return yaml.safe_load(path.read_text(encoding="utf-8"))
    except yaml.YAMLError as e:
        raise ValueError(f"Invalid YAML in {path}: {e}") from e


def _expand_env_vars(value: Any) -> Any:
    """Substitute ${VAR} (or ${VAR:-fallback}) in every string value."""
    if isinstance(value, str):
        return _ENV_REF.sub(lambda m: os.environ.get(m.group(1), m.group(2) or ""), value)
    if isinstance(value, dict):
        return {key: _expand_env_vars(item) for key, item in value.items()}
    if isinstance(value, list):
        return [_expand_env_vars(item) for item in value]
    return value


# Default YAML template for `planboard config init`
DEFAULT_CONFIG_TEMPLATE = """\
# planboard.yaml

# LLM Provider
llm:
  provider: "google"           # google | openai | anthropic | auto
  model: "gemini-2.5-flash"
  api_key_env: "GEMINI_API_KEY"
  max_tokens: 8192
  temperature: 1.45
  grounding: true              # Google Search grounding (gemini only)

# Document publishing (xTiles)
publisher:
  endpoint: "https://stage.xtiles.app/api/ai/gpt/generate-from-md"
  api_key_env: "XTILES_API_KEY"
  payload_shape: "markdown"    # markdown | email_bot
  # process_id: "planboard"    # metaInfo.processId for email_bot payloads
  # timeout: 120               # seconds; unset = wait indefinitely

# Conversation session
session:
  mode: "stateful"             # stateful | full_history
  reset_on_same_mode: false    # reset even when the mode is re-assigned unchanged

# Local CORS proxy for the publish endpoint
proxy:
  host: "127.0.0.1"
  port: 8787

# system_prompt_path: "./prompts/board.md"

# Logging
log_level: "info"              # debug | info | warn | error
log_format: "text"             # text | json
"""
