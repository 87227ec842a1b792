"""Configuration loading and validation.

Usage:
    config = load("a11y-audit.yaml")          # raises ConfigError on bad config
    config = load_or_default("a11y-audit.yaml")
    generate_template("a11y-audit.yaml")      # writes example file to disk
"""

import os
from dataclasses import dataclass, field
from pathlib import Path

import yaml

DEFAULT_CONFIG_PATH = "a11y-audit.yaml"
PROVIDERS = ("anthropic", "none")


# ---------------------------------------------------------------------------
# Exceptions
# ---------------------------------------------------------------------------

class ConfigError(Exception):
    """Raised when the configuration is missing or invalid."""


# ---------------------------------------------------------------------------
# Config dataclasses
# ---------------------------------------------------------------------------

@dataclass
class ScannerConfig:
    url: str = ""
    timeout: int = 60


@dataclass
class GeneratorConfig:
    provider: str = "anthropic"
    api_key: str = ""
    model: str = "claude-3-5-sonnet-20241022"
    timeout: int = 30
    max_tokens: int = 4000


@dataclass
class Config:
    scanner: ScannerConfig = field(default_factory=ScannerConfig)
    generator: GeneratorConfig = field(default_factory=GeneratorConfig)


# ---------------------------------------------------------------------------
# Loader
# ---------------------------------------------------------------------------

def load(config_path: str = DEFAULT_CONFIG_PATH) -> Config:
    """Load and validate configuration from a YAML file.

    Environment variables A11Y_SCANNER_URL and ANTHROPIC_API_KEY override
    file values.

    Raises:
        ConfigError: if the file is missing, malformed, or a value is invalid.
    """
    path = Path(config_path)

    if not path.exists():
        raise ConfigError(
            f"Config file not found: '{config_path}'\n"
            "Run `a11y-audit init` to generate a template."
        )

    try:
        with path.open(encoding="utf-8") as f:
            raw = yaml.safe_load(f)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Failed to parse '{config_path}': {exc}") from exc

    if raw is None:
        raw = {}
    if not isinstance(raw, dict):
        raise ConfigError(f"'{config_path}' must be a YAML mapping at the top level.")

    config = _from_mapping(raw)
    _validate(config)
    return config


def load_or_default(config_path: str = DEFAULT_CONFIG_PATH) -> Config:
    """Like ``load``, but return defaults (plus env overrides) when the file is absent."""
    if Path(config_path).exists():
        return load(config_path)
    config = _from_mapping({})
    _validate(config)
    return config


def _section(raw: dict, name: str) -> dict:
    section = raw.get(name) or {}
    if not isinstance(section, dict):
        raise ConfigError(f"'{name}' must be a mapping.")
    return section


def _int(section: dict, key: str, default: int, name: str) -> int:
    value = section.get(key, default)
    try:
        return int(value)
    except (TypeError, ValueError) as exc:
        raise ConfigError(f"'{name}.{key}' must be an integer, got {value!r}") from exc


def _from_mapping(raw: dict) -> Config:
    scanner = _section(raw, "scanner")
    generator = _section(raw, "generator")
    defaults = GeneratorConfig()

    url     = os.environ.get("A11Y_SCANNER_URL")  or scanner.get("url", "")
    api_key = os.environ.get("ANTHROPIC_API_KEY") or generator.get("api_key", "")

    return Config(
        scanner=ScannerConfig(
            url=str(url or "").strip(),
            timeout=_int(scanner, "timeout", ScannerConfig.timeout, "scanner"),
        ),
        generator=GeneratorConfig(
            provider=str(generator.get("provider") or defaults.provider).strip().lower(),
            api_key=str(api_key or "").strip(),
            model=str(generator.get("model") or defaults.model).strip(),
            timeout=_int(generator, "timeout", defaults.timeout, "generator"),
            max_tokens=_int(generator, "max_tokens", defaults.max_tokens, "generator"),
        ),
    )


def _validate(config: Config) -> None:
    """Raise ConfigError if a value is out of range."""
    errors: list[str] = []

    if config.generator.provider not in PROVIDERS:
        errors.append(
            f"  - 'generator.provider' must be one of {', '.join(PROVIDERS)} "
            f"(got '{config.generator.provider}')"
        )
    if config.scanner.timeout <= 0:
        errors.append("  - 'scanner.timeout' must be a positive number of seconds")
    if config.generator.timeout <= 0:
        errors.append("  - 'generator.timeout' must be a positive number of seconds")
    if config.generator.max_tokens <= 0:
        errors.append("  - 'generator.max_tokens' must be positive")

    if errors:
        raise ConfigError("Invalid configuration:\n" + "\n".join(errors))


def require_scanner(config: Config) -> str:
    """Return the scan service URL, or raise ConfigError if none is configured."""
    if not config.scanner.url:
        raise ConfigError(
            "'scanner.url' is missing (or set the A11Y_SCANNER_URL environment variable)"
        )
    return config.scanner.url


# ---------------------------------------------------------------------------
# Template generator (used by `init` command)
# ---------------------------------------------------------------------------

TEMPLATE = """\
scanner:
  url: "http://localhost:3000"    # Service answering POST /analyze with axe-core results
  timeout: 60

generator:
  provider: "anthropic"           # "none" always uses rule-based requirements
  api_key: ""                     # Or set ANTHROPIC_API_KEY
  model: "claude-3-5-sonnet-20241022"
  timeout: 30
  max_tokens: 4000
"""


def generate_template(output_path: str = DEFAULT_CONFIG_PATH) -> None:
    """Write a template a11y-audit.yaml to *output_path*.

    Raises:
        ConfigError: if the file already exists (to avoid overwriting secrets).
    """
    path = Path(output_path)
    if path.exists():
        raise ConfigError(
            f"'{output_path}' already exists. Remove it first or choose a different path."
        )
    path.write_text(TEMPLATE, encoding="utf-8")
