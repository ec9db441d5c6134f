"""
Configuration Management - YAML-based configuration with environment overrides
=============================================================================

This module handles all configuration aspects including:
- Loading from YAML files
- Environment variable overrides
- Default values
- Configuration validation
"""

import os
import yaml
from pathlib import Path
from typing import Any, Dict, Optional
from dataclasses import dataclass, field, asdict

from .exceptions import ConfigError

ENV_PREFIX = "JOB_ASSISTANT_"

SUPPORTED_PROVIDERS = ("openai", "groq", "openrouter")

PROVIDER_KEY_VARS = {
    "openai": "OPENAI_API_KEY",
    "groq": "GROQ_API_KEY",
    "openrouter": "OPENROUTER_API_KEY",
}


@dataclass
class AssistantConfig:
    """
    Chat assistant configuration.

    Controls the keyword matcher and the simulated typing delay used
    by chat sessions.
    """
    # Inputs longer than this are truncated before matching
    max_input_length: int = 4000

    # Typing delay bounds in seconds
    typing_delay_min: float = 1.0
    typing_delay_max: float = 2.0

    # Optional YAML file replacing the built-in FAQ rules
    rules_file: str = ""

    # Opening message of every chat session (empty = built-in greeting)
    greeting: str = ""

    # Web chat sessions: capacity and idle lifetime in seconds
    max_sessions: int = 1000
    session_ttl: float = 1800.0

    def validate(self) -> None:
        """Validate assistant configuration."""
        if self.max_input_length < 1:
            raise ConfigError(
                f"max_input_length must be at least 1, got {self.max_input_length}"
            )

        if self.typing_delay_min < 0:
            raise ConfigError("typing_delay_min cannot be negative")

        if self.typing_delay_max < self.typing_delay_min:
            raise ConfigError(
                "typing_delay_max must not be lower than typing_delay_min",
                {"min": self.typing_delay_min, "max": self.typing_delay_max}
            )

        if self.max_sessions < 1:
            raise ConfigError(f"max_sessions must be at least 1, got {self.max_sessions}")

        if self.session_ttl <= 0:
            raise ConfigError(f"session_ttl must be positive, got {self.session_ttl}")


@dataclass
class LLMConfig:
    """
    LLM provider configuration.

    Settings for the hosted chat-completion API used by interview
    preparation.
    """
    provider: str = "openai"  # openai, groq, openrouter
    model: str = ""  # Empty = provider default
    api_key: str = ""  # Loaded from environment
    api_base: str = ""  # Empty = provider default

    temperature: float = 0.7
    max_tokens: int = 1500
    top_p: float = 1.0

    timeout: int = 30

    def validate(self) -> None:
        """Validate LLM configuration parameters."""
        if self.provider not in SUPPORTED_PROVIDERS:
            raise ConfigError(f"Invalid LLM provider: {self.provider}")

        if not 0 <= self.temperature <= 2:
            raise ConfigError(f"Temperature must be between 0 and 2, got {self.temperature}")

        if self.max_tokens < 1 or self.max_tokens > 16384:
            raise ConfigError(f"max_tokens must be between 1 and 16384, got {self.max_tokens}")

        if self.timeout < 1:
            raise ConfigError(f"timeout must be positive, got {self.timeout}")

    @property
    def enabled(self) -> bool:
        """Interview preparation is only available with an API key."""
        return bool(self.api_key)


@dataclass
class UIConfig:
    """
    User interface configuration for the web API and the terminal chat.
    """
    web_host: str = "127.0.0.1"
    web_port: int = 8080
    web_debug: bool = False

    tui_theme: str = "dark"
    show_timestamps: bool = True

    def validate(self) -> None:
        """Validate UI configuration."""
        if self.web_port < 1 or self.web_port > 65535:
            raise ConfigError(f"Invalid web port: {self.web_port}")

        if self.tui_theme not in ("dark", "light"):
            raise ConfigError(f"Invalid TUI theme: {self.tui_theme}")


@dataclass
class Config:
    """
    Main configuration container.

    Aggregates all configuration sections into a single object.
    """
    app_name: str = "Student Job Assistant"
    version: str = "1.0.0"
    debug: bool = False

    assistant: AssistantConfig = field(default_factory=AssistantConfig)
    llm: LLMConfig = field(default_factory=LLMConfig)
    ui: UIConfig = field(default_factory=UIConfig)

    # Paths (set at runtime)
    config_dir: str = ""
    data_dir: str = ""
    log_dir: str = ""

    def validate(self) -> None:
        """
        Validate all configuration sections.

        Raises:
            ConfigError: If any configuration section is invalid
        """
        self.assistant.validate()
        self.llm.validate()
        self.ui.validate()

    def to_dict(self) -> Dict[str, Any]:
        """Convert configuration to dictionary (API key redacted)."""
        llm = asdict(self.llm)
        llm["api_key"] = ""
        return {
            "app_name": self.app_name,
            "version": self.version,
            "debug": self.debug,
            "assistant": asdict(self.assistant),
            "llm": llm,
            "ui": asdict(self.ui),
        }


def get_default_config_dir() -> Path:
    """Get the default configuration directory path."""
    if f"{ENV_PREFIX}CONFIG_DIR" in os.environ:
        return Path(os.environ[f"{ENV_PREFIX}CONFIG_DIR"])

    if "XDG_CONFIG_HOME" in os.environ:
        return Path(os.environ["XDG_CONFIG_HOME"]) / "job-assistant"

    return Path.home() / ".config" / "job-assistant"


def get_default_data_dir() -> Path:
    """Get the default data directory path."""
    if f"{ENV_PREFIX}DATA_DIR" in os.environ:
        return Path(os.environ[f"{ENV_PREFIX}DATA_DIR"])

    if "XDG_DATA_HOME" in os.environ:
        return Path(os.environ["XDG_DATA_HOME"]) / "job-assistant"

    return Path.home() / ".local" / "share" / "job-assistant"


def load_config(config_path: Optional[str] = None, load_env: bool = True) -> Config:
    """
    Load configuration from YAML file with environment variable overrides.

    Values are applied in this order:
    1. Default values from dataclass
    2. Values from YAML file
    3. Environment variable overrides

    Args:
        config_path: Path to configuration file (optional)
        load_env: Whether to load environment variable overrides

    Returns:
        Config object with loaded values

    Raises:
        ConfigError: If configuration is invalid or cannot be loaded
    """
    config = Config()

    config.config_dir = str(get_default_config_dir())
    config.data_dir = str(get_default_data_dir())
    config.log_dir = str(Path(config.data_dir) / "logs")

    if config_path:
        yaml_path = Path(config_path)
        if not yaml_path.exists():
            raise ConfigError("Config file not found", {"path": str(yaml_path)})
    else:
        yaml_path = Path(config.config_dir) / "config.yaml"

    if yaml_path.exists():
        try:
            with open(yaml_path, "r", encoding="utf-8") as f:
                yaml_config = yaml.safe_load(f) or {}
        except (yaml.YAMLError, UnicodeDecodeError) as e:
            raise ConfigError(f"Failed to parse config file: {e}", {"path": str(yaml_path)})
        except OSError as e:
            raise ConfigError(f"Failed to read config file: {e}", {"path": str(yaml_path)})

        if not isinstance(yaml_config, dict):
            raise ConfigError("Config file must contain a mapping", {"path": str(yaml_path)})

        _apply_yaml_config(config, yaml_config)

    if load_env:
        _apply_env_overrides(config)

    config.validate()

    return config


def _apply_yaml_config(config: Config, yaml_config: Dict[str, Any]) -> None:
    """
    Apply YAML configuration values to Config object.

    Unknown keys are ignored.
    """
    for key in ("app_name", "version", "debug"):
        if key in yaml_config:
            setattr(config, key, yaml_config[key])

    for section in ("assistant", "llm", "ui"):
        values = yaml_config.get(section) or {}
        if not isinstance(values, dict):
            raise ConfigError(f"Config section '{section}' must be a mapping")

        section_obj = getattr(config, section)
        for key, value in values.items():
            if hasattr(section_obj, key):
                setattr(section_obj, key, value)


def _apply_env_overrides(config: Config) -> None:
    """
    Apply environment variable overrides to Config object.

    Environment variables follow the pattern: JOB_ASSISTANT_SECTION_KEY
    For example: JOB_ASSISTANT_LLM_API_KEY, JOB_ASSISTANT_UI_WEB_PORT

    OPENAI_API_KEY, GROQ_API_KEY and OPENROUTER_API_KEY are read only for
    the matching provider, and JOB_ASSISTANT_LLM_API_KEY wins over them.
    """
    env_mappings = {
        # Assistant settings
        "JOB_ASSISTANT_ASSISTANT_MAX_INPUT_LENGTH": ("assistant", "max_input_length", int),
        "JOB_ASSISTANT_ASSISTANT_TYPING_DELAY_MIN": ("assistant", "typing_delay_min", float),
        "JOB_ASSISTANT_ASSISTANT_TYPING_DELAY_MAX": ("assistant", "typing_delay_max", float),
        "JOB_ASSISTANT_ASSISTANT_RULES_FILE": ("assistant", "rules_file"),
        "JOB_ASSISTANT_ASSISTANT_MAX_SESSIONS": ("assistant", "max_sessions", int),
        "JOB_ASSISTANT_ASSISTANT_SESSION_TTL": ("assistant", "session_ttl", float),

        # LLM settings
        "JOB_ASSISTANT_LLM_PROVIDER": ("llm", "provider"),
        "JOB_ASSISTANT_LLM_MODEL": ("llm", "model"),
        "JOB_ASSISTANT_LLM_API_KEY": ("llm", "api_key"),
        "JOB_ASSISTANT_LLM_API_BASE": ("llm", "api_base"),
        "JOB_ASSISTANT_LLM_TEMPERATURE": ("llm", "temperature", float),
        "JOB_ASSISTANT_LLM_MAX_TOKENS": ("llm", "max_tokens", int),

        # UI settings
        "JOB_ASSISTANT_UI_WEB_HOST": ("ui", "web_host"),
        "JOB_ASSISTANT_UI_WEB_PORT": ("ui", "web_port", int),
        "JOB_ASSISTANT_UI_WEB_DEBUG": ("ui", "web_debug", bool),
    }

    for env_var, mapping in env_mappings.items():
        value = os.environ.get(env_var)
        if value is None:
            continue

        section, key = mapping[0], mapping[1]
        converter = mapping[2] if len(mapping) > 2 else str

        if converter is bool:
            converted = value.lower() in ("true", "1", "yes", "on")
        else:
            try:
                converted = converter(value)
            except ValueError:
                raise ConfigError(f"Invalid value for {env_var}: {value!r}")

        setattr(getattr(config, section), key, converted)

    # Vendor keys only apply to their own provider
    if "JOB_ASSISTANT_LLM_API_KEY" not in os.environ:
        vendor_key = os.environ.get(PROVIDER_KEY_VARS.get(config.llm.provider, ""))
        if vendor_key:
            config.llm.api_key = vendor_key


def save_config(config: Config, config_path: Optional[str] = None) -> None:
    """
    Save configuration to YAML file. The API key is never written.

    Raises:
        ConfigError: If configuration cannot be saved
    """
    if config_path:
        yaml_path = Path(config_path)
    else:
        yaml_path = Path(config.config_dir) / "config.yaml"

    try:
        yaml_path.parent.mkdir(parents=True, exist_ok=True)
        with open(yaml_path, "w", encoding="utf-8") as f:
            yaml.dump(config.to_dict(), f, default_flow_style=False, sort_keys=False)
    except OSError as e:
        raise ConfigError(f"Failed to save config file: {e}", {"path": str(yaml_path)})
