"""Configuration management for commitcheck."""
from pathlib import Path
from datetime import datetime
from typing import List, Optional
from pydantic import BaseModel, Field, ValidationError
import tomli
import tomli_w
import os
import re

from rich.console import Console

from .batch import BatchOptions
from .models import DEFAULT_TYPES
from .rules import ConfigurationError, RuleSet, build_rule_set

DEFAULT_CONFIG_FILENAME = ".commitcheck.toml"
CONFIG_SECTION = "commitcheck"

ENV_PREFIX = "COMMIT_CHECK_"
STRING_FIELDS = ['types', 'log_file']
BOOL_FIELDS = [
    'require_scope',
    'fail_on_error',
    'validate_commits',
    'validate_title',
    'always_log',
]
INT_FIELDS = ['min_subject_length', 'max_subject_length']

err_console = Console(stderr=True)


def parse_bool(value: str) -> bool:
    return value.strip().lower() in ['true', '1', 'yes', 'on']


class Config(BaseModel):
    """Configuration settings for commitcheck.

    Values mirror the inputs a CI step passes in as strings: the comma
    separated list of types, scope and length rules, and the policy flags
    deciding which inputs are checked and whether failures fail the run.
    They can be set in the config file, via environment variables or on
    the command line.
    """

    types: str = Field(
        default=",".join(sorted(DEFAULT_TYPES)),
        description="Comma-separated list of allowed commit types"
    )

    require_scope: bool = Field(
        default=False,
        description="Whether a scope is required in every header"
    )

    min_subject_length: int = Field(
        default=1,
        description="Minimum subject length"
    )

    max_subject_length: int = Field(
        default=100,
        description="Maximum subject length"
    )

    fail_on_error: bool = Field(
        default=True,
        description="Whether an invalid message fails the run (non-zero exit)"
    )

    validate_commits: bool = Field(
        default=True,
        description="Whether commit messages count toward the verdict"
    )

    validate_title: bool = Field(
        default=True,
        description="Whether the PR title counts toward the verdict"
    )

    always_log: bool = Field(
        default=False,
        description="Whether to always generate log files"
    )

    log_file: Optional[str] = Field(
        default=None,
        description="Path to log file (if not using automatic log file generation)"
    )

    @staticmethod
    def _sanitize_string(value: str) -> str:
        """Strip control characters and bound the length of string values."""
        if not value:
            return value

        value = re.sub(r'[\x00-\x08\x0B\x0C\x0E-\x1F\x7F]', '', value)

        if len(value) > 1000:
            value = value[:1000]

        return value.strip()

    @staticmethod
    def _is_safe_path(path: str) -> bool:
        """Check if a path is safe (no path traversal)."""
        if not path:
            return False

        if '..' in path or path.startswith('/') or '\\' in path:
            return False

        if os.path.isabs(path):
            return False

        return True

    @classmethod
    def load(cls, repo_path: Path) -> 'Config':
        """Load configuration from the config file.

        Args:
            repo_path: Path to the repository root

        Returns:
            Config: Configuration object with values from file or defaults

        Raises:
            ConfigurationError: If the file is not valid TOML or holds invalid values
        """
        config_path = repo_path / DEFAULT_CONFIG_FILENAME

        if not config_path.exists():
            return cls()

        try:
            with config_path.open('rb') as f:
                config_data = tomli.load(f)
        except (OSError, tomli.TOMLDecodeError) as e:
            raise ConfigurationError(f"Cannot read {config_path.name}: {e}") from e

        config_section = config_data.get(CONFIG_SECTION, {})
        if not isinstance(config_section, dict):
            raise ConfigurationError(f"[{CONFIG_SECTION}] in {config_path.name} must be a table")
        config_section = dict(config_section)

        for key in STRING_FIELDS:
            if key in config_section and isinstance(config_section[key], str):
                config_section[key] = cls._sanitize_string(config_section[key])

        # TOML arrays are accepted for types as well
        if isinstance(config_section.get('types'), list):
            config_section['types'] = ",".join(str(t) for t in config_section['types'])

        if config_section.get('log_file') and not cls._is_safe_path(config_section['log_file']):
            err_console.print(
                f"[yellow]Warning: Unsafe log file path '{config_section['log_file']}', using default[/yellow]"
            )
            config_section['log_file'] = None

        return cls(**config_section)

    def save(self, repo_path: Path) -> None:
        """Save configuration to the config file.

        Args:
            repo_path: Path to the repository root
        """
        config_path = repo_path / DEFAULT_CONFIG_FILENAME

        # TOML has no null, drop unset values
        config_dict = {k: v for k, v in self.model_dump().items() if v is not None}

        if config_dict.get('log_file') and not self._is_safe_path(config_dict['log_file']):
            err_console.print(
                f"[yellow]Warning: Unsafe log file path '{config_dict['log_file']}', not saving[/yellow]"
            )
            del config_dict['log_file']

        with config_path.open('wb') as f:
            tomli_w.dump({CONFIG_SECTION: config_dict}, f)

    def allowed_types(self) -> List[str]:
        return [t.strip() for t in self.types.split(',') if t.strip()]

    def to_rule_set(self) -> RuleSet:
        """Build the immutable rule set for a run.

        Raises:
            ConfigurationError: If the configured rule values are invalid
        """
        return build_rule_set(
            allowed_types=self.allowed_types(),
            require_scope=self.require_scope,
            min_subject_length=self.min_subject_length,
            max_subject_length=self.max_subject_length,
        )

    def batch_options(self) -> BatchOptions:
        return BatchOptions(
            validate_title=self.validate_title,
            validate_commits=self.validate_commits,
        )

    def get_log_file(self) -> Optional[Path]:
        """Get the path to the log file.

        If always_log is True, generates a timestamped log file name.
        Otherwise, returns the configured log_file path if set.

        Returns:
            Optional[Path]: Path to the log file, or None if logging is disabled
        """
        if self.always_log:
            timestamp = datetime.now().strftime("%Y-%m-%d_%H-%M-%S")
            return Path(f"commitcheck_log-{timestamp}.log")
        elif self.log_file:
            if self._is_safe_path(self.log_file):
                return Path(self.log_file)
            err_console.print(
                f"[yellow]Warning: Unsafe log file path '{self.log_file}', logging disabled[/yellow]"
            )
            return None
        return None

    def __init__(self, **data):
        """Initialize config with environment variable support and sanitization."""
        env_data = {}

        for field_name in STRING_FIELDS + BOOL_FIELDS + INT_FIELDS:
            env_var = ENV_PREFIX + field_name.upper()
            if env_var not in os.environ:
                continue
            value = os.environ[env_var]

            if field_name in STRING_FIELDS:
                value = self._sanitize_string(value)
            elif field_name in BOOL_FIELDS:
                value = parse_bool(value)
            else:
                try:
                    value = int(value)
                except ValueError:
                    raise ConfigurationError(
                        f"{env_var} must be an integer (got '{value}')"
                    ) from None

            env_data[field_name] = value

        # Explicit values win over the environment
        merged_data = {**env_data, **data}

        try:
            super().__init__(**merged_data)
        except ValidationError as e:
            messages = "; ".join(
                f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}" for err in e.errors()
            )
            raise ConfigurationError(f"Invalid configuration: {messages}") from e
