"""Configuration management for git-fixup."""
from pathlib import Path
from datetime import datetime
from typing import Optional
from pydantic import BaseModel, Field, field_validator
import tomli
import tomli_w
import os
import re

from .models import FixupKind, UpdateMode

DEFAULT_CONFIG_FILENAME = ".gitfixup.toml"
CONFIG_SECTION = "gitfixup"

ENV_MAPPING = {
    'GIT_FIXUP_KIND': 'kind',
    'GIT_FIXUP_UPDATE_MODE': 'update_mode',
    'GIT_FIXUP_NO_VERIFY': 'no_verify',
    'GIT_FIXUP_ALWAYS_LOG': 'always_log',
    'GIT_FIXUP_LOG_FILE': 'log_file',
}
BOOLEAN_FIELDS = {'no_verify', 'always_log'}


def _sanitize_string(value: str) -> str:
    """Strip control characters and cap length."""
    if not value:
        return value
    value = re.sub(r'[\x00-\x08\x0B\x0C\x0E-\x1F\x7F]', '', value)
    return value[:1000].strip()


def _is_safe_path(path: str) -> bool:
    """Relative paths inside the repository only."""
    if not path:
        return False
    if '..' in Path(path).parts or os.path.isabs(path) or '\\' in path:
        return False
    return True


def _environment_settings() -> dict:
    """Settings given through ``GIT_FIXUP_*`` variables."""
    env_data = {}
    for env_var, field_name in ENV_MAPPING.items():
        if env_var not in os.environ:
            continue
        value = _sanitize_string(os.environ[env_var])
        if field_name in BOOLEAN_FIELDS:
            value = value.lower() in ['true', '1', 'yes', 'on']
        env_data[field_name] = value
    return env_data


class Config(BaseModel):
    """Configuration settings for git-fixup.

    Values come from, in increasing priority: defaults, the
    ``[gitfixup]`` table of ``.gitfixup.toml``, ``GIT_FIXUP_*``
    environment variables and finally command line options.
    """

    kind: FixupKind = Field(
        default=FixupKind.FIXUP,
        description="Autosquash marker to prefix the message with (fixup, squash or amend)"
    )

    update_mode: UpdateMode = Field(
        default=UpdateMode.SYNCHRONOUS_CANCELLABLE,
        description="How to wait for change tracking before committing"
    )

    no_verify: bool = Field(
        default=False,
        description="Skip pre-commit hooks when creating the fixup commit"
    )

    always_log: bool = Field(
        default=False,
        description="Whether to always generate log files"
    )

    log_file: Optional[str] = Field(
        default=None,
        description="Path to log file (if not using automatic log file generation)"
    )

    def __init__(self, **data):
        """Initialize config; explicit keyword arguments beat the environment."""
        super().__init__(**{**_environment_settings(), **data})

    @field_validator('kind', mode='before')
    @classmethod
    def _coerce_kind(cls, value):
        """Accept ``fixup`` as well as the raw ``fixup! `` marker."""
        if isinstance(value, str) and value.strip().upper() in FixupKind.__members__:
            return FixupKind[value.strip().upper()]
        return value

    @classmethod
    def load(cls, repo_path: Path) -> 'Config':
        """Load configuration from the config file.

        Args:
            repo_path: Path to the git repository

        Returns:
            Config: Configuration object with values from file or defaults
        """
        config_path = repo_path / DEFAULT_CONFIG_FILENAME

        if not config_path.exists():
            return cls()

        try:
            with config_path.open('rb') as f:
                config_data = tomli.load(f)

            section = dict(config_data.get(CONFIG_SECTION, config_data))
            for key in ['kind', 'update_mode', 'log_file']:
                if key in section and isinstance(section[key], str):
                    section[key] = _sanitize_string(section[key])

            if section.get('log_file') and not _is_safe_path(section['log_file']):
                print(f"Warning: Unsafe log file path '{section['log_file']}', using default")
                section['log_file'] = None

            # environment variables override the file
            return cls(**{**section, **_environment_settings()})
        except Exception as e:
            print(f"Warning: Error reading config file: {e}")
            return cls()

    def save(self, repo_path: Path) -> None:
        """Save configuration to the config file.

        Args:
            repo_path: Path to the git repository
        """
        config_path = repo_path / DEFAULT_CONFIG_FILENAME

        try:
            config_dict = {k: v for k, v in self.model_dump(mode='json').items() if v is not None}
            config_dict['kind'] = self.kind.name.lower()

            if config_dict.get('log_file') and not _is_safe_path(config_dict['log_file']):
                print(f"Warning: Unsafe log file path '{config_dict['log_file']}', not saving")
                del config_dict['log_file']

            with config_path.open('wb') as f:
                tomli_w.dump({CONFIG_SECTION: config_dict}, f)
        except Exception as e:
            print(f"Error saving config file: {e}")

    def get_log_file(self) -> Optional[Path]:
        """Get the path to the log file.

        If always_log is True, generates a timestamped log file name.
        Otherwise, returns the configured log_file path if set.

        Returns:
            Optional[Path]: Path to the log file, or None if logging is disabled
        """
        if self.always_log:
            timestamp = datetime.now().strftime("%Y-%m-%d_%H-%M-%S")
            return Path(f"gitfixup_log-{timestamp}.log")
        elif self.log_file:
            if _is_safe_path(self.log_file):
                return Path(self.log_file)
            print(f"Warning: Unsafe log file path '{self.log_file}', using default")
            return None
        return None
