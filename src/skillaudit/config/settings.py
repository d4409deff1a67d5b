"""
Settings configuration using pydantic-settings.

Loads configuration from:
1. Constructor arguments (highest precedence)
2. Environment variables with SKILLAUDIT_ prefix
3. .skillaudit.yaml in the working directory (if present)

Nested config uses double underscore delimiter:
  SKILLAUDIT_LIMITS__BODY_MAX_LINES=400
  SKILLAUDIT_LOGGING__LEVEL=debug
"""

import pathlib as _pathlib
import typing as _typing

import pydantic as _pydantic
import pydantic_settings as _pydantic_settings

import skillaudit.config.types as types
import skillaudit.constants as constants

CONFIG_FILENAME = ".skillaudit.yaml"
"""Optional YAML config file, read from the working directory."""


class AuditSettings(_pydantic_settings.BaseSettings):
    """
    skillaudit configuration settings.

    All settings can be overridden via environment variables with the
    SKILLAUDIT_ prefix. For nested config, use double underscore:
    SKILLAUDIT_LIMITS__DESCRIPTION_MAX_LENGTH=512

    Config precedence (highest to lowest):
    1. Constructor arguments
    2. Environment variables (SKILLAUDIT_*)
    3. .skillaudit.yaml
    4. Built-in defaults
    """

    model_config = _pydantic_settings.SettingsConfigDict(
        env_prefix="SKILLAUDIT_",
        env_nested_delimiter="__",  # SKILLAUDIT_LIMITS__BODY_MAX_LINES
        yaml_file=CONFIG_FILENAME,
        yaml_file_encoding="utf-8",
        extra="allow",  # unknown keys are kept so they can be reported
    )

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[_pydantic_settings.BaseSettings],
        init_settings: _pydantic_settings.PydanticBaseSettingsSource,
        env_settings: _pydantic_settings.PydanticBaseSettingsSource,
        dotenv_settings: _pydantic_settings.PydanticBaseSettingsSource,
        file_secret_settings: _pydantic_settings.PydanticBaseSettingsSource,
    ) -> tuple[_pydantic_settings.PydanticBaseSettingsSource, ...]:
        """
        Configure settings sources with precedence:
        1. init_settings (constructor args), highest
        2. env_settings (SKILLAUDIT_* env vars)
        3. yaml_settings (.skillaudit.yaml)
        4. (defaults via Field definitions), lowest
        """
        _ = dotenv_settings, file_secret_settings
        return (
            init_settings,
            env_settings,
            _pydantic_settings.YamlConfigSettingsSource(settings_cls),
        )

    # =========================================================================
    # Corpus layout
    # =========================================================================

    root: _pathlib.Path = _pydantic.Field(
        default_factory=_pathlib.Path.cwd,
        description="Repository root holding the skills directory and catalog",
    )

    skills_dir: str = _pydantic.Field(
        default=constants.DEFAULT_SKILLS_DIR,
        description="Skills directory, relative to root",
    )

    drafts_dir: str = _pydantic.Field(
        default=constants.DEFAULT_DRAFTS_DIR,
        description="Drafts subtree, relative to the skills directory",
    )

    skill_filename: str = _pydantic.Field(
        default=constants.DEFAULT_SKILL_FILENAME,
        description="File name of a skill document",
    )

    catalog_file: str = _pydantic.Field(
        default=constants.DEFAULT_CATALOG_FILE,
        description="Catalog JSON file, relative to root",
    )

    # =========================================================================
    # Execution
    # =========================================================================

    workers: int = _pydantic.Field(
        default=constants.DEFAULT_WORKERS,
        ge=1,
        description="Worker threads for per-document checks",
    )

    # =========================================================================
    # Nested config sections
    # =========================================================================

    limits: types.LimitsConfig = _pydantic.Field(default_factory=types.LimitsConfig)
    """Size limits."""

    logging: types.LoggingConfig = _pydantic.Field(default_factory=types.LoggingConfig)
    """Logging settings."""

    @_pydantic.field_validator("root", mode="after")
    @classmethod
    def _resolve_root(cls, value: _pathlib.Path) -> _pathlib.Path:
        return value.expanduser().resolve()

    def get_extra_fields(self) -> dict[str, _typing.Any]:
        """Get unknown fields at the top level of the settings."""
        return dict(self.model_extra) if self.model_extra else {}

    def collect_all_extra_fields(self) -> dict[str, _typing.Any]:
        """
        Collect unknown fields from the settings and nested sections.

        Returns a flat dict with dotted paths as keys, e.g.:
            {"worker": 2, "limits.body_max_line": 400}
        """
        result = self.get_extra_fields()
        result.update(self.limits.collect_all_extra_fields(prefix="limits"))
        result.update(self.logging.collect_all_extra_fields(prefix="logging"))
        return result

    @property
    def skills_path(self) -> _pathlib.Path:
        """Absolute path to the skills directory."""
        return self.root / self.skills_dir

    @property
    def catalog_path(self) -> _pathlib.Path:
        """Absolute path to the catalog file."""
        return self.root / self.catalog_file
