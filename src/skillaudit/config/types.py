"""Configuration type definitions for skillaudit settings.

These are "config section" types nested within the main settings class:
- LimitsConfig: name, description and body size limits
- LoggingConfig: log level

All types use `extra="allow"` so that unknown keys survive loading and
can be reported as likely typos instead of being silently dropped.
"""

import typing as _typing

import pydantic as _pydantic

import skillaudit.constants as constants


class ConfigBase(_pydantic.BaseModel):
    """Base class for all config types."""

    model_config = _pydantic.ConfigDict(extra="allow")

    def get_extra_fields(self) -> dict[str, _typing.Any]:
        """
        Return fields that were provided but not in the schema.

        Returns:
            Dict of field_name → value for all unrecognized fields.
        """
        return dict(self.model_extra) if self.model_extra else {}

    def collect_all_extra_fields(
        self,
        prefix: str = "",
    ) -> dict[str, _typing.Any]:
        """
        Collect extra fields from this config and nested configs.

        Returns a flat dict with dotted paths as keys, e.g.:
            {"limits.body_max_line": 400}

        Args:
            prefix: Dotted path prefix (used in recursion).
        """
        result: dict[str, _typing.Any] = {}

        for key, value in self.get_extra_fields().items():
            result[f"{prefix}.{key}" if prefix else key] = value

        for field_name in self.__class__.model_fields:
            value = getattr(self, field_name, None)
            if isinstance(value, ConfigBase):
                child_prefix = f"{prefix}.{field_name}" if prefix else field_name
                result.update(value.collect_all_extra_fields(child_prefix))

        return result


# =============================================================================
# Limits
# =============================================================================


class LimitsConfig(ConfigBase):
    """
    Size limits enforced by the audit and the harness.

    YAML section: limits.*
    """

    name_max_length: int = _pydantic.Field(default=constants.NAME_MAX_LENGTH, ge=1)
    """Maximum characters in a skill name."""

    description_max_length: int = _pydantic.Field(
        default=constants.DESCRIPTION_MAX_LENGTH, ge=1
    )
    """Maximum characters in a skill description."""

    body_max_lines: int = _pydantic.Field(default=constants.SKILL_BODY_SOFT_LIMIT, ge=1)
    """Maximum body lines (warning in the audit, failure in the harness)."""

    body_max_words: int = _pydantic.Field(default=constants.SKILL_BODY_WORD_LIMIT, ge=1)
    """Maximum body words (harness performance suite)."""


# =============================================================================
# Logging
# =============================================================================


class LoggingConfig(ConfigBase):
    """
    Logging settings.

    YAML section: logging.*
    """

    level: _typing.Literal["debug", "info", "warning", "error"] = "warning"
    """Log level for diagnostics on stderr."""
