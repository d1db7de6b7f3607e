"""Runtime settings resolved from environment variables and CLI flags."""

from __future__ import annotations

import logging
import os
import shlex
import shutil
from dataclasses import dataclass, replace

VALIDATOR_ENV_VAR = "WIT_LSP_VALIDATOR"
LOG_LEVEL_ENV_VAR = "WIT_LSP_LOG_LEVEL"

DEFAULT_VALIDATOR: tuple[str, ...] = ("wasm-tools",)
DEFAULT_LOG_LEVEL = "WARNING"

# Arguments appended to the validator command, before the target directory.
VALIDATOR_SUBCOMMAND: tuple[str, ...] = ("component", "wit")


def parse_command(value: str) -> tuple[str, ...]:
    """Split a shell-like command string; an unparsable string yields ``()``."""
    try:
        return tuple(shlex.split(value))
    except ValueError:
        return ()


def _parse_log_level(value: str | None, default: str = DEFAULT_LOG_LEVEL) -> str:
    if not value or not value.strip():
        return default
    level = value.strip().upper()
    if isinstance(logging.getLevelName(level), int):
        return level
    return default


@dataclass(frozen=True)
class Settings:
    """Server configuration."""

    validator_command: tuple[str, ...] = DEFAULT_VALIDATOR
    log_level: str = DEFAULT_LOG_LEVEL
    log_file: str | None = None

    @classmethod
    def from_env(cls) -> Settings:
        command = parse_command(os.getenv(VALIDATOR_ENV_VAR, "")) or DEFAULT_VALIDATOR
        return cls(
            validator_command=command,
            log_level=_parse_log_level(os.getenv(LOG_LEVEL_ENV_VAR)),
        )

    def with_overrides(
        self,
        *,
        validator: str | None = None,
        log_level: str | None = None,
        log_file: str | None = None,
    ) -> Settings:
        """Return a copy with any non-``None`` CLI values applied."""
        updated = self
        if validator:
            command = parse_command(validator)
            if command:
                updated = replace(updated, validator_command=command)
        if log_level:
            updated = replace(updated, log_level=_parse_log_level(log_level, updated.log_level))
        if log_file:
            updated = replace(updated, log_file=log_file)
        return updated

    def validator_argv(self, directory: str) -> list[str]:
        return [*self.validator_command, *VALIDATOR_SUBCOMMAND, directory]

    def resolve_validator(self) -> str | None:
        """Return the validator executable's full path, if it is on PATH."""
        if not self.validator_command:
            return None
        return shutil.which(self.validator_command[0])
