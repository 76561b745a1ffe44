"""
initialize_indexer: scaffold a new Envio HyperIndex project.

Only a single contract address and a single network are supported for now;
longer lists are rejected before anything touches the filesystem.
"""

import logging
import shlex
from pathlib import Path
from typing import List, Literal, Optional, Union

from pydantic import Field, field_validator

from hyperindex_mcp.config import Settings
from hyperindex_mcp.envelope import DomainError, ErrorKind, ToolResponse
from hyperindex_mcp.process import InitStrategy
from hyperindex_mcp.schema import NonEmptyStr, ToolParams

logger = logging.getLogger(__name__)

NAME = "initialize_indexer"
DESCRIPTION = (
    "Initialize a new Envio HyperIndex indexer project from a deployed contract. "
    "Runs the Envio code generator and may take several minutes."
)

Language = Literal["javascript", "typescript", "rescript"]

# A single path component: no separators, and never "." or "..".
PROJECT_NAME_PATTERN = r"^[A-Za-z0-9_][A-Za-z0-9_.-]*$"

REMEDIATION_HINTS = (
    "Suggestions:\n"
    "- Run the command manually in a terminal to answer any prompts.\n"
    "- Check whether the Envio CLI offers a non-interactive flag for this version.\n"
    "- Consider driving the CLI with an expect-style automation tool."
)


class InitializeIndexerParams(ToolParams):
    name: NonEmptyStr = Field(
        pattern=PROJECT_NAME_PATTERN,
        description="Project name (letters, digits, '_', '-', '.'; used as a directory name)",
    )
    contract_addresses: List[NonEmptyStr] = Field(
        min_length=1, description="Contract addresses to index (exactly one is supported)"
    )
    networks: List[NonEmptyStr] = Field(
        min_length=1, description="Network ids or names (exactly one is supported)"
    )
    api_token: NonEmptyStr = Field(description="Envio API token")
    language: Language = Field(description="Language of the generated handlers")
    output_directory: Optional[str] = Field(
        default=None,
        description="Where to create the project (default: ~/envio/<name>)",
    )

    @field_validator("output_directory", mode="before")
    @classmethod
    def _empty_is_unset(cls, value):
        if value == "":
            return None
        return value


def resolve_output_directory(params: InitializeIndexerParams, home: Path) -> Path:
    if params.output_directory is None:
        return home / "envio" / params.name
    return Path(params.output_directory)


def build_command(prefix: str, params: InitializeIndexerParams, output_dir: Path, mask: bool = False) -> str:
    token = "****" if mask else params.api_token
    flags = [
        ("--name", params.name),
        ("--language", params.language),
        ("--output-dir", str(output_dir)),
        ("--contract-address", params.contract_addresses[0]),
        ("--network", params.networks[0]),
        ("--api-token", token),
    ]
    args = " ".join(f"{flag} {shlex.quote(value)}" for flag, value in flags)
    return f"{prefix} {args}"


def check_single_values(params: InitializeIndexerParams) -> Optional[DomainError]:
    if len(params.contract_addresses) > 1:
        return DomainError(
            ErrorKind.UNSUPPORTED,
            "Multiple contract addresses are not yet supported; provide exactly one.",
        )
    if len(params.networks) > 1:
        return DomainError(
            ErrorKind.UNSUPPORTED,
            "Multiple networks are not yet supported; provide exactly one.",
        )
    return None


class InitializeIndexer:
    """Handler bound to the runtime settings."""

    def __init__(self, settings: Settings):
        self.settings = settings

    def strategy_for(self, params: InitializeIndexerParams, output_dir: Path) -> InitStrategy:
        s = self.settings
        return InitStrategy(
            command=build_command(s.init_command, params, output_dir),
            display_command=build_command(s.init_command, params, output_dir, mask=True),
            timeout=s.init_timeout,
            fallback_delay=s.fallback_delay,
            fallback_keystrokes=s.fallback_keystrokes,
            success_markers=s.success_markers,
        )

    async def __call__(self, params: InitializeIndexerParams) -> Union[ToolResponse, DomainError]:
        unsupported = check_single_values(params)
        if unsupported is not None:
            return unsupported

        output_dir = resolve_output_directory(params, self.settings.resolved_home)
        try:
            output_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            return DomainError(
                ErrorKind.DIRECTORY_CREATION,
                f"Failed to create output directory {output_dir}: {e}",
            )
        logger.info(f"Using output directory: {output_dir}")

        outcome = await self.strategy_for(params, output_dir).run()
        if not outcome.succeeded:
            return DomainError(
                ErrorKind.COMMAND_FAILED,
                f'Failed to initialize Envio indexer "{params.name}" in {output_dir}.\n'
                f"{outcome.failure_report()}\n\n{REMEDIATION_HINTS}",
            )

        message = f'Successfully initialized Envio indexer "{params.name}" in {output_dir}'
        output = outcome.output.strip()
        if output:
            return ToolResponse.text(message, output)
        return ToolResponse.text(message)
