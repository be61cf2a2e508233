"""OpenSpec exceptions."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Sequence
    from pathlib import Path


class OpenSpecError(Exception):
    """Base exception for OpenSpec errors."""


class ConfigError(OpenSpecError):
    """Base exception for configuration errors."""


# =============================================================================
# Schema Exceptions
# =============================================================================


class SchemaError(OpenSpecError):
    """Base exception for workflow schema errors."""


class SchemaLoadError(SchemaError):
    """Raised when a schema file cannot be read or is not valid YAML.

    Attributes:
        path: Path to the schema file, or None when parsing a string.
        cause: The underlying exception that caused this error.
    """

    def __init__(
        self,
        message: str,
        *,
        path: Path | None = None,
        cause: Exception | None = None,
    ) -> None:
        """Initialize with error message and load context.

        Args:
            message: Human-readable error message.
            path: Path to the schema file that failed to load.
            cause: The underlying exception that caused this error.
        """
        super().__init__(message)
        self.path: Path | None = path
        self.cause: Exception | None = cause


class SchemaValidationError(SchemaError, ValueError):
    """Raised when a parseable schema is semantically invalid.

    Covers structural problems (missing fields, duplicate ids), dangling
    ``requires`` references and dependency cycles.

    Attributes:
        path: Path to the schema file, if known.
        artifact_ids: Artifact ids involved in the failure.
        cycle: Artifact ids forming a dependency cycle, first id repeated last.
    """

    def __init__(
        self,
        message: str,
        *,
        path: Path | None = None,
        artifact_ids: Sequence[str] = (),
        cycle: Sequence[str] | None = None,
    ) -> None:
        """Initialize with error message and validation context.

        Args:
            message: Human-readable error message.
            path: Path to the schema file, if known.
            artifact_ids: Artifact ids involved in the failure.
            cycle: Artifact ids forming a dependency cycle.
        """
        super().__init__(message)
        self.path: Path | None = path
        self.artifact_ids: tuple[str, ...] = tuple(artifact_ids)
        self.cycle: tuple[str, ...] | None = tuple(cycle) if cycle else None


class SchemaNotFoundError(SchemaError, LookupError):
    """Raised when a schema name is not present in any tier.

    Attributes:
        name: The normalized schema name that was requested.
        available: Sorted names of every discoverable schema.
    """

    def __init__(
        self,
        message: str,
        *,
        name: str,
        available: Sequence[str] = (),
    ) -> None:
        """Initialize with error message and lookup context.

        Args:
            message: Human-readable error message.
            name: The schema name that was requested.
            available: Names of every discoverable schema.
        """
        super().__init__(message)
        self.name: str = name
        self.available: tuple[str, ...] = tuple(available)


class InvalidSchemaNameError(SchemaError, ValueError):
    """Raised when a new schema name is not kebab-case.

    Attributes:
        schema_name: The rejected name.
    """

    def __init__(self, message: str, *, schema_name: str) -> None:
        """Initialize with error message and the rejected name."""
        super().__init__(message)
        self.schema_name: str = schema_name


class SchemaExistsError(SchemaError):
    """Raised when creating a project schema whose directory already exists.

    Attributes:
        path: Path of the existing schema directory.
    """

    def __init__(self, message: str, *, path: Path) -> None:
        """Initialize with error message and the existing path."""
        super().__init__(message)
        self.path: Path = path


class TemplateLoadError(OpenSpecError):
    """Raised when an artifact template cannot be loaded.

    Attributes:
        template_path: The path that was attempted.
    """

    def __init__(self, message: str, *, template_path: Path | str) -> None:
        """Initialize with error message and template context.

        Args:
            message: Human-readable error message.
            template_path: The path that was attempted.
        """
        super().__init__(message)
        self.template_path: Path | str = template_path


class ArtifactNotFoundError(OpenSpecError, LookupError):
    """Raised when an artifact id is not defined by the active schema.

    Attributes:
        artifact_id: The requested artifact id.
        schema_name: Name of the active schema.
        valid_ids: Artifact ids defined by the schema, in build order.
    """

    def __init__(
        self,
        message: str,
        *,
        artifact_id: str,
        schema_name: str,
        valid_ids: Sequence[str] = (),
    ) -> None:
        """Initialize with error message and artifact context.

        Args:
            message: Human-readable error message.
            artifact_id: The requested artifact id.
            schema_name: Name of the active schema.
            valid_ids: Artifact ids defined by the schema.
        """
        super().__init__(message)
        self.artifact_id: str = artifact_id
        self.schema_name: str = schema_name
        self.valid_ids: tuple[str, ...] = tuple(valid_ids)


# =============================================================================
# Change Exceptions
# =============================================================================


class ChangeError(OpenSpecError):
    """Base exception for change directory errors."""


class ChangeNotFoundError(ChangeError, LookupError):
    """Raised when a change directory does not exist.

    Attributes:
        change_name: The requested change name, or None if none was given.
        available: Names of existing changes.
    """

    def __init__(
        self,
        message: str,
        *,
        change_name: str | None,
        available: Sequence[str] = (),
    ) -> None:
        """Initialize with error message and change context.

        Args:
            message: Human-readable error message.
            change_name: The requested change name.
            available: Names of existing changes.
        """
        super().__init__(message)
        self.change_name: str | None = change_name
        self.available: tuple[str, ...] = tuple(available)


class InvalidChangeNameError(ChangeError, ValueError):
    """Raised when a change name is not kebab-case.

    Attributes:
        change_name: The rejected name.
    """

    def __init__(self, message: str, *, change_name: str) -> None:
        """Initialize with error message and the rejected name."""
        super().__init__(message)
        self.change_name: str = change_name


class ChangeExistsError(ChangeError):
    """Raised when creating a change whose directory already exists.

    Attributes:
        path: Path of the existing change directory.
    """

    def __init__(self, message: str, *, path: Path) -> None:
        """Initialize with error message and the existing path."""
        super().__init__(message)
        self.path: Path = path


class ChangeMetadataError(ChangeError):
    """Raised when a change's ``.openspec.yaml`` is unreadable or invalid.

    Attributes:
        path: Path to the metadata file.
        cause: The underlying exception that caused this error.
    """

    def __init__(
        self,
        message: str,
        *,
        path: Path,
        cause: Exception | None = None,
    ) -> None:
        """Initialize with error message and metadata context.

        Args:
            message: Human-readable error message.
            path: Path to the metadata file.
            cause: The underlying exception that caused this error.
        """
        super().__init__(message)
        self.path: Path = path
        self.cause: Exception | None = cause
