"""Change directories: naming rules, creation, discovery and metadata."""

from openspec.exceptions import (
    ChangeError,
    ChangeExistsError,
    ChangeMetadataError,
    ChangeNotFoundError,
    InvalidChangeNameError,
)

from ._changes import (
    ARCHIVE_DIR_NAME,
    CreatedChange,
    create_change,
    list_changes,
    require_change,
    validate_change_name,
)
from ._metadata import (
    METADATA_FILE_NAME,
    ChangeMetadata,
    get_metadata_path,
    read_change_metadata,
    resolve_schema_for_change,
    write_change_metadata,
)

__all__ = [
    "ARCHIVE_DIR_NAME",
    "METADATA_FILE_NAME",
    "ChangeError",
    "ChangeExistsError",
    "ChangeMetadata",
    "ChangeMetadataError",
    "ChangeNotFoundError",
    "CreatedChange",
    "InvalidChangeNameError",
    "create_change",
    "get_metadata_path",
    "list_changes",
    "read_change_metadata",
    "require_change",
    "resolve_schema_for_change",
    "validate_change_name",
    "write_change_metadata",
]
