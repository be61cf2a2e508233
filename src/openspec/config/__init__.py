"""OpenSpec configuration.

This package provides project configuration (``openspec/config.yaml``),
project and data directory discovery, and tool settings read from the
environment.

Example:
    >>> from openspec.config import read_project_config
    >>> config, diagnostics = read_project_config(Path("."))
"""

from openspec.exceptions import ConfigError

from ._discovery import (
    CONFIG_FILE_NAMES,
    OPENSPEC_DIR_NAME,
    find_project_root,
    get_change_dir,
    get_changes_dir,
    get_config_path_candidates,
    get_default_log_file,
    get_global_data_dir,
    get_openspec_dir,
    get_package_schemas_dir,
    get_project_schemas_dir,
    get_user_schemas_dir,
    resolve_project_root,
)
from ._project import (
    MAX_CONTEXT_SIZE,
    ProjectConfig,
    find_project_config,
    parse_project_config,
    read_project_config,
    set_default_schema,
    validate_config_rules,
)
from ._settings import LogFormat, LoggingConfig, LogLevel

__all__ = [
    "CONFIG_FILE_NAMES",
    "MAX_CONTEXT_SIZE",
    "OPENSPEC_DIR_NAME",
    "ConfigError",
    "LogFormat",
    "LogLevel",
    "LoggingConfig",
    "ProjectConfig",
    "find_project_config",
    "find_project_root",
    "get_change_dir",
    "get_changes_dir",
    "get_config_path_candidates",
    "get_default_log_file",
    "get_global_data_dir",
    "get_openspec_dir",
    "get_package_schemas_dir",
    "get_project_schemas_dir",
    "get_user_schemas_dir",
    "parse_project_config",
    "read_project_config",
    "resolve_project_root",
    "set_default_schema",
    "validate_config_rules",
]
