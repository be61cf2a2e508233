"""Project root and data directory discovery.

This module locates the OpenSpec project root by searching upward for the
``openspec/`` marker directory, and determines the user-level data directory
that holds user schema overrides.
"""

from os import getenv
from pathlib import Path

import platformdirs

OPENSPEC_DIR_NAME = "openspec"
CONFIG_FILE_NAMES = ("config.yaml", "config.yml")


def find_project_root(start: Path | None = None) -> Path | None:
    """Find the project root by searching upward for an ``openspec/`` directory.

    Args:
        start: Directory to start searching from. Defaults to the current
            working directory.

    Returns:
        The directory containing ``openspec/``, or None if the filesystem
        root is reached without finding one.

    Examples:
        >>> root = find_project_root(Path("/path/to/project/src"))
    """
    current = (start or Path.cwd()).resolve()

    while True:
        if (current / OPENSPEC_DIR_NAME).is_dir():
            return current
        parent = current.parent
        if parent == current:
            return None
        current = parent


def resolve_project_root(explicit: Path | None = None) -> Path:
    """Return the explicit root, else the discovered root, else the cwd."""
    if explicit is not None:
        return explicit.resolve()
    return find_project_root() or Path.cwd().resolve()


def get_global_data_dir() -> Path:
    """Get the user-level OpenSpec data directory.

    Honors ``XDG_DATA_HOME`` when set; otherwise falls back to the platform
    data directory (``~/.local/share/openspec`` on Linux).
    """
    xdg_data_home = getenv("XDG_DATA_HOME")
    if xdg_data_home:
        return Path(xdg_data_home) / OPENSPEC_DIR_NAME
    return platformdirs.user_data_path(OPENSPEC_DIR_NAME)


def get_openspec_dir(project_root: Path) -> Path:
    return project_root / OPENSPEC_DIR_NAME


def get_changes_dir(project_root: Path) -> Path:
    """Get ``<root>/openspec/changes``."""
    return get_openspec_dir(project_root) / "changes"


def get_change_dir(project_root: Path, change_name: str) -> Path:
    return get_changes_dir(project_root) / change_name


def get_project_schemas_dir(project_root: Path) -> Path:
    """Get ``<root>/openspec/schemas``."""
    return get_openspec_dir(project_root) / "schemas"


def get_user_schemas_dir() -> Path:
    """Get the user schema override directory."""
    return get_global_data_dir() / "schemas"


def get_package_schemas_dir() -> Path:
    """Get the directory of schemas shipped with the package."""
    from importlib.resources import files  # noqa: PLC0415

    return Path(str(files("openspec"))) / "schemas"


def get_config_path_candidates(project_root: Path) -> tuple[Path, ...]:
    """Return candidate project config paths, preferred first."""
    openspec_dir = get_openspec_dir(project_root)
    return tuple(openspec_dir / name for name in CONFIG_FILE_NAMES)


def get_default_log_file() -> Path:
    """Get the default CLI log file path."""
    return platformdirs.user_log_path(OPENSPEC_DIR_NAME) / "cli.log"
