"""
Version information for the Soroban client SDK.

Installed distributions report the version recorded in their metadata. A
source checkout has no metadata, so the version is read from the project's
``pyproject.toml`` instead.
"""
import importlib.metadata
import pathlib
from typing import Optional

import tomli

DISTRIBUTION = "soroban-client-sdk"
DEFAULT_VERSION = "0.1.0"
PYPROJECT = pathlib.Path(__file__).parent.parent / "pyproject.toml"


def _pyproject_version(path: pathlib.Path = PYPROJECT) -> Optional[str]:
    try:
        with path.open("rb") as f:
            return tomli.load(f)["project"]["version"]
    except (FileNotFoundError, KeyError, tomli.TOMLDecodeError):
        return None


def get_version() -> str:
    """Return the SDK version, or ``DEFAULT_VERSION`` when it cannot be found."""
    try:
        return importlib.metadata.version(DISTRIBUTION)
    except importlib.metadata.PackageNotFoundError:
        return _pyproject_version() or DEFAULT_VERSION


__version__ = get_version()
