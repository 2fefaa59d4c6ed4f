"""
sitealias - Site alias resolution for site-management CLIs.

Resolves alias references such as ``@elements.earth.live`` into a fully
specified execution context: effective options for the command being
run, and whether (and how) to reach the site over ssh.
"""

import importlib.metadata as _metadata

# Version is defined in pyproject.toml - read it and parse into tuple (primary representation)
_raw_version = _metadata.version("sitealias")
__version_info__: tuple[int, int, int] = tuple(int(x) for x in _raw_version.split(".")[:3])  # type: ignore[assignment]
__version__: str = ".".join(str(x) for x in __version_info__)

from sitealias.aliases import AliasManager, AliasRecord  # noqa: E402
from sitealias.config import Settings  # noqa: E402

__all__ = ["__version__", "__version_info__", "AliasManager", "AliasRecord", "Settings"]
