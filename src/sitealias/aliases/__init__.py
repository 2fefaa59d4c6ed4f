"""
Site alias subsystem.

An alias is a named collection of options identifying a site and one
of its environments. Aliases are defined in YAML files found along the
alias search path, in one of three shapes:

- ``NAME.alias.yml`` - one site, keyed by environment
- ``GROUP.aliases.yml`` - a group of sites under ``sites:``
- ``aliases.yml`` - several ungrouped sites

Pipeline: AliasDiscovery -> AliasFileLoader -> AliasRegistry ->
AliasResolver -> OptionMerger -> TransportClassifier.
"""

from sitealias.aliases.discovery import (
    AliasDiscovery,
    SearchLocation,
    find_site_root,
    get_alias_search_paths,
    get_site_alias_paths,
)
from sitealias.aliases.errors import (
    AliasError,
    AliasNotFoundError,
    AmbiguousAliasFileError,
    InvalidAliasReferenceError,
    MalformedAliasFileError,
    NoBootstrappedSiteError,
    RegistryFrozenError,
)
from sitealias.aliases.loader import (
    AliasFile,
    AliasFileKind,
    AliasFileLoader,
    GroupAliasFile,
    SingleAliasFile,
    UngroupedAliasFile,
)
from sitealias.aliases.manager import AliasManager, ExecutionTarget
from sitealias.aliases.options import OptionMerger, command_path, merge
from sitealias.aliases.record import AliasDefinition, AliasName, AliasRecord
from sitealias.aliases.registry import AliasRegistry, build_registry, load_registry
from sitealias.aliases.resolver import AliasResolver, SiteContext, SitePath, resolve_path
from sitealias.aliases.transport import (
    Classification,
    ConnectionSpec,
    Local,
    Remote,
    TransportClassifier,
    classify,
)

__all__ = [
    # Records
    "AliasDefinition",
    "AliasName",
    "AliasRecord",
    # Discovery
    "AliasDiscovery",
    "SearchLocation",
    "find_site_root",
    "get_alias_search_paths",
    "get_site_alias_paths",
    # Loading
    "AliasFile",
    "AliasFileKind",
    "AliasFileLoader",
    "GroupAliasFile",
    "SingleAliasFile",
    "UngroupedAliasFile",
    # Registry and resolution
    "AliasRegistry",
    "build_registry",
    "load_registry",
    "AliasResolver",
    "SiteContext",
    "SitePath",
    "resolve_path",
    # Options and transport
    "OptionMerger",
    "command_path",
    "merge",
    "Classification",
    "ConnectionSpec",
    "Local",
    "Remote",
    "TransportClassifier",
    "classify",
    # Facade
    "AliasManager",
    "ExecutionTarget",
    # Errors
    "AliasError",
    "AliasNotFoundError",
    "AmbiguousAliasFileError",
    "InvalidAliasReferenceError",
    "MalformedAliasFileError",
    "NoBootstrappedSiteError",
    "RegistryFrozenError",
]
