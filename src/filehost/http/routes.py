"""
=============================================================================
ROUTE TABLE
=============================================================================

Maps virtual paths (what clients ask for) to local files (what we send).

    ┌─────────────────────────────────────────────────────────────────────┐
    │                          ROUTE TABLE                                │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │   Virtual path          Local file                                  │
    │   ────────────          ──────────                                  │
    │   /notes.txt     ──►    /home/me/work/notes.txt                     │
    │   /logo.png      ──►    /home/me/work/assets/logo.png               │
    │                                                                      │
    │   GET /notes.txt  → exact match → stream /home/me/work/notes.txt    │
    │   GET /notes      → no match    → NotFound                           │
    │   GET /NOTES.txt  → no match    → NotFound (case-sensitive)          │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

Matching is an exact string comparison. There are no patterns, prefixes,
query strings or URL decoding.

=============================================================================
BUILT ONCE, SHARED BY EVERYONE
=============================================================================

The table is built from the command line before any listener starts and is
never modified afterwards. Every handler thread reads the same object
without locking: no writer exists, so there is nothing to race with.

The underlying dict is wrapped in a MappingProxyType, so an accidental
`table["/x"] = ...` raises TypeError instead of silently mutating shared
state.

=============================================================================
CONFIGURATION FORMAT
=============================================================================

Routes come in as a flat list of tokens, read in pairs:

    ["docs/a.txt", "/a.txt", "/tmp/b.bin", "/b.bin"]
      └── local ──┘ └ virt ┘  └── local ─┘ └ virt ┘

Local paths are joined onto the working directory (absolute ones stay as
they are). Virtual paths must start with "/". If the same virtual path
appears twice, the later pair wins.

=============================================================================
"""

import logging
from pathlib import Path
from types import MappingProxyType
from typing import Iterable, Iterator, Mapping, Optional, Tuple, Union

from ..errors import ConfigError, NotFound


logger = logging.getLogger(__name__)


class RouteTable(Mapping[str, Path]):
    """
    Immutable mapping from virtual path to local file path.

    Usage:
        routes = RouteTable({"/a.txt": Path("/srv/a.txt")})
        routes.resolve("/a.txt")     # Path('/srv/a.txt')
        routes.resolve("/missing")   # raises NotFound
    """

    def __init__(self, routes: Optional[Mapping[str, Path]] = None):
        self._routes: Mapping[str, Path] = MappingProxyType(dict(routes or {}))

    def __getitem__(self, virtual_path: str) -> Path:
        return self._routes[virtual_path]

    def __iter__(self) -> Iterator[str]:
        return iter(self._routes)

    def __len__(self) -> int:
        return len(self._routes)

    def __repr__(self) -> str:
        return f"RouteTable({dict(self._routes)!r})"

    def resolve(self, virtual_path: str) -> Path:
        """
        Look up a virtual path.

        Args:
            virtual_path: The path token from the request line, verbatim.

        Returns:
            The local file path.

        Raises:
            NotFound: If the path is not registered.
        """
        try:
            return self._routes[virtual_path]
        except KeyError:
            raise NotFound(f"No file is hosted at {virtual_path!r}") from None

    def print_routes(self) -> None:
        """
        Print the hosted files.

        Example output:
            Hosting:
                /home/me/a.txt  as  /a.txt
        """
        print("Hosting:")
        for virtual_path, local_path in self._routes.items():
            print(f"    {local_path}  as  {virtual_path}")


def pair_tokens(tokens: Iterable[str]) -> Iterator[Tuple[str, str]]:
    """
    Group a flat token sequence into (local, virtual) pairs.

    Raises:
        ConfigError: If the number of tokens is odd.
    """
    tokens = list(tokens)
    if len(tokens) % 2 != 0:
        raise ConfigError(
            "Files must be paired with a \"display name\", which will be used "
            "as the path clients request the file with. "
            "i.e. ... -f /home/user/Downloads/thisfile.txt /thisfile.txt ..."
        )
    return zip(tokens[0::2], tokens[1::2])


def build_route_table(
    tokens: Iterable[str],
    base_dir: Optional[Union[str, Path]] = None,
) -> RouteTable:
    """
    Build the route table from (local, virtual) token pairs.

    Args:
        tokens: Flat sequence of local-path, virtual-path tokens.
        base_dir: Directory relative local paths are joined onto.
            Defaults to the current working directory.

    Returns:
        The immutable RouteTable.

    Raises:
        ConfigError: If the token count is odd or a virtual path does not
            start with "/".
    """
    base = Path(base_dir) if base_dir is not None else Path.cwd()

    routes: dict[str, Path] = {}
    for local, virtual in pair_tokens(tokens):
        if not virtual.startswith("/"):
            raise ConfigError(
                f"File display names must start with a \"/\" i.e. /file.txt, "
                f"not just file.txt (got {virtual!r})"
            )

        local_path = base / local
        if virtual in routes:
            logger.warning(
                f"{virtual} was registered twice; {routes[virtual]} is replaced by {local_path}"
            )
        routes[virtual] = local_path

    return RouteTable(routes)
