"""
Repository identity domain object for gitnapped.

A RepositoryIdentity is derived from a descriptor string found in the
configuration. Descriptors look like:

    "~/src/gateway [Infra][Gateway]"   -> group "Infra", vanity "Gateway"
    "~/src/gateway [Gateway]"          -> no group, vanity "Gateway"
    "~/src/gateway"                    -> no group, vanity "~/src/gateway"

Parsing never fails: anything that does not fit degrades to the bare-path
form, so every repository ends up with a display name.
"""

from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional
import logging

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RepositoryIdentity:
    """
    Immutable identity of a configured repository.

    Attributes:
        path: Filesystem path of the repository (as written in the config)
        vanity_name: Display name, also the key used to build projects
        group: Optional secondary label attached to the project
    """

    path: str
    vanity_name: str
    group: Optional[str] = None

    @classmethod
    def parse(cls, descriptor: str) -> 'RepositoryIdentity':
        """
        Parse a descriptor string into a RepositoryIdentity.

        Args:
            descriptor: Raw descriptor, e.g. "/src/api [Backend][API]"

        Returns:
            Parsed RepositoryIdentity
        """
        segments = descriptor.split('[')
        path = segments[0].strip()

        labels = []
        for segment in segments[1:]:
            if ']' not in segment:
                continue
            labels.append(segment.split(']', 1)[0].strip())

        logger.debug(f"Parsed descriptor {descriptor!r}: path={path!r} labels={labels}")

        if len(labels) == 2:
            return cls(path=path, group=labels[0], vanity_name=labels[1])
        if len(labels) == 1:
            return cls(path=path, vanity_name=labels[0])
        return cls(path=path, vanity_name=path)

    def to_dict(self) -> Dict[str, Optional[str]]:
        return {
            'path': self.path,
            'group': self.group,
            'vanity_name': self.vanity_name,
        }


def group_by_vanity(identities: Iterable[RepositoryIdentity]) -> Dict[str, List[RepositoryIdentity]]:
    """
    Group identities by vanity name.

    Groups are returned in order of first appearance and members keep
    their original order.
    """
    grouped: Dict[str, List[RepositoryIdentity]] = {}
    for identity in identities:
        grouped.setdefault(identity.vanity_name, []).append(identity)
    return grouped
