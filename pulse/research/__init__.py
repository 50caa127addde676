"""Identity research."""

from .identity_researcher import IdentityResearcher

__all__ = [
    "IdentityResearcher",
]
