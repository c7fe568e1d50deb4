"""Metadata Store: per-token URI overrides and URI resolution.

Resolution order (resolve_uri):
1. No base URI configured -> the stored override, which may be empty
2. Base configured, override non-empty -> base + override
3. Base configured, override empty -> base + decimal token id

Composition is plain concatenation with no path normalization.
"""

from __future__ import annotations

from typing import TypedDict


class MetadataState(TypedDict):
    """Snapshot of a MetadataStore."""
    base_uri: str
    uris: dict[int, str]


def resolve_uri(base_uri: str, override: str, token_id: int) -> str:
    """Compose a token URI from the collection base and a per-token override."""
    if not base_uri:
        return override
    if override:
        return base_uri + override
    return base_uri + str(token_id)


class MetadataStore:
    """token id -> URI override, plus the collection-wide base URI."""

    _base_uri: str
    _uris: dict[int, str]

    def __init__(self, base_uri: str = "") -> None:
        self._base_uri = base_uri
        self._uris = {}

    def snapshot(self) -> MetadataState:
        return {"base_uri": self._base_uri, "uris": dict(self._uris)}

    def restore(self, snapshot: MetadataState) -> None:
        self._base_uri = snapshot["base_uri"]
        self._uris = dict(snapshot["uris"])

    @property
    def base_uri(self) -> str:
        return self._base_uri

    def set_base_uri(self, base_uri: str) -> None:
        self._base_uri = base_uri

    def set_uri(self, token_id: int, uri: str) -> None:
        """Store a per-token override. Only mint paths call this."""
        self._uris[token_id] = uri

    def override_of(self, token_id: int) -> str:
        """Stored override ("" when none)."""
        return self._uris.get(token_id, "")

    def resolve(self, token_id: int) -> str:
        """Resolve a token's URI. The caller checks the token is minted."""
        return resolve_uri(self._base_uri, self.override_of(token_id), token_id)
