"""
Pydantic models for catalog entities, API responses and sync results.

These models provide type-safe data structures for:
- ModInfo/Version: One row of the local (or remote) info/versions tables
- ModListEntry: Summary row served by the mod list endpoint
- ModEntry: Detail view of one mod with its version history
- SyncState/SyncResult: Sync orchestration models

Row models are strict: they are the single place where a fetched row is
checked for type and nullability before it reaches the local store.
"""

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class ModInfo(BaseModel):
    """One row of the ``info`` table.

    ``name`` identifies the mod. Uniqueness is a convention of the remote
    data, not a constraint of the local table.

    Example:
        >>> info = ModInfo(
        ...     name="Primitive Survival",
        ...     author="Spear and Fang",
        ...     icon_src=None,
        ...     short_desc="Traps, fishing and more",
        ...     long_desc="Adds primitive survival mechanics.",
        ... )
    """

    model_config = ConfigDict(strict=True, frozen=True)

    name: str = Field(..., description="Unique mod name")
    author: str = Field(..., description="Mod author")
    icon_src: str | None = Field(default=None, description="Icon URL or path")
    short_desc: str = Field(..., description="Summary shown in listings")
    long_desc: str = Field(..., description="Full description shown on detail view")


class Version(BaseModel):
    """One row of the ``versions`` table.

    ``id`` is assigned by the remote database and only used to order mods
    by their most recent release.
    """

    model_config = ConfigDict(strict=True, frozen=True)

    id: int = Field(..., description="Monotonic release id")
    name: str = Field(..., description="Name of the mod this version belongs to")
    link: str = Field(..., description="Download URL")
    version: str = Field(..., description="Version label, sorted lexicographically")
    changelog: str | None = Field(default=None, description="Release notes")


class ModListEntry(BaseModel):
    """Summary of one mod for the mod list endpoint."""

    name: str
    author: str
    icon_src: str | None = None
    short_desc: str


class ModInfoData(BaseModel):
    """Mod information shown on the detail view."""

    name: str
    author: str
    icon_src: str | None = None
    long_desc: str


class VersionData(BaseModel):
    """One released version of a mod, as served to clients."""

    link: str
    version: str
    changelog: str | None = None


class ModEntry(BaseModel):
    """Full detail response for a single mod.

    Example:
        >>> entry = ModEntry(
        ...     mod_info=ModInfoData(name="A", author="B", long_desc="C"),
        ...     versions=[VersionData(link="https://x/a.zip", version="1.0")],
        ... )
    """

    mod_info: ModInfoData
    versions: list[VersionData] = Field(default_factory=list)


class SyncState(str, Enum):
    """States of the sync state machine.

    Success path:
        IDLE -> AUTHENTICATING -> DROPPING -> RECREATING -> FETCHING
             -> REPOPULATING -> SWAPPING -> IDLE

    Terminal states for a cycle that did not complete:
    - REJECTED: the presented token did not match (nothing was touched)
    - FAILED: a step raised; live tables were left as they were
    """

    IDLE = "idle"
    AUTHENTICATING = "authenticating"
    DROPPING = "dropping"
    RECREATING = "recreating"
    FETCHING = "fetching"
    REPOPULATING = "repopulating"
    SWAPPING = "swapping"
    REJECTED = "rejected"
    FAILED = "failed"


class SyncResult(BaseModel):
    """Result of a sync operation.

    Returned by the sync orchestrator to report what was synced and
    any errors encountered.

    Example:
        >>> result = SyncResult(
        ...     success=True,
        ...     state=SyncState.IDLE,
        ...     mods_synced=12,
        ...     versions_synced=40,
        ...     duration_seconds=1.5,
        ... )
    """

    success: bool = Field(..., description="Whether the sync completed")
    state: SyncState = Field(..., description="State the cycle ended in")
    mods_synced: int = Field(default=0, ge=0, description="Rows written to info")
    versions_synced: int = Field(default=0, ge=0, description="Rows written to versions")
    errors: list[str] = Field(default_factory=list, description="Error messages")
    started_at: datetime | None = Field(default=None, description="When the cycle began")
    duration_seconds: float = Field(default=0.0, ge=0.0, description="Sync duration")

    @property
    def rejected(self) -> bool:
        """True if the cycle stopped at authentication."""
        return self.state == SyncState.REJECTED

    @property
    def total_rows(self) -> int:
        """Total number of rows written across both tables."""
        return self.mods_synced + self.versions_synced
