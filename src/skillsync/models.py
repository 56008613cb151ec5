"""
Data models for registry synchronization.

Manifest and ManifestFile are decoded strictly from the registry's
wire format; TransferOutcome and SyncReport live only for the
duration of one synchronization pass.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

_HEX_DIGEST = re.compile(r"^[0-9a-f]{64}$")


class ManifestFile(BaseModel):
    """One file the registry expects to exist locally."""

    model_config = ConfigDict(frozen=True)

    path: str = Field(min_length=1)
    sha256: str
    size: int = 0

    @field_validator("sha256")
    @classmethod
    def _normalize_digest(cls, value: str) -> str:
        digest = value.strip().lower()
        if not _HEX_DIGEST.match(digest):
            raise ValueError("sha256 must be 64 hexadecimal characters")
        return digest


class Manifest(BaseModel):
    """A published registry release: its version and its file list.

    The version is opaque. It is only ever compared for equality
    with the locally stored marker.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    name: Optional[str] = None
    version: str = Field(min_length=1)
    release_date: Optional[str] = Field(default=None, alias="releaseDate")
    repository: Optional[str] = None
    files: list[ManifestFile]

    @model_validator(mode="after")
    def _unique_paths(self) -> "Manifest":
        seen: set[str] = set()
        for entry in self.files:
            if entry.path in seen:
                raise ValueError(f"duplicate manifest path: {entry.path}")
            seen.add(entry.path)
        return self


class FailureReason(str, Enum):
    """Why a single file transfer did not install."""

    HTTP_ERROR = "http-error"
    HASH_MISMATCH = "hash-mismatch"
    WRITE_ERROR = "write-error"


@dataclass(frozen=True)
class TransferOutcome:
    """Result of one file's fetch -> verify -> write unit.

    Attributes:
        path: Manifest path of the file.
        success: Whether the file was written.
        reason: Failure category when success is False.
        detail: Extra context (status code, OS error text).
    """

    path: str
    success: bool
    reason: Optional[FailureReason] = None
    detail: str = ""

    @classmethod
    def ok(cls, path: str) -> "TransferOutcome":
        return cls(path=path, success=True)

    @classmethod
    def failed(cls, path: str, reason: FailureReason, detail: str = "") -> "TransferOutcome":
        return cls(path=path, success=False, reason=reason, detail=detail)


@dataclass
class SyncReport:
    """Everything one synchronization pass did.

    Attributes:
        version_before: Marker value before the pass (None if absent).
        version_after: Marker value after the pass.
        outcomes: One entry per manifest file, in manifest order.
    """

    version_before: Optional[str]
    version_after: str
    outcomes: list[TransferOutcome] = field(default_factory=list)

    @property
    def up_to_date(self) -> bool:
        """True when the pass short-circuited on a matching version."""
        return not self.outcomes and self.version_before == self.version_after

    @property
    def succeeded(self) -> list[TransferOutcome]:
        return [o for o in self.outcomes if o.success]

    @property
    def failed(self) -> list[TransferOutcome]:
        return [o for o in self.outcomes if not o.success]

    @property
    def success_count(self) -> int:
        return len(self.succeeded)

    @property
    def failure_count(self) -> int:
        return len(self.failed)

    @property
    def all_succeeded(self) -> bool:
        return self.failure_count == 0

    def to_dict(self) -> dict:
        """Serialize to a JSON-friendly dict.

        Returns:
            dict: Full report data.
        """
        return {
            "version_before": self.version_before,
            "version_after": self.version_after,
            "up_to_date": self.up_to_date,
            "succeeded": self.success_count,
            "failed": self.failure_count,
            "outcomes": [
                {
                    "path": o.path,
                    "success": o.success,
                    "reason": o.reason.value if o.reason else None,
                    "detail": o.detail,
                }
                for o in self.outcomes
            ],
        }


@dataclass(frozen=True)
class UpdateStatus:
    """Local vs. remote registry version, without transferring anything."""

    local_version: Optional[str]
    remote_version: str

    @property
    def up_to_date(self) -> bool:
        return self.local_version == self.remote_version
