"""
The local target tree every registry write lands in.

All paths handed to TargetTree are registry-relative POSIX paths.
Anything absolute or climbing out of the root is refused.
"""

from __future__ import annotations

import os
import uuid
from pathlib import Path, PurePosixPath

from .errors import WriteError


class TargetTree:
    """A project root that registry files are installed under.

    Args:
        root: Directory the relative registry paths resolve against.
    """

    def __init__(self, root: Path) -> None:
        self.root = Path(root).expanduser().resolve()

    def __repr__(self) -> str:
        return f"TargetTree({str(self.root)!r})"

    def resolve(self, relative_path: str) -> Path:
        """Map a registry path to a location under the root.

        Raises:
            WriteError: If the path is absolute, escapes the root, or
                holds a NUL byte.
        """
        if "\x00" in relative_path:
            raise WriteError(relative_path, "path contains a NUL byte")
        rel = PurePosixPath(relative_path.replace("\\", "/"))
        if rel.is_absolute() or not rel.parts or ".." in rel.parts:
            raise WriteError(relative_path, "path escapes target root")
        return self.root.joinpath(*rel.parts)

    def exists(self, relative_path: str) -> bool:
        try:
            return self.resolve(relative_path).is_file()
        except WriteError:
            return False

    def read_bytes(self, relative_path: str) -> bytes:
        return self.resolve(relative_path).read_bytes()

    def write_bytes(self, relative_path: str, data: bytes) -> Path:
        """Atomically write data at relative_path, creating parents.

        Uses a hidden .tmp sibling and a rename so readers never see
        a partially written file.

        Raises:
            WriteError: On an escaping path or any filesystem failure.
        """
        target = self.resolve(relative_path)
        tmp = target.parent / f".{target.name}.{uuid.uuid4().hex[:8]}.tmp"
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            tmp.write_bytes(data)
            os.replace(tmp, target)
        except (OSError, ValueError) as exc:
            try:
                tmp.unlink()
            except (OSError, ValueError):
                pass
            reason = getattr(exc, "strerror", None) or str(exc)
            raise WriteError(relative_path, reason) from exc
        return target
