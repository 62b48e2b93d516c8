# photolibrary/services/store/artifact_store.py
from __future__ import annotations

import os
import shutil
import tempfile
from pathlib import Path
from typing import BinaryIO, Callable, Optional

from photolibrary.common.logging import get_logger
from photolibrary.domain.entities.artifact import ArtifactFile, ArtifactKey, file_size
from photolibrary.domain.errors import StorageWriteFailed
from photolibrary.domain.policies.artifact_paths import (
    THUMBNAIL_MIME,
    artifact_filename,
    full_resolution_glob,
)
from photolibrary.domain.policies.mime_types import mime_for_name
from photolibrary.domain.ports.hashing import HashingPort
from photolibrary.domain.ports.web_path import WebPathResolver
from photolibrary.services.hashing.simple_hashing import SimpleHashing
from photolibrary.services.web.path_resolver import web_path_for

logger = get_logger(__name__)


class ArtifactStore:
    """
    Content-addressed, append-only cache of derived files.

    Layout::

        <root>/<thumbnails_subdir>/<sha>_<w>x<h>_q<quality>.jpg
        <root>/<files_subdir>/<sha>.<ext>

    Every write goes to a dot-prefixed temp file in the destination directory
    and is then ``os.replace``d onto the canonical name. The rename is the
    only synchronization point: readers see either nothing or a complete file,
    and concurrent writers of the same key leave exactly one of their outputs.
    Entries are trusted once present; nothing is re-validated on read.
    """

    def __init__(
        self,
        root: Path,
        *,
        thumbnails_subdir: str = "thumbnails",
        files_subdir: str = "files",
        hasher: Optional[HashingPort] = None,
        web_paths: Optional[WebPathResolver] = None,
    ) -> None:
        self.root = Path(root)
        self.thumbnails_dir = self.root / thumbnails_subdir
        self.files_dir = self.root / files_subdir
        self.hasher: HashingPort = hasher or SimpleHashing()
        self.web_paths = web_paths

    # --- layout -------------------------------------------------------------

    def digest(self, asset_id: str) -> str:
        return self.hasher.sha256_text(asset_id)

    def directory_for(self, key: ArtifactKey) -> Path:
        return self.thumbnails_dir if key.is_thumbnail else self.files_dir

    def path_for(self, key: ArtifactKey, extension: Optional[str] = None) -> Path:
        return self.directory_for(key) / artifact_filename(key, self.digest(key.asset_id), extension)

    def describe(self, path: Path, mime_type: Optional[str] = None) -> ArtifactFile:
        return ArtifactFile(
            path=path,
            web_path=web_path_for(self.web_paths, path),
            mime_type=mime_type or mime_for_name(path.name),
            size=file_size(path),
        )

    # --- reads --------------------------------------------------------------

    def resolve(self, key: ArtifactKey) -> Optional[ArtifactFile]:
        """Descriptor for a cached artifact, or None on a miss. Never touches content."""
        if key.is_thumbnail:
            path = self.path_for(key)
            if path.is_file():
                return self.describe(path, THUMBNAIL_MIME)
            return None

        # one export per asset; the extension depends on the source, so match any
        if not self.files_dir.is_dir():
            return None
        matches = sorted(p for p in self.files_dir.glob(full_resolution_glob(self.digest(key.asset_id))) if p.is_file())
        if not matches:
            return None
        return self.describe(matches[0])

    # --- writes -------------------------------------------------------------

    def put(self, key: ArtifactKey, data: bytes, mime_type: str, extension: Optional[str] = None) -> ArtifactFile:
        """Write ``data`` atomically under the key's canonical path."""
        return self._write(key, mime_type, extension, lambda fh: fh.write(data))

    def put_file(self, key: ArtifactKey, source: Path, mime_type: str, extension: Optional[str] = None) -> ArtifactFile:
        """Copy an existing file (e.g. a picked video) into the cache atomically."""
        def _copy(fh: BinaryIO) -> None:
            with Path(source).open("rb") as src:
                shutil.copyfileobj(src, fh, length=1024 * 1024)

        return self._write(key, mime_type, extension, _copy)

    def _write(
        self,
        key: ArtifactKey,
        mime_type: str,
        extension: Optional[str],
        writer: Callable[[BinaryIO], object],
    ) -> ArtifactFile:
        out_path = self.path_for(key, extension)
        tmp_path: Optional[Path] = None
        try:
            out_path.parent.mkdir(parents=True, exist_ok=True)
            with tempfile.NamedTemporaryFile(
                "wb", prefix=".tmp-", suffix=out_path.suffix, delete=False, dir=str(out_path.parent)
            ) as tf:
                tmp_path = Path(tf.name)
                writer(tf)
                tf.flush()
                os.fsync(tf.fileno())
            os.replace(tmp_path, out_path)
            tmp_path = None
        except OSError as e:
            logger.error("Artifact write failed for %s (%s): %s", key.asset_id, out_path.name, e)
            raise StorageWriteFailed(f"Failed to write {out_path.name}: {e}") from e
        finally:
            if tmp_path is not None:
                tmp_path.unlink(missing_ok=True)

        logger.debug("Stored %s artifact %s", key.kind.value, out_path)
        return self.describe(out_path, mime_type)
