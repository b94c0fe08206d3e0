"""Folder-backed shared media catalog.

Media files live directly in a shared pictures folder; the catalog rows are
kept in a JSON index next to them. Callers never pick file paths: `insert`
reserves a unique file for the requested display name and hands back an
opaque handle.
"""

from __future__ import annotations

from datetime import datetime
import json
import os
from pathlib import Path
from typing import Any, BinaryIO
import uuid

from loguru import logger

from core.models import MediaRecord
from core.services.interfaces import IMediaCatalog, MediaColumns
from infrastructure.utils import is_plain_file_name

INDEX_FILE_NAME = ".media_index.json"
_DT_FMT = "%Y-%m-%d %H:%M:%S"


def _optional_int(value: Any) -> int | None:
    try:
        return int(value) if value is not None else None
    except (ValueError, TypeError):
        return None


class FolderMediaCatalog(IMediaCatalog):
    """Media catalog stored in `root` with a JSON row index."""

    def __init__(self, root: str | Path) -> None:
        self._root = Path(root)
        self._index_path = self._root / INDEX_FILE_NAME

    @property
    def root(self) -> Path:
        """Folder holding the media files."""
        return self._root

    def insert(self, values: dict[str, Any]) -> str | None:
        """Create a row for `values` and reserve its file.

        Returns None when the display name is missing or has a directory part,
        when the folder cannot be written, or when the existing index cannot be
        parsed. A broken index is left untouched.
        """
        display_name = str(values.get(MediaColumns.DISPLAY_NAME) or "").strip()
        if not display_name:
            logger.warning("Media insert refused: empty display name")
            return None
        if not is_plain_file_name(display_name):
            logger.warning("Media insert refused: invalid display name {!r}", display_name)
            return None
        try:
            self._root.mkdir(parents=True, exist_ok=True)
            if not os.access(self._root, os.W_OK):
                logger.warning("Media insert refused: {} is not writable", self._root)
                return None
            rows = self._read_rows()
            file_name = self._unique_file_name(display_name, rows)
            # Reserve the name on disk so a second insert cannot pick it.
            (self._root / file_name).touch(exist_ok=False)
            handle = uuid.uuid4().hex
            rows.append(
                {
                    "handle": handle,
                    "display_name": display_name,
                    "mime_type": str(values.get(MediaColumns.MIME_TYPE) or ""),
                    "width": _optional_int(values.get(MediaColumns.WIDTH)),
                    "height": _optional_int(values.get(MediaColumns.HEIGHT)),
                    "relative_path": file_name,
                    "date_added": datetime.now().strftime(_DT_FMT),
                }
            )
            self._save_rows(rows)
        except (OSError, ValueError) as ex:
            logger.error("Media insert failed for {}: {}", display_name, ex)
            return None
        logger.info("Media record {} created for {}", handle, file_name)
        return handle

    def open_output_stream(self, handle: str) -> BinaryIO:
        """Open the reserved file of `handle` for writing.

        Raises:
            FileNotFoundError: If no row has this handle.
        """
        row = self._find_row(handle)
        if row is None:
            raise FileNotFoundError(f"No media record for handle {handle}")
        return (self._root / row["relative_path"]).open("wb")

    def query(self, **filters: Any) -> list[MediaRecord]:
        """Return rows whose fields equal all `filters`."""
        out: list[MediaRecord] = []
        for row in self._load_rows():
            if all(row.get(k) == v for k, v in filters.items()):
                out.append(self._to_record(row))
        return out

    # Internal helpers
    def _find_row(self, handle: str) -> dict[str, Any] | None:
        for row in self._load_rows():
            if row.get("handle") == handle:
                return row
        return None

    def _unique_file_name(self, display_name: str, rows: list[dict[str, Any]]) -> str:
        """Pick `name.ext`, then `name (1).ext`, ... until unused."""
        taken = {str(r.get("relative_path", "")) for r in rows}
        stem, suffix = Path(display_name).stem, Path(display_name).suffix
        candidate = display_name
        counter = 1
        while candidate in taken or (self._root / candidate).exists():
            candidate = f"{stem} ({counter}){suffix}"
            counter += 1
        return candidate

    def _read_rows(self) -> list[dict[str, Any]]:
        """Parse the index; a missing index has no rows.

        Raises:
            OSError: If the index cannot be read.
            ValueError: If the index is not a JSON object with a record list.
        """
        if not self._index_path.exists():
            return []
        with self._index_path.open("r", encoding="utf-8") as f:
            data = json.load(f)
        if not isinstance(data, dict) or not isinstance(data.get("records", []), list):
            raise ValueError("unexpected media index layout")
        return [r for r in data.get("records", []) if isinstance(r, dict) and "handle" in r]

    def _load_rows(self) -> list[dict[str, Any]]:
        try:
            return self._read_rows()
        except (OSError, ValueError) as ex:
            logger.warning("Media index unreadable ({}): {}", self._index_path, ex)
            return []

    def _save_rows(self, rows: list[dict[str, Any]]) -> None:
        with self._index_path.open("w", encoding="utf-8") as f:
            json.dump({"records": rows}, f, ensure_ascii=False, indent=2)

    def _to_record(self, row: dict[str, Any]) -> MediaRecord:
        added: datetime | None = None
        raw = row.get("date_added")
        if raw:
            try:
                added = datetime.strptime(str(raw), _DT_FMT)
            except ValueError:
                logger.warning("Invalid date_added in media index: {}", raw)
        return MediaRecord(
            handle=str(row["handle"]),
            display_name=str(row.get("display_name", "")),
            mime_type=str(row.get("mime_type", "")),
            width=_optional_int(row.get("width")),
            height=_optional_int(row.get("height")),
            relative_path=str(row.get("relative_path", "")),
            date_added=added,
        )
