from __future__ import annotations

from pathlib import Path
from typing import Iterable, List, Optional

from photolibrary.domain.dataclasses.picker import RawPickResult
from photolibrary.domain.policies.mime_types import media_kind_for, mime_for_name
from photolibrary.domain.enums.media_kind import MediaKind
from photolibrary.domain.ports.picker import PickerPort


class StagedPicker(PickerPort):
    """
    Headless picker: "selects" files that were staged ahead of time (by a
    test, a CLI, or an upload endpoint). Applies the same include/limit rules
    a system picker enforces.
    """

    def __init__(self, files: Iterable[Path | RawPickResult]) -> None:
        self._staged: List[RawPickResult] = [
            f if isinstance(f, RawPickResult) else RawPickResult(source=Path(f), suggested_name=Path(f).name)
            for f in files
        ]

    def present(self, options) -> List[RawPickResult]:
        allowed = options.media_kinds

        picked: List[RawPickResult] = []
        for r in self._staged:
            kind = self._kind_of(r)
            if kind is not None and kind not in allowed:
                continue
            picked.append(r)
            if options.selection_limit and len(picked) >= options.selection_limit:
                break
        return picked

    @staticmethod
    def _kind_of(r: RawPickResult) -> Optional[MediaKind]:
        return media_kind_for(r.type_hint) or media_kind_for(mime_for_name(r.suggested_name or r.source.name))
