from __future__ import annotations
from typing import TYPE_CHECKING, List, Protocol
from photolibrary.domain.dataclasses.picker import RawPickResult

if TYPE_CHECKING:
    from photolibrary.services.schemas.options import PickMediaOptions

class PickerPort(Protocol):
    def present(self, options: "PickMediaOptions") -> List[RawPickResult]: ...
