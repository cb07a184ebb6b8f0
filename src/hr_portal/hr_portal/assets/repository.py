from __future__ import annotations

from typing import Iterable, Optional, Protocol, Sequence

from .model import Asset


class AssetRepository(Protocol):
    def get_by_id(self, asset_id: int) -> Optional[Asset]:
        raise NotImplementedError

    def list_assets(self, *, employee_ids: Optional[Iterable[int]] = None) -> Sequence[Asset]:
        raise NotImplementedError

    def allocate(self, *, employee_id: int, name: str, allocated_by: int) -> int:
        raise NotImplementedError

    def revoke(self, asset_id: int, *, revoked_by: int) -> bool:
        """Only affects assets that are still active."""

        raise NotImplementedError
