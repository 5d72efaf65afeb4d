"""Substrate API Sidecar response schemas for pallet storage queries."""

from __future__ import annotations

import logging
from typing import Annotated, ClassVar

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field

log = logging.getLogger(__name__)


def _parse_balance(value: object) -> object:
    # sidecar renders u128 as decimal strings, some runtimes as hex
    if isinstance(value, str) and value.startswith("0x"):
        return int(value, 16)
    return value


type Balance = Annotated[int, BeforeValidator(_parse_balance), Field(ge=0)]


class SidecarBaseModel(BaseModel):
    model_config = ConfigDict(extra="allow", populate_by_name=True)
    _logged_extra_keys: ClassVar[set[str]] = set()

    def model_post_init(self, _context: object, /) -> None:
        extras = self.__pydantic_extra__
        if not extras:
            return
        new_keys = set(extras).difference(self._logged_extra_keys)
        if not new_keys:
            return
        self._logged_extra_keys.update(new_keys)
        log.debug(
            "Sidecar %s: unmodeled keys: %s",
            type(self).__name__,
            ", ".join(sorted(new_keys)),
        )


class SidecarBlockRef(SidecarBaseModel):
    hash: str
    height: int


class SidecarStorageResponse(SidecarBaseModel):
    """``GET /pallets/{pallet}/storage/{item}``; ``value`` is null when the key is unset."""

    at: SidecarBlockRef
    pallet: str
    pallet_index: int | None = Field(default=None, alias="palletIndex")
    storage_item: str = Field(alias="storageItem")
    keys: list[str] = Field(default_factory=list)
    value: dict[str, object] | None = None


class CandidateInfo(SidecarBaseModel):
    """Collator candidate metadata; only the self bond is modeled."""

    bond: Balance


class DelegatorState(SidecarBaseModel):
    """Delegator state; ``total`` is the sum bonded over all delegations."""

    total: Balance
