"""Get-or-create for accounts, the identity anchor of every participant."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING

from stakeindex.domain.model import Account
from stakeindex.domain.staking.context import unique_ids

if TYPE_CHECKING:
    from collections.abc import Iterable

    from stakeindex.domain.staking.context import ResolutionContext

log = getLogger(__name__)


def get_or_create_account(ctx: ResolutionContext, account_id: str) -> Account:
    """Return the account for ``account_id``, inserting it if it does not exist yet."""

    repository = ctx.repositories.accounts
    account = repository.get(account_id)
    if account is None:
        account = Account(id=account_id, last_update_block=ctx.block.previous_height)
        repository.insert(account)
        log.debug("Created account %s at block %s", account_id, ctx.block.height)
    return account


def get_or_create_accounts(ctx: ResolutionContext, ids: Iterable[str]) -> list[Account]:
    """Batch variant of :func:`get_or_create_account`.

    One read for all requested ids and at most one batch write for the missing ones.
    Duplicate ids in ``ids`` produce a single account.
    """

    requested = unique_ids(ids)
    if not requested:
        return []

    repository = ctx.repositories.accounts
    found = {account.id: account for account in repository.find_by_ids(requested)}

    pending: dict[str, Account] = {}
    for account_id in requested:
        if account_id in found:
            continue
        pending[account_id] = Account(id=account_id, last_update_block=ctx.block.previous_height)

    if pending:
        repository.save(list(pending.values()))
        log.debug("Created %d accounts at block %s", len(pending), ctx.block.height)

    return [*found.values(), *pending.values()]
