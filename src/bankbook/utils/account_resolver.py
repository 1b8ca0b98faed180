"""Utility for resolving account references to IDs."""

from bankbook.domain.account import AccountService
from bankbook.domain.errors import NotFoundError


def resolve_account(account_service: AccountService, account: str | int) -> int:
    """Resolve an account ID, name or full name to an account ID.

    Numeric references are treated as IDs; anything else is matched against
    names case-insensitively.

    Raises:
        NotFoundError: If no account matches
    """
    if isinstance(account, int) or str(account).strip().isdigit():
        account_id = int(account)
        if account_service.get_account(account_id) is None:
            raise NotFoundError(f"Account ID {account_id} not found")
        return account_id

    found = account_service.find_by_name(str(account).strip())
    if found is None:
        raise NotFoundError(f"Account '{account}' not found")
    return found.id
