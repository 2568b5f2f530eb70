import csv
from decimal import Decimal, InvalidOperation
from typing import Dict, Mapping, TextIO

from models import ClientAccount

BALANCE_FIELDS = ["client", "available", "held", "total", "locked"]


class BalanceFormatError(ValueError):
    """Raised when a balance file cannot be read back into accounts."""


def format_decimal(value: Decimal) -> str:
    """Format decimal in plain notation, removing trailing zeros."""
    normalized = value.normalize()
    return f"{normalized:f}"


def write_balances(accounts: Mapping[int, ClientAccount], stream: TextIO) -> None:
    """Write one row per client, ordered by client id."""
    writer = csv.writer(stream, lineterminator="\n")
    writer.writerow(BALANCE_FIELDS)
    for client_id in sorted(accounts.keys()):
        account = accounts[client_id]
        writer.writerow([
            client_id,
            format_decimal(account.available),
            format_decimal(account.held),
            format_decimal(account.total),
            str(account.locked).lower(),
        ])


def read_balances(stream: TextIO) -> Dict[int, ClientAccount]:
    """Read a file produced by write_balances back into accounts."""
    accounts: Dict[int, ClientAccount] = {}
    reader = csv.DictReader(stream)

    for row in reader:
        try:
            normalized = {k.strip(): v.strip() for k, v in row.items()}
            account = ClientAccount(
                client_id=int(normalized["client"]),
                available=Decimal(normalized["available"]),
                held=Decimal(normalized["held"]),
                locked=_parse_bool(normalized["locked"]),
            )
            total = Decimal(normalized["total"])
        except (KeyError, ValueError, InvalidOperation, AttributeError) as e:
            raise BalanceFormatError(f"Malformed balance row {row}: {e}") from e

        if account.total != total:
            raise BalanceFormatError(f"Client {account.client_id}: total {total} != available + held ({account.total})")
        if account.client_id in accounts:
            raise BalanceFormatError(f"Client {account.client_id} appears more than once")

        accounts[account.client_id] = account

    return accounts


def _parse_bool(value: str) -> bool:
    lowered = value.lower()
    if lowered == "true":
        return True
    if lowered == "false":
        return False
    raise ValueError(f"expected true or false, got {value!r}")
