"""
slotledger.runtime.accounts
===========================

Named accounts of a simulated chain session.

A session has a ``deployer`` and nine wallets ``wallet_1`` .. ``wallet_9``.
Addresses are derived deterministically from the account name, so the same
name always maps to the same principal.

Examples
--------
>>> from slotledger.runtime.accounts import Accounts
>>> accounts = Accounts.default()
>>> accounts.get("wallet_4").name
'wallet_4'
>>> accounts.get("deployer") is accounts.deployer
True
>>> len(accounts)
10
"""

from __future__ import annotations
import hashlib
from dataclasses import dataclass
from typing import Dict, Iterator, List, Optional

from slotledger.core.names import Principal

_C32 = "0123456789ABCDEFGHJKMNPQRSTVWXYZ"


def derive_address(name: str, prefix: str = "ST") -> Principal:
    """A stable 41-character principal for ``name``."""
    digest = hashlib.sha256(name.encode("utf-8")).digest()
    n = int.from_bytes(digest, "big")
    chars = []
    for _ in range(39):
        n, r = divmod(n, 32)
        chars.append(_C32[r])
    return Principal(prefix + "".join(chars))


@dataclass(frozen=True)
class Account:
    name: str
    address: Principal

    def __str__(self) -> str:
        return self.address


class Accounts:
    """Mapping of account name to `Account`."""

    DEFAULT_NAMES = ["deployer"] + [f"wallet_{i}" for i in range(1, 10)]

    def __init__(self, accounts: List[Account]) -> None:
        self._by_name: Dict[str, Account] = {a.name: a for a in accounts}
        if "deployer" not in self._by_name:
            raise ValueError("an account named 'deployer' is required")

    @classmethod
    def default(cls) -> "Accounts":
        return cls([Account(n, derive_address(n)) for n in cls.DEFAULT_NAMES])

    @property
    def deployer(self) -> Account:
        return self._by_name["deployer"]

    def get(self, name: str) -> Optional[Account]:
        return self._by_name.get(name)

    def values(self) -> List[Account]:
        return list(self._by_name.values())

    def __iter__(self) -> Iterator[str]:
        return iter(self._by_name)

    def __len__(self) -> int:
        return len(self._by_name)
