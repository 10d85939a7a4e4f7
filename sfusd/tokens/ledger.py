# Copyright 2025 Hathor Labs
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#    http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

import logging
from typing import Protocol

from sfusd.types import Address, Amount, TokenUid

logger = logging.getLogger(__name__)


class LedgerError(Exception):
    """Base class for balance movements that cannot be applied."""


class InsufficientBalance(LedgerError):
    """Raised when the sender does not hold enough tokens."""

    def __init__(self, address: Address, balance: int, needed: int) -> None:
        super().__init__(f'insufficient balance: has {balance}, needs {needed}')
        self.address = address
        self.balance = balance
        self.needed = needed


class InsufficientAllowance(LedgerError):
    """Raised when a spender moves more than it was approved for."""

    def __init__(self, spender: Address, allowance: int, needed: int) -> None:
        super().__init__(f'insufficient allowance: has {allowance}, needs {needed}')
        self.spender = spender
        self.allowance = allowance
        self.needed = needed


class InvalidTransfer(LedgerError):
    """Raised for negative amounts."""


class Ledger(Protocol):
    """Fungible balance ledger the staking pool moves value through."""

    token_uid: TokenUid

    def balance_of(self, address: Address) -> Amount:
        ...

    def transfer(self, sender: Address, recipient: Address, amount: int) -> None:
        ...

    def transfer_from(self, spender: Address, owner: Address, recipient: Address, amount: int) -> None:
        ...


class MemoryLedger:
    """In-memory ledger with transfer/approve semantics.

    Every operation validates before touching balances, so a failed call
    leaves the ledger unchanged.
    """

    def __init__(self, token_uid: TokenUid) -> None:
        self.token_uid = token_uid
        self.total_supply: int = 0
        self._balances: dict[Address, int] = {}
        self._allowances: dict[tuple[Address, Address], int] = {}

    def balance_of(self, address: Address) -> Amount:
        return Amount(self._balances.get(address, 0))

    def allowance(self, owner: Address, spender: Address) -> Amount:
        return Amount(self._allowances.get((owner, spender), 0))

    def mint(self, address: Address, amount: int) -> None:
        self._check_amount(amount)
        self._balances[address] = self._balances.get(address, 0) + amount
        self.total_supply += amount

    def approve(self, owner: Address, spender: Address, amount: int) -> None:
        self._check_amount(amount)
        self._allowances[(owner, spender)] = amount

    def transfer(self, sender: Address, recipient: Address, amount: int) -> None:
        self._check_amount(amount)
        balance = self._balances.get(sender, 0)
        if balance < amount:
            raise InsufficientBalance(sender, balance, amount)
        self._move(sender, recipient, amount)

    def transfer_from(self, spender: Address, owner: Address, recipient: Address, amount: int) -> None:
        self._check_amount(amount)
        allowance = self._allowances.get((owner, spender), 0)
        if allowance < amount:
            raise InsufficientAllowance(spender, allowance, amount)
        balance = self._balances.get(owner, 0)
        if balance < amount:
            raise InsufficientBalance(owner, balance, amount)
        self._allowances[(owner, spender)] = allowance - amount
        self._move(owner, recipient, amount)

    def _move(self, sender: Address, recipient: Address, amount: int) -> None:
        self._balances[sender] = self._balances.get(sender, 0) - amount
        self._balances[recipient] = self._balances.get(recipient, 0) + amount
        logger.debug('moved %d of %s from %s to %s', amount, self.token_uid.hex(), sender.hex(), recipient.hex())

    @staticmethod
    def _check_amount(amount: int) -> None:
        if amount < 0:
            raise InvalidTransfer(f'negative amount: {amount}')
