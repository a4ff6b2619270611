"""In-memory account registry: email login with a credit balance.

Login is an idempotent upsert.  An unknown email creates an account with the
starting credit grant; a known email resumes it with a fresh session token.
"""

import threading
import time
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone

from airouter.config import settings
from airouter.costs import InsufficientCredits
from airouter.util import is_valid_email, normalize_email


@dataclass
class LedgerEntry:
    amount: float
    model: str
    category: str
    request_id: str
    timestamp: str = field(default_factory=lambda: datetime.now(timezone.utc).isoformat())


@dataclass
class Account:
    email: str
    token: str
    credits: float
    created_at: float
    last_active: float
    ledger: list[LedgerEntry] = field(default_factory=list)


class AccountRegistry:
    def __init__(self, starting_credits: float | None = None) -> None:
        self._accounts: dict[str, Account] = {}
        self._tokens: dict[str, str] = {}
        self._starting_credits = starting_credits
        self._lock = threading.Lock()

    @property
    def starting_credits(self) -> float:
        if self._starting_credits is not None:
            return self._starting_credits
        return settings.starting_credits

    def login(self, email: str) -> tuple[Account, bool]:
        """Return ``(account, created)`` for ``email``, issuing a new token."""
        if not is_valid_email(email):
            raise ValueError("Please enter a valid email address")
        key = normalize_email(email)
        now = time.time()
        with self._lock:
            account = self._accounts.get(key)
            created = account is None
            if account is None:
                account = Account(
                    email=key,
                    token="",
                    credits=self.starting_credits,
                    created_at=now,
                    last_active=now,
                )
                self._accounts[key] = account
            else:
                self._tokens.pop(account.token, None)
            account.token = str(uuid.uuid4())
            account.last_active = now
            self._tokens[account.token] = key
        return account, created

    def get_by_token(self, token: str) -> Account | None:
        with self._lock:
            key = self._tokens.get(token)
            account = self._accounts.get(key) if key else None
            if account:
                account.last_active = time.time()
            return account

    def check_credits(self, account: Account, amount: float) -> None:
        if account.credits < amount:
            raise InsufficientCredits(account.credits, amount)

    def reserve(self, account: Account, amount: float) -> None:
        """Take ``amount`` off the balance up front; ``refund`` gives it back."""
        with self._lock:
            self.check_credits(account, amount)
            account.credits = round(account.credits - amount, 6)

    def refund(self, account: Account, amount: float) -> None:
        with self._lock:
            account.credits = round(account.credits + amount, 6)

    def record(self, account: Account, amount: float, *, model: str, category: str, request_id: str) -> None:
        """Log a settled reservation in the account's ledger."""
        with self._lock:
            account.ledger.append(LedgerEntry(amount, model, category, request_id))

    def reset(self) -> None:
        with self._lock:
            self._accounts.clear()
            self._tokens.clear()

    @property
    def account_count(self) -> int:
        return len(self._accounts)


# Module-level singleton
accounts = AccountRegistry()
