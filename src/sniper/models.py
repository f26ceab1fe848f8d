"""Shared data models for the token sniper.

Market payloads come from an external JSON schema that is consumed as-is:
missing or malformed fields become None ("unknown"), never zero and never
an exception. Rules decide per field how unknown values are treated.
"""

import math
import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Any


def _to_float(value: Any) -> float | None:
    """Best-effort numeric conversion; None for anything non-numeric."""
    if value is None or isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    if math.isnan(number) or math.isinf(number):
        return None
    return number


def _to_timestamp(value: Any) -> float | None:
    """Unix seconds, or None. Zero is treated as 'not reported'."""
    number = _to_float(value)
    if number is None or number <= 0:
        return None
    return number


def _to_authority(value: Any) -> bool | None:
    """Authority flag from a bool or an authority address.

    A non-empty address string means the authority is still held.
    """
    if value is None:
        return None
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        return bool(value.strip())
    return None


def _first(payload: dict, *keys: str) -> Any:
    """Return the first non-None value among the given keys."""
    for key in keys:
        value = payload.get(key)
        if value is not None:
            return value
    return None


def _to_text(value: Any) -> str:
    return value if isinstance(value, str) else ""


@dataclass(frozen=True)
class Candidate:
    """A discovered token from the ranked token list."""

    address: str
    name: str
    symbol: str
    supply: float | None = None

    @classmethod
    def from_payload(cls, payload: dict) -> "Candidate":
        return cls(
            address=_to_text(payload.get("address")),
            name=_to_text(payload.get("name")),
            symbol=_to_text(payload.get("symbol")),
            supply=_to_float(_first(payload, "supply", "totalSupply")),
        )


@dataclass(frozen=True)
class Overview:
    """Market snapshot for one token. Timestamps are Unix seconds."""

    price: float | None = None
    market_cap: float | None = None
    volume_24h: float | None = None
    liquidity: float | None = None
    price_change_24h: float | None = None
    created_time: float | None = None
    last_trade_time: float | None = None

    @classmethod
    def empty(cls) -> "Overview":
        return cls()

    @classmethod
    def from_payload(cls, payload: dict | None) -> "Overview":
        if not payload:
            return cls.empty()
        return cls(
            price=_to_float(payload.get("price")),
            market_cap=_to_float(_first(payload, "marketCap", "mc")),
            volume_24h=_to_float(_first(payload, "volume24h", "v24hUSD")),
            liquidity=_to_float(payload.get("liquidity")),
            price_change_24h=_to_float(
                _first(payload, "priceChange24h", "priceChange24hPercent")
            ),
            created_time=_to_timestamp(payload.get("createdTime")),
            last_trade_time=_to_timestamp(
                _first(payload, "lastTradeTime", "lastTradeUnixTime")
            ),
        )


@dataclass(frozen=True)
class SecurityProfile:
    """Safety snapshot for one token.

    An empty profile means the token could not be verified and must be
    treated as unsafe; it is distinct from a profile that reports no risks.
    """

    mint_authority_active: bool | None = None
    freeze_authority_active: bool | None = None
    buy_tax_pct: float | None = None
    sell_tax_pct: float | None = None
    top_holder_pct: float | None = None
    creator_balance_pct: float | None = None
    raw: dict = field(default_factory=dict, compare=False, repr=False)

    @classmethod
    def empty(cls) -> "SecurityProfile":
        return cls()

    @classmethod
    def from_payload(cls, payload: dict | None) -> "SecurityProfile":
        if not payload:
            return cls.empty()
        return cls(
            mint_authority_active=_to_authority(payload.get("mintAuthority")),
            freeze_authority_active=_to_authority(payload.get("freezeAuthority")),
            buy_tax_pct=_to_float(payload.get("buyTax")),
            sell_tax_pct=_to_float(payload.get("sellTax")),
            top_holder_pct=_to_float(payload.get("topHolderRate")),
            creator_balance_pct=_to_float(payload.get("creatorBalance")),
            raw=dict(payload),
        )

    @property
    def is_empty(self) -> bool:
        """True when nothing at all was reported for the token."""
        if self.raw:
            return False
        return all(
            value is None
            for value in (
                self.mint_authority_active,
                self.freeze_authority_active,
                self.buy_tax_pct,
                self.sell_tax_pct,
                self.top_holder_pct,
                self.creator_balance_pct,
            )
        )


@dataclass(frozen=True)
class Verdict:
    """Result of evaluating a candidate against the acceptance policy."""

    accepted: bool
    fail_reason: str | None = None  # id of the first failing hard rule
    detail: str = ""
    warnings: tuple[str, ...] = ()


@dataclass
class CandidateBatch:
    """One discovery read. `throttled` is set when the API rate limited us."""

    candidates: list[Candidate] = field(default_factory=list)
    throttled: bool = False

    def __len__(self) -> int:
        return len(self.candidates)

    def __bool__(self) -> bool:
        return bool(self.candidates)


class MonitorState(str, Enum):
    """Monitoring on/off state."""

    STOPPED = "stopped"
    ACTIVE = "active"


class MonitorSwitch:
    """Explicit holder of MonitorState.

    Owned by MonitorController and handed to ScanOrchestrator, which only
    reads it.
    """

    def __init__(self, state: MonitorState = MonitorState.STOPPED) -> None:
        self._state = state

    @property
    def state(self) -> MonitorState:
        return self._state

    @property
    def is_active(self) -> bool:
        return self._state is MonitorState.ACTIVE

    def activate(self) -> bool:
        """Switch to ACTIVE. Returns False if it already was."""
        if self._state is MonitorState.ACTIVE:
            return False
        self._state = MonitorState.ACTIVE
        return True

    def deactivate(self) -> bool:
        """Switch to STOPPED. Returns False if it already was."""
        if self._state is MonitorState.STOPPED:
            return False
        self._state = MonitorState.STOPPED
        return True


@dataclass
class ScanSummary:
    """Counters for one scan cycle."""

    listed: int = 0
    skipped_seen: int = 0
    skipped_denylisted: int = 0
    evaluated: int = 0
    accepted: int = 0
    rejected: int = 0
    errors: int = 0
    alerts_failed: int = 0
    throttled: bool = False
    aborted: bool = False
    total_processed: int = 0
    started_at: float = field(default_factory=time.time)
    finished_at: float | None = None

    def to_dict(self) -> dict:
        return {
            "listed": self.listed,
            "skipped_seen": self.skipped_seen,
            "skipped_denylisted": self.skipped_denylisted,
            "evaluated": self.evaluated,
            "accepted": self.accepted,
            "rejected": self.rejected,
            "errors": self.errors,
            "alerts_failed": self.alerts_failed,
            "throttled": self.throttled,
            "aborted": self.aborted,
            "total_processed": self.total_processed,
            "started_at": self.started_at,
            "finished_at": self.finished_at,
        }
