"""Acceptance rules for newly listed tokens.

Each rule is a named predicate over an EvaluationContext that returns None
when the token passes, or a short human-readable detail when it fails.
Rules are pure: no I/O and no clock reads (the context carries `now`).

Unknown values follow a per-rule default:
- liquidity and taxes default to 0
- market cap, holder concentration and supply are only checked when known
- volume must be known
- an unknown authority passes (total absence of security data is caught
  by the security_data rule)
"""

from collections.abc import Callable, Iterable
from dataclasses import dataclass

from sniper.config import CriteriaSettings
from sniper.models import Candidate, Overview, SecurityProfile

FRESHNESS = "freshness"
MARKET_CAP = "market_cap"
ACTIVITY = "activity"
LIQUIDITY = "liquidity"
SECURITY_DATA = "security_data"
AUTHORITY = "authority"
TAX = "tax"
HOLDER_CONCENTRATION = "holder_concentration"
NAME_SYMBOL = "name_symbol"
SUPPLY = "supply"
SYMBOL_LENGTH = "symbol_length"
DENYLIST = "denylist"


@dataclass(frozen=True)
class EvaluationContext:
    """Everything a rule may look at for one candidate."""

    candidate: Candidate
    overview: Overview
    security: SecurityProfile
    now: float  # Unix seconds


@dataclass(frozen=True)
class Rule:
    """A named check. Soft rules only produce warnings."""

    name: str
    check: Callable[[EvaluationContext], str | None]
    hard: bool = True


def normalize_denylist(symbols: Iterable[str]) -> frozenset[str]:
    return frozenset(s.strip().upper() for s in symbols if s and s.strip())


def _has_invalid_marker(text: str) -> bool:
    return "?" in text or "unknown" in text.lower()


def build_rules(settings: CriteriaSettings) -> list[Rule]:
    """Build the ordered rule list for the given thresholds.

    Order is significant: evaluation stops at the first failing hard rule
    and that rule's name becomes the verdict's fail_reason.
    """
    denylist = normalize_denylist(settings.denylist)

    def freshness(ctx: EvaluationContext) -> str | None:
        overview = ctx.overview
        if overview.created_time is not None:
            age = ctx.now - overview.created_time
            if age > settings.max_age_seconds:
                return f"token too old: {int(age)}s since creation"
            return None
        if overview.last_trade_time is not None:
            idle = ctx.now - overview.last_trade_time
            if idle > settings.max_age_seconds:
                return f"inactive: {int(idle)}s since last trade"
            return None
        # No timing data: only a very small market cap counts as "new".
        market_cap = overview.market_cap
        if (
            market_cap is None
            or market_cap <= 0
            or market_cap >= settings.no_timing_max_market_cap
        ):
            return f"no timing data and market cap not tiny: {market_cap}"
        return None

    def market_cap(ctx: EvaluationContext) -> str | None:
        value = ctx.overview.market_cap
        if value is not None and value > settings.max_market_cap:
            return f"market cap too high: {value:,.0f}"
        return None

    def activity(ctx: EvaluationContext) -> str | None:
        volume = ctx.overview.volume_24h
        if volume is None or volume < settings.min_volume_24h:
            return f"insufficient 24h volume: {volume}"
        return None

    def liquidity(ctx: EvaluationContext) -> str | None:
        value = ctx.overview.liquidity or 0.0
        if value < settings.min_liquidity:
            return f"liquidity too low: {value:,.0f}"
        return None

    def security_data(ctx: EvaluationContext) -> str | None:
        if ctx.security.is_empty:
            return "no security data available"
        return None

    def authority(ctx: EvaluationContext) -> str | None:
        if ctx.security.mint_authority_active is True:
            return "mint authority active"
        if ctx.security.freeze_authority_active is True:
            return "freeze authority active"
        return None

    def tax(ctx: EvaluationContext) -> str | None:
        buy = ctx.security.buy_tax_pct or 0.0
        sell = ctx.security.sell_tax_pct or 0.0
        if buy >= settings.max_tax_pct:
            return f"buy tax too high: {buy}%"
        if sell >= settings.max_tax_pct:
            return f"sell tax too high: {sell}%"
        return None

    def holder_concentration(ctx: EvaluationContext) -> str | None:
        top = ctx.security.top_holder_pct
        creator = ctx.security.creator_balance_pct
        if top is not None and top > settings.max_top_holder_pct:
            return f"top holder owns {top}%"
        if creator is not None and creator > settings.max_creator_balance_pct:
            return f"creator owns {creator}%"
        return None

    def name_symbol(ctx: EvaluationContext) -> str | None:
        name = ctx.candidate.name
        symbol = ctx.candidate.symbol
        if not name or not symbol:
            return f"missing name or symbol: {name!r}/{symbol!r}"
        if _has_invalid_marker(name):
            return f"invalid name: {name!r}"
        if _has_invalid_marker(symbol):
            return f"invalid symbol: {symbol!r}"
        if not settings.min_symbol_length <= len(symbol) <= settings.max_symbol_length:
            return f"invalid symbol length: {symbol!r} ({len(symbol)} chars)"
        return None

    def supply(ctx: EvaluationContext) -> str | None:
        value = ctx.candidate.supply
        if value is not None and value > settings.max_supply:
            return f"supply too high: {value:,.0f}"
        return None

    def symbol_length(ctx: EvaluationContext) -> str | None:
        symbol = ctx.candidate.symbol
        if symbol and not (
            settings.preferred_min_symbol_length
            <= len(symbol)
            <= settings.preferred_max_symbol_length
        ):
            return f"symbol length not optimal: {symbol!r} ({len(symbol)} chars)"
        return None

    def denylisted(ctx: EvaluationContext) -> str | None:
        if ctx.candidate.symbol.strip().upper() in denylist:
            return f"established token: {ctx.candidate.symbol}"
        return None

    return [
        Rule(FRESHNESS, freshness),
        Rule(MARKET_CAP, market_cap),
        Rule(ACTIVITY, activity),
        Rule(LIQUIDITY, liquidity),
        Rule(SECURITY_DATA, security_data),
        Rule(AUTHORITY, authority),
        Rule(TAX, tax),
        Rule(HOLDER_CONCENTRATION, holder_concentration),
        Rule(NAME_SYMBOL, name_symbol),
        Rule(SUPPLY, supply),
        Rule(SYMBOL_LENGTH, symbol_length, hard=False),
        Rule(DENYLIST, denylisted),
    ]
