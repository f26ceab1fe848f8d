"""Deterministic pass/fail gate for discovered tokens.

Runs the ordered rule list from sniper.criteria.rules and stops at the first
failing hard rule. Soft rules never reject; their findings are returned as
warnings on the Verdict.
"""

import time

from sniper.config import CriteriaSettings
from sniper.criteria.rules import (
    EvaluationContext,
    Rule,
    build_rules,
    normalize_denylist,
)
from sniper.logging import get_logger
from sniper.models import Candidate, Overview, SecurityProfile, Verdict

logger = get_logger(__name__)


class CriteriaEvaluator:
    """Evaluates a candidate with its overview and security snapshot.

    Args:
        settings: Thresholds for every rule.
        rules: Override the rule list (tests); defaults to build_rules(settings).
    """

    def __init__(
        self,
        settings: CriteriaSettings | None = None,
        rules: list[Rule] | None = None,
    ) -> None:
        self._settings = settings or CriteriaSettings()
        self._rules = rules if rules is not None else build_rules(self._settings)
        self._denylist = normalize_denylist(self._settings.denylist)

    @property
    def rules(self) -> list[Rule]:
        return list(self._rules)

    def is_denylisted(self, symbol: str | None) -> bool:
        """True if the symbol belongs to an established token (case-insensitive)."""
        return bool(symbol) and symbol.strip().upper() in self._denylist

    def evaluate(
        self,
        candidate: Candidate,
        overview: Overview,
        security: SecurityProfile,
        now: float | None = None,
    ) -> Verdict:
        """Apply every rule in order and return the verdict.

        Args:
            candidate: Token from the discovery list.
            overview: Market snapshot (may be empty).
            security: Security snapshot (empty means unverified).
            now: Evaluation instant in Unix seconds; defaults to time.time().

        Returns:
            Verdict with accepted=True only if no hard rule failed.
        """
        ctx = EvaluationContext(
            candidate=candidate,
            overview=overview,
            security=security,
            now=time.time() if now is None else now,
        )
        warnings: list[str] = []

        for rule in self._rules:
            detail = rule.check(ctx)
            if detail is None:
                logger.debug("rule_passed", rule=rule.name, symbol=candidate.symbol)
                continue
            if not rule.hard:
                logger.info(
                    "rule_warning",
                    rule=rule.name,
                    symbol=candidate.symbol,
                    detail=detail,
                )
                warnings.append(detail)
                continue
            logger.info(
                "candidate_rejected",
                rule=rule.name,
                symbol=candidate.symbol,
                address=candidate.address,
                detail=detail,
            )
            return Verdict(
                accepted=False,
                fail_reason=rule.name,
                detail=detail,
                warnings=tuple(warnings),
            )

        logger.info(
            "candidate_accepted",
            symbol=candidate.symbol,
            address=candidate.address,
            warnings=len(warnings),
        )
        return Verdict(accepted=True, warnings=tuple(warnings))

    def describe(self) -> str:
        """Human-readable summary of the acceptance policy."""
        s = self._settings
        max_age_minutes = s.max_age_seconds / 60
        return "\n".join(
            [
                "Token criteria (Solana)",
                "",
                "1. Freshness",
                f"  - created less than {max_age_minutes:g} min ago, or",
                f"  - last trade less than {max_age_minutes:g} min ago, or",
                f"  - no timing data and market cap under ${s.no_timing_max_market_cap:,.0f}",
                "2. Market cap & activity",
                f"  - market cap at most ${s.max_market_cap:,.0f}",
                f"  - 24h volume at least ${s.min_volume_24h:,.0f}",
                "3. Liquidity",
                f"  - at least ${s.min_liquidity:,.0f}",
                "4. Contract safety",
                "  - security data available",
                "  - no mint or freeze authority",
                "5. Buy/sell tax",
                f"  - both below {s.max_tax_pct:g}%",
                "6. Holder distribution",
                f"  - top holder at most {s.max_top_holder_pct:g}%",
                f"  - creator at most {s.max_creator_balance_pct:g}%",
                "7. Tokenomics & symbol",
                '  - name and symbol present, no "?" or "unknown"',
                f"  - symbol {s.min_symbol_length}-{s.max_symbol_length} chars"
                f" (prefer {s.preferred_min_symbol_length}-{s.preferred_max_symbol_length})",
                f"  - supply at most {s.max_supply:,.0f}",
                "8. Not an established token",
                f"  - {len(self._denylist)} symbols excluded",
                "",
                "Alerts are sent only when every check passes.",
            ]
        )
