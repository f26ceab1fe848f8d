"""Shared test fixtures for the token sniper."""

import pytest

from sniper.config import (
    AppSettings,
    BirdeyeSettings,
    CriteriaSettings,
    MonitorSettings,
    TelegramSettings,
)
from sniper.models import Candidate, Overview, SecurityProfile

# Fixed evaluation instant (Unix seconds) used across tests.
NOW = 1_700_000_000.0


@pytest.fixture
def now() -> float:
    return NOW


@pytest.fixture
def criteria_settings() -> CriteriaSettings:
    """Default thresholds."""
    return CriteriaSettings()


@pytest.fixture
def monitor_settings() -> MonitorSettings:
    """Monitor settings with the documented delays."""
    return MonitorSettings(
        poll_interval=60.0,
        throttle_cooldown=30.0,
        alert_delay=3.0,
        auto_start=False,
    )


@pytest.fixture
def birdeye_settings() -> BirdeyeSettings:
    return BirdeyeSettings(
        api_key="test-birdeye-key",  # type: ignore[arg-type]
        list_limit=50,
        max_candidates=20,
    )


@pytest.fixture
def mock_settings(birdeye_settings: BirdeyeSettings) -> AppSettings:
    """AppSettings with test defaults (no Telegram, no auto-start)."""
    return AppSettings(
        log_level="DEBUG",
        birdeye=birdeye_settings,
        telegram=TelegramSettings(),
        monitor=MonitorSettings(auto_start=False),
        criteria=CriteriaSettings(),
    )


@pytest.fixture
def good_candidate() -> Candidate:
    return Candidate(address="X1", name="Foo", symbol="ABCX")


@pytest.fixture
def good_overview(now: float) -> Overview:
    """Overview that passes every market rule."""
    return Overview(
        market_cap=200_000,
        volume_24h=5_000,
        liquidity=8_000,
        last_trade_time=now - 60,
    )


@pytest.fixture
def good_security() -> SecurityProfile:
    """Security profile that passes every safety rule."""
    return SecurityProfile(
        mint_authority_active=False,
        freeze_authority_active=False,
        buy_tax_pct=2,
        sell_tax_pct=3,
        top_holder_pct=10,
        creator_balance_pct=5,
    )
