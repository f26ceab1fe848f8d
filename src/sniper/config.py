"""Configuration system using pydantic-settings with environment variable loading."""

from pydantic import Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict

# Established / major asset symbols that are never alerted on.
DEFAULT_DENYLIST: tuple[str, ...] = (
    "SOL",
    "USDC",
    "USDT",
    "WETH",
    "WBTC",
    "BTC",
    "ETH",
    "JUP",
    "RAY",
    "BONK",
    "TRUMP",
    "PENGU",
    "JITOSOL",
    "JLP",
    "CBBTC",
    "FARTCOIN",
    "PUMP",
    "PEPE",
    "PEPECOIN",
    "DOGEWIF",
    "LILPEPE",
    "WALMART",
    "PORNHUB",
    "GENES",
    "IMMORTAL",
    "BUCKY",
    "RAI",
)


class BirdeyeSettings(BaseSettings):
    """Birdeye public API connection and pacing settings."""

    model_config = SettingsConfigDict(env_prefix="BIRDEYE_")

    api_key: SecretStr = SecretStr("")
    base_url: str = "https://public-api.birdeye.so"
    chain: str = "solana"
    sort_by: str = "v24hUSD"
    list_limit: int = 50  # rows requested from the token list
    max_candidates: int = 20  # rows actually scanned per cycle
    list_timeout: float = 15.0
    detail_timeout: float = 10.0

    # Token bucket: requests_per_period tokens every period_seconds, burst of `burst`
    requests_per_period: int = 1
    period_seconds: float = 1.5
    burst: int = 2
    overview_throttle_pause: float = 5.0  # limiter pause after a 429 on overview


class TelegramSettings(BaseSettings):
    """Telegram Bot API settings for alert delivery."""

    model_config = SettingsConfigDict(env_prefix="TELEGRAM_")

    bot_token: SecretStr = SecretStr("")
    chat_id: str = ""
    api_base: str = "https://api.telegram.org"
    timeout: float = 10.0

    @property
    def enabled(self) -> bool:
        return bool(self.bot_token.get_secret_value() and self.chat_id)


class MonitorSettings(BaseSettings):
    """Scan cadence and backoff settings."""

    model_config = SettingsConfigDict(env_prefix="MONITOR_")

    poll_interval: float = 60.0  # seconds between scan cycles
    throttle_cooldown: float = 30.0  # pause after the token list is rate limited
    alert_delay: float = 3.0  # pause after each published alert
    auto_start: bool = True
    auto_start_delay: float = 8.0


class CriteriaSettings(BaseSettings):
    """Thresholds for the acceptance policy.

    Percentages are expressed in whole percent (10 == 10%).
    """

    model_config = SettingsConfigDict(env_prefix="CRITERIA_")

    # Freshness
    max_age_seconds: float = 300.0
    no_timing_max_market_cap: float = 100_000.0

    # Market
    max_market_cap: float = 10_000_000.0
    min_volume_24h: float = 1_000.0
    min_liquidity: float = 5_000.0

    # Contract safety
    max_tax_pct: float = 10.0
    max_top_holder_pct: float = 20.0
    max_creator_balance_pct: float = 30.0

    # Tokenomics
    max_supply: float = 1_000_000_000.0
    min_symbol_length: int = 1
    max_symbol_length: int = 10
    preferred_min_symbol_length: int = 3
    preferred_max_symbol_length: int = 6

    denylist: list[str] = Field(default_factory=lambda: list(DEFAULT_DENYLIST))


class DashboardSettings(BaseSettings):
    """Control API server configuration."""

    model_config = SettingsConfigDict(env_prefix="DASHBOARD_")

    host: str = "0.0.0.0"
    port: int = 8080
    enabled: bool = True


class AppSettings(BaseSettings):
    """Root application settings, composing all sub-settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
    )

    log_level: str = "INFO"
    birdeye: BirdeyeSettings = BirdeyeSettings()
    telegram: TelegramSettings = TelegramSettings()
    monitor: MonitorSettings = MonitorSettings()
    criteria: CriteriaSettings = CriteriaSettings()
    dashboard: DashboardSettings = DashboardSettings()
