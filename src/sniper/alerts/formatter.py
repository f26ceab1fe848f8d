"""Markdown alert message for an accepted token."""

from sniper.models import Candidate, Overview, SecurityProfile

SOLSCAN_TOKEN_URL = "https://solscan.io/token/{address}"
DEXSCREENER_URL = "https://dexscreener.com/solana/{address}"
JUPITER_SWAP_URL = "https://jup.ag/swap/SOL-{address}"

# Characters that open an entity in Telegram's legacy Markdown; they are
# only escapable outside an entity, so user text is never wrapped in one.
_MARKDOWN_SPECIAL = ("_", "*", "`", "[")


def _escape_md(text: str) -> str:
    for char in _MARKDOWN_SPECIAL:
        text = text.replace(char, "\\" + char)
    return text


def _money(value: float | None, fallback: str) -> str:
    if not value:
        return fallback
    return f"${value:,.0f}"


def _authority(active: bool | None) -> str:
    if active is False:
        return "Renounced"
    return "Unknown"


def format_alert(
    candidate: Candidate, overview: Overview, security: SecurityProfile
) -> str:
    """Render the Telegram (Markdown) alert text for a token.

    Missing values are shown with a placeholder instead of 0.
    """
    address = candidate.address
    name = _escape_md(candidate.name or "Unknown")
    symbol = _escape_md(candidate.symbol or "Unknown")
    price = f"${overview.price:.8f}" if overview.price else "New"

    lines = [
        "*NEW TOKEN DETECTED*",
        "",
        f"*Token:* {name} ({symbol})",
        f"`{address}`",
        "",
        f"*Price:* {price}",
        f"*Market Cap:* {_money(overview.market_cap, 'Low')}",
        f"*Liquidity:* {_money(overview.liquidity, 'Unknown')}",
        f"*24h Volume:* {_money(overview.volume_24h, 'New')}",
    ]
    if overview.price_change_24h is not None:
        lines.append(f"*24h Change:* {overview.price_change_24h:+.2f}%")
    lines += [
        "",
        "*Safety checks:*",
        "- Name/symbol valid",
        f"- Mint authority: {_authority(security.mint_authority_active)}",
        f"- Freeze authority: {_authority(security.freeze_authority_active)}",
        f"- Buy/sell tax: {security.buy_tax_pct or 0:g}% / {security.sell_tax_pct or 0:g}%",
        "",
        "*Links:* "
        f"[Solscan]({SOLSCAN_TOKEN_URL.format(address=address)}) | "
        f"[DexScreener]({DEXSCREENER_URL.format(address=address)}) | "
        f"[Jupiter]({JUPITER_SWAP_URL.format(address=address)})",
    ]
    return "\n".join(lines)
