"""String utilities."""


def parse_csv_field(value: str | None) -> list[str]:
    """Split a comma-separated query value into stripped, non-empty items."""
    if not value:
        return []
    return [item.strip() for item in value.split(",") if item.strip()]


def normalize_symbol(symbol: str) -> str:
    """Ticker symbols are stored trimmed and uppercase."""
    return symbol.strip().upper()
