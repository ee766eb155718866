"""
Stock Catalog - Seed data for the three-tier income strategy.

INITIAL_CATALOG is loaded by GET /api/stocks/initialize with live prices.
ADDITIONAL_STOCKS is seeded at startup (with these reference prices) when
the 'seed_additional_stocks' setting is enabled.
"""

from income_stream.config.tiers import tier_category


def _stock(symbol, name, tier, yield_pct, frequency, risk, sub_category=None, description=None, price=None):
    entry = {
        "symbol": symbol,
        "name": name,
        "tier": tier,
        "tier_category": tier_category(tier),
        "sub_category": sub_category,
        "dividend_yield": yield_pct,
        "dividend_frequency": frequency,
        "description": description,
        "risk_level": risk,
        "currency": "USD",
    }
    if price is not None:
        entry["current_price"] = price
    return entry


_MANDATORY = "Mandatory Starting Position"
_OTHER_ANCHOR = "Other Anchor Funds"
_RECOMMENDED = "Recommended Starting Position"
_OTHER_TIER2 = "Other Tier 2 Funds"

INITIAL_CATALOG = [
    # Tier 1: Anchor Funds
    _stock("CLM", "Cornerstone Strategic Value Fund", 1, 17.88, "Monthly", "Moderate", _MANDATORY,
           "A closed-end fund with high dividend yield, mandatory starting position"),
    _stock("CRF", "Cornerstone Total Return Fund", 1, 19.55, "Monthly", "Moderate", _MANDATORY,
           "A closed-end fund with high dividend yield, mandatory starting position"),
    _stock("YYY", "Amplify High Income ETF", 1, 10.5, "Monthly", "Moderate", _OTHER_ANCHOR,
           "ETF that invests in closed-end funds"),
    _stock("REM", "iShares Mortgage Real Estate ETF", 1, 9.8, "Quarterly", "Moderate", _OTHER_ANCHOR,
           "ETF focused on mortgage REITs"),
    _stock("GOF", "Guggenheim Strategic Opportunities Fund", 1, 12.30, "Monthly", "Moderate", _OTHER_ANCHOR,
           "Flexible strategy across fixed-income and equity securities"),
    _stock("ECC", "Eagle Point Credit Company", 1, 15.40, "Monthly", "Moderate", _OTHER_ANCHOR,
           "Invests primarily in equity and junior debt tranches of CLOs"),
    _stock("USA", "Liberty All-Star Equity Fund", 1, 9.5, "Quarterly", "Moderate", _OTHER_ANCHOR,
           "Closed-end fund investing in US equities"),
    _stock("GUT", "Gabelli Utility Trust", 1, 8.2, "Monthly", "Low", _OTHER_ANCHOR,
           "Closed-end fund focusing on utility companies"),
    _stock("BXMT", "Blackstone Mortgage Trust", 1, 11.2, "Quarterly", "Moderate", _OTHER_ANCHOR,
           "REIT focusing on senior mortgage loans"),
    _stock("PSEC", "Prospect Capital Corporation", 1, 12.80, "Monthly", "Moderate", _OTHER_ANCHOR,
           "Business development company providing debt and equity capital"),
    _stock("BCAT", "BlackRock Capital Allocation Trust", 1, 9.3, "Monthly", "Moderate", _OTHER_ANCHOR,
           "Closed-end fund with flexible capital allocation strategy"),
    # Tier 2: Index-Based Funds
    _stock("QQQY", "Defiance Nasdaq 100 Enhanced Options & 0DTE Income ETF", 2, 90.06, "Weekly", "High",
           _RECOMMENDED, "Uses daily options on Nasdaq 100 for weekly income"),
    _stock("WDTE", "Defiance S&P 500 Enhanced Options & 0DTE Income ETF", 2, 65.00, "Weekly", "High",
           _RECOMMENDED, "Uses daily options on S&P 500 for weekly income"),
    _stock("IWMY", "Defiance R2000 Enhanced Options & 0DTE Income ETF", 2, 73.08, "Weekly", "High",
           _RECOMMENDED, "Uses daily options on Russell 2000 for weekly income"),
    _stock("SPYT", "Defiance S&P 500 Enhanced Options Income ETF", 2, 20.02, "Monthly", "Moderate",
           _OTHER_TIER2, "Lower yield with less price erosion than higher-tier options"),
    _stock("QQQT", "Defiance Nasdaq-100 Enhanced Options Income ETF", 2, 20.02, "Monthly", "Moderate",
           _OTHER_TIER2, "Lower yield with less price erosion than higher-tier options"),
    _stock("USOY", "United States Oil ETF Options Income ETF", 2, 25.5, "Monthly", "High",
           _OTHER_TIER2, "Options income strategy based on oil ETFs"),
    # Tier 3: High-Yield Funds
    _stock("YMAX", "YieldMax Universe Fund of Option Income ETFs", 3, 68.44, "Monthly", "High",
           description="A fund of funds that invests in multiple YieldMax option income ETFs"),
    _stock("YMAG", "YieldMax Magnificent 7 Fund of Option Income ETFs", 3, 38.65, "Monthly", "High",
           description="Focuses on option income from the Magnificent 7 tech stocks"),
    _stock("ULTY", "YieldMax Ultra Income ETF", 3, 77.62, "Monthly", "Very High",
           description="Actively managed ETF seeking monthly income from covered call strategies"),
]

# Presence of this symbol marks the additional stocks as already seeded
ADDITIONAL_STOCKS_MARKER = "GOOGL"

ADDITIONAL_STOCKS = [
    _stock("TSPY", "T. Rowe Price Dividend Growth ETF", 2, 18.5, "Monthly", "Moderate", price=25.75),
    _stock("SPYI", "NEOS S&P 500 High Income ETF", 2, 22.3, "Monthly", "Moderate", price=48.92),
    _stock("QQQI", "NEOS Nasdaq 100 High Income ETF", 2, 24.1, "Monthly", "Moderate", price=51.35),
    _stock("XPAY", "NEOS Enhanced Income Aggregate Bond ETF", 1, 9.8, "Monthly", "Low", price=45.67),
    _stock("IWMI", "iShares Russell 2000 ETF", 2, 19.5, "Quarterly", "Moderate", price=38.45),
    _stock("IYRI", "iShares ESG Screened S&P 500 ETF", 1, 8.7, "Quarterly", "Low", price=42.18),
    _stock("GIAX", "Goldman Sachs MarketBeta US Equity ETF", 1, 7.9, "Quarterly", "Low", price=65.32),
    _stock("EIC", "Eagle Point Income Company", 1, 14.2, "Monthly", "Moderate", price=16.75),
    _stock("RDTE", "Roundhill Daily Russell 2000 ETF", 2, 35.8, "Weekly", "High", price=22.45),
    _stock("GOOGL", "Alphabet Inc.", 1, 0.0, "None", "Moderate", price=175.85),
    _stock("AMZN", "Amazon.com Inc.", 1, 0.0, "None", "Moderate", price=185.07),
    _stock("SCHG", "Schwab U.S. Large-Cap Growth ETF", 1, 0.5, "Quarterly", "Low", price=92.35),
    _stock("PLTY", "YieldMax PLTR Option Income Strategy ETF", 3, 45.2, "Monthly", "High", price=18.65),
    _stock("MSTY", "YieldMax MSFT Option Income Strategy ETF", 3, 42.8, "Monthly", "High", price=19.25),
    _stock("TSYY", "YieldMax TSLA Option Income Strategy ETF", 3, 48.5, "Monthly", "Very High", price=15.85),
    _stock("AIPI", "YieldMax AI Option Income Strategy ETF", 3, 52.3, "Monthly", "Very High", price=17.45),
    _stock("HOOD", "Robinhood Markets, Inc.", 1, 0.0, "None", "High", price=22.85),
    _stock("HIMS", "Hims & Hers Health, Inc.", 1, 0.0, "None", "High", price=18.95),
    _stock("S", "SentinelOne, Inc.", 1, 0.0, "None", "High", price=23.15),
    _stock("NFLP", "YieldMax NFLX Option Income Strategy ETF", 3, 44.7, "Monthly", "High", price=16.85),
    _stock("SVOL", "Simplify Volatility Premium ETF", 2, 28.5, "Monthly", "High", price=24.35),
]
