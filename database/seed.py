# Trading Dashboard - Default strategy catalog
# Inserted once at schema initialization; rows are keyed by unique name.

DEFAULT_STRATEGIES: list[dict[str, str]] = [
    # Bullish
    {"name": "Long Call", "category": "Bullish", "description": "Buy call options expecting price increase", "color_hex": "#22c55e"},
    {"name": "Bull Call Spread", "category": "Bullish", "description": "Buy lower strike call, sell higher strike call", "color_hex": "#16a34a"},
    {"name": "Cash-Secured Put", "category": "Bullish", "description": "Sell puts with cash backing to acquire shares", "color_hex": "#15803d"},
    # Bearish
    {"name": "Long Put", "category": "Bearish", "description": "Buy put options expecting price decrease", "color_hex": "#ef4444"},
    {"name": "Bear Put Spread", "category": "Bearish", "description": "Buy higher strike put, sell lower strike put", "color_hex": "#dc2626"},
    {"name": "Covered Call", "category": "Bearish", "description": "Sell calls against owned shares", "color_hex": "#b91c1c"},
    # Neutral
    {"name": "Iron Condor", "category": "Neutral", "description": "Sell call and put spreads for range-bound profit", "color_hex": "#8b5cf6"},
    {"name": "Butterfly Spread", "category": "Neutral", "description": "Limited risk/reward for minimal price movement", "color_hex": "#7c3aed"},
    {"name": "Straddle", "category": "Neutral", "description": "Buy call and put at same strike for volatility play", "color_hex": "#6d28d9"},
]
