"""
Shared constants for the pair swap core.
"""

# Decimals assumed for the token until its decimals() call has been answered.
DEFAULT_TOKEN_DECIMALS = 18

# The native coin is always 18-decimal (wei).
NATIVE_DECIMALS = 18

# Fractional digits a user may type, and the precision derived amounts are
# shown with. Independent of the token's own decimals.
MAX_INPUT_DECIMALS = 8

# Seconds between reserve/balance polls while an account is connected.
REFRESH_INTERVAL_SEC = 10.0

# Seconds a notification stays visible before dismissing itself.
NOTIFICATION_DURATION_SEC = 4.0

# Fee charged by the pool contract's getAmountOfTokens (99/100 of the input).
DEFAULT_FEE_BPS = 100
BPS_DENOMINATOR = 10_000

ZERO_AMOUNT = "0"
