NAME_MAX_LENGTH = 200
DESCRIPTION_MAX_LENGTH = 1000
CATEGORY_MAX_LENGTH = 100
NOTES_MAX_LENGTH = 500

PRICE_PRECISION = 12
PRICE_SCALE = 2

DEFAULT_DASHBOARD_PATH = "/dashboard"

# Portable signed 32-bit INTEGER column range.
STOCK_MAX = 2**31 - 1
