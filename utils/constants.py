"""
utils/constants.py

Purpose: Centralized static content

- Session cookie name
- Site metadata
- Vendor request constants
- Sample chart data and page copy

(Prevents hardcoding across the codebase)
"""

# ============================================================
# SESSION
# ============================================================

SESSION_COOKIE_NAME = "appwrite-session"
CURRENT_SESSION = "current"

# ============================================================
# SITE METADATA
# ============================================================

SITE_TITLE = "Advanced Bank"
SITE_DESCRIPTION = (
    "Advanced is a modern banking platform where you can do all of your "
    "transactions for everyone!"
)
SITE_ICON = "/static/icons/logo.svg"
AUTH_IMAGE = "/static/icons/auth-image.svg"

# ============================================================
# AGGREGATION API (PLAID)
# ============================================================

PLAID_PRODUCTS = ["auth"]
PLAID_COUNTRY_CODES = ["US"]
PLAID_LANGUAGE = "en"
PLAID_PROCESSOR = "dwolla"

# ============================================================
# PAYMENT NETWORK (DWOLLA)
# ============================================================

DWOLLA_CUSTOMER_TYPE = "personal"
DWOLLA_MEDIA_TYPE = "application/vnd.dwolla.v1.hal+json"
DWOLLA_CURRENCY = "USD"

# ============================================================
# ACTIONS
# ============================================================

PUBLIC_TOKEN_EXCHANGE_COMPLETE = "Public Token Exchange complete!"
ROOT_PATH = "/"

# ============================================================
# DOUGHNUT CHART (sample values, not derived from accounts)
# ============================================================

DOUGHNUT_CHART_LABEL = "Banks"
DOUGHNUT_CHART_DATA = [1250, 3240, 5432]
DOUGHNUT_CHART_COLORS = ["#2674f5", "#074acc", "#02326a"]
DOUGHNUT_CHART_LABELS = ["Kaspi Bank", "Swiss Bank", "American Bank"]
DOUGHNUT_CHART_CUTOUT = "50%"

# ============================================================
# PAGE COPY
# ============================================================

HOME_TITLE = "Welcome"
HOME_SUBTEXT = "Access and manage your account and transactions efficiently."
SIGN_IN_TITLE = "Sign In"
SIGN_UP_TITLE = "Sign Up"
AUTH_SUBTEXT = "Please enter your details"
