# config/constants.py

ROLE_CHOICES = [
    {"key": "admin", "label": "Administrator"},
    {"key": "editor", "label": "Editor"},
]

DEFAULT_ROLE = "admin"

MIN_PASSWORD_LENGTH = 8

BUSINESS_PAGE_SIZE = 20
CATEGORY_LIST_LIMIT = 50

# Route surface
LOGIN_URL = "/login"
DASHBOARD_URL = "/dashboard"
BUSINESSES_URL = "/dashboard/businesses"
CATEGORIES_URL = "/dashboard/categories"

ACCESS_DENIED = "access_denied"
ACCESS_DENIED_MESSAGE = "Access denied. Admin approval required."
