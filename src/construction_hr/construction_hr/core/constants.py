"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

# Payroll always divides the monthly salary by a fixed 30-day month.
PAYROLL_DAYS_PER_MONTH = 30
OVERTIME_HOURS_PER_DAY = 8
DEFAULT_OVERTIME_RATE = "1.5"
DEFAULT_TAX_RATE_PERCENT = "10"

DEFAULT_JWT_EXPIRES_HOURS = 24
MIN_PASSWORD_LENGTH = 6
MINIMUM_APPLICANT_AGE = 18
ONBOARDING_DEADLINE_DAYS = 7

MAX_UPLOAD_MB = 5
DOCUMENT_EXTENSIONS = frozenset({".pdf", ".doc", ".docx", ".jpg", ".jpeg", ".png"})
IMAGE_EXTENSIONS = frozenset({".jpg", ".jpeg", ".png", ".gif", ".webp"})
MAX_SITE_PHOTOS_PER_REQUEST = 5

DEFAULT_LIST_LIMIT = 500
