"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

MAX_MANAGEMENT_LEVEL = 4
DEFAULT_TOKEN_MAX_AGE_SECONDS = 7 * 24 * 3600
DEFAULT_LIST_LIMIT = 200
MIN_PASSWORD_LENGTH = 6

# Working-hours thresholds used when classifying a check-out.
HALF_DAY_MIN_HOURS = 5.0
FULL_DAY_MIN_HOURS = 7.5

MIN_POLL_OPTIONS = 2

DEFAULT_FINANCE_DEPARTMENT_NAMES = ("finance",)
DEFAULT_HR_DEPARTMENT_NAMES = ("human resources", "human resource", "hr", "people operations")

MAX_PAYSLIP_BYTES = 10 * 1024 * 1024
DEFAULT_PAYSLIP_STORAGE_DIR = "storage/payslips"
