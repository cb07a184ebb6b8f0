import os

from config import env_list

SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "hr_portal"),
}

DEBUG = True
LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG")

TOKEN_MAX_AGE_SECONDS = int(os.getenv("TOKEN_MAX_AGE_SECONDS", str(7 * 24 * 3600)))

# Department names that unlock finance-only and HR-only features
FINANCE_DEPARTMENT_NAMES = env_list("FINANCE_DEPARTMENT_NAMES", ("finance",))
HR_DEPARTMENT_NAMES = env_list("HR_DEPARTMENT_NAMES", ("human resources", "human resource", "hr", "people operations"))

# If enabled, app will apply schema.sql on startup (idempotent: CREATE IF NOT EXISTS)
AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "1")))
# Optional: also seed demo data on startup
AUTO_SEED_DB = bool(int(os.getenv("AUTO_SEED_DB", "0")))

# Payslip PDFs; relative paths resolve against the repository root
PAYSLIP_STORAGE_DIR = os.getenv("PAYSLIP_STORAGE_DIR", "storage/payslips")
