import os

from config import env_list

SECRET_KEY = "test-secret"

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "hr_portal_test"),
}

DEBUG = False
TESTING = True
LOG_LEVEL = os.getenv("LOG_LEVEL", "WARNING")

TOKEN_MAX_AGE_SECONDS = 3600

FINANCE_DEPARTMENT_NAMES = env_list("FINANCE_DEPARTMENT_NAMES", ("finance",))
HR_DEPARTMENT_NAMES = env_list("HR_DEPARTMENT_NAMES", ("human resources", "hr"))

AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "0")))
AUTO_SEED_DB = bool(int(os.getenv("AUTO_SEED_DB", "0")))

# Payslip PDFs; relative paths resolve against the repository root
PAYSLIP_STORAGE_DIR = os.getenv("PAYSLIP_STORAGE_DIR", "storage/payslips_test")
