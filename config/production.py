import os

from config import env_list

SECRET_KEY = os.getenv("SECRET_KEY", "please-set-SECRET_KEY")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "hr_portal"),
}

DEBUG = False
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

TOKEN_MAX_AGE_SECONDS = int(os.getenv("TOKEN_MAX_AGE_SECONDS", str(24 * 3600)))

FINANCE_DEPARTMENT_NAMES = env_list("FINANCE_DEPARTMENT_NAMES", ("finance",))
HR_DEPARTMENT_NAMES = env_list("HR_DEPARTMENT_NAMES", ("human resources", "human resource", "hr", "people operations"))

AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "0")))
AUTO_SEED_DB = bool(int(os.getenv("AUTO_SEED_DB", "0")))

# Payslip PDFs; relative paths resolve against the repository root
PAYSLIP_STORAGE_DIR = os.getenv("PAYSLIP_STORAGE_DIR", "storage/payslips")
