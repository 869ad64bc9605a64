import os
from pathlib import Path
from dotenv import load_dotenv

# Load .env from project root (one level above backend/)
load_dotenv(Path(__file__).resolve().parent.parent.parent / ".env")

_PROJECT_ROOT = Path(__file__).resolve().parent.parent.parent

MEPS_DATA_DIR = Path(os.getenv("MEPS_DATA_DIR", str(_PROJECT_ROOT / "data")))
MEPS_YEAR = int(os.getenv("MEPS_YEAR", "2018"))
# CCSR NVS010: headache, including migraine
TARGET_CONDITION_CODE = os.getenv("TARGET_CONDITION_CODE", "NVS010")
OUTPUT_DIR = Path(os.getenv("OUTPUT_DIR", str(_PROJECT_ROOT / "data" / "processed")))
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
REPORT_DIGITS = int(os.getenv("REPORT_DIGITS", "2"))
