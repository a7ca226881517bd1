import os
from pathlib import Path

from dotenv import load_dotenv, find_dotenv

load_dotenv(find_dotenv(usecwd=True))

BASE_DIR = Path(__file__).resolve().parent


class Settings:
    class Env:
        DB_FILE = os.environ.get("GYM_DB_FILE")
        REPORT_FILE = os.environ.get("GYM_REPORT_FILE")
        LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")

    env = Env
    log_level = env.LOG_LEVEL.upper()

    db_file = Path(env.DB_FILE) if env.DB_FILE else BASE_DIR / "gym.db"

    # Fixed-width member report; the previous copy is kept as <name>_backup<ext>
    report_file = Path(env.REPORT_FILE) if env.REPORT_FILE else Path("MemberDetails.txt")
    report_backup_file = report_file.with_name(f"{report_file.stem}_backup{report_file.suffix}")


settings = Settings()
