from dataclasses import dataclass
import os
from dotenv import load_dotenv


load_dotenv()


def _int_env(name: str, default: int) -> int:
    value = os.getenv(name, "").strip()
    if not value:
        return default
    try:
        return int(value)
    except ValueError:
        return default


@dataclass(frozen=True)
class Settings:
    default_pass_mark: int = _int_env("RESULTS_DEFAULT_PASS_MARK", 50)

    absent_marker: str = os.getenv("RESULTS_ABSENT_MARKER", "AB")
    missing_marker: str = os.getenv("RESULTS_MISSING_MARKER", "-")
    no_performer_label: str = os.getenv("RESULTS_NO_PERFORMER_LABEL", "N/A")
    score_decimals: int = _int_env("RESULTS_SCORE_DECIMALS", 1)

    log_level: str = os.getenv("RESULTS_LOG_LEVEL", "WARNING").upper()


settings = Settings()
