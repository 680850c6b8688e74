from os import getenv


def _getenv_bool(name: str, default: str = "false") -> bool:
    return getenv(name, default).strip().lower() in {"1", "true", "yes", "on"}


class Settings:
    DATABASE_URL = getenv("DATABASE_URL", "sqlite:///./planner.db")
    SQL_ECHO = _getenv_bool("SQL_ECHO")
    LOG_LEVEL = getenv("LOG_LEVEL", "INFO")

    # Recherche: "fuzzy" (tolère les fautes de frappe) ou "substring" (LIKE)
    SEARCH_MODE = getenv("SEARCH_MODE", "fuzzy")
    SEARCH_LIMIT = int(getenv("SEARCH_LIMIT", "50"))
    FUZZY_THRESHOLD = float(getenv("FUZZY_THRESHOLD", "0.75"))

    ACTIVITY_LOG_LIMIT = int(getenv("ACTIVITY_LOG_LIMIT", "50"))

    INBOX_NAME = "Inbox"
    INBOX_ICON = "📥"
    INBOX_COLOR = "#6366f1"

settings = Settings()
