# config.example.py

"""
Documentation-only module (safe to commit).

The real configuration is loaded from environment variables (optionally via a local .env file).
Do NOT commit real secrets. Keep the backend token in .env (local, gitignored).

This file exists to make the repo self-documenting even without opening .env.example.
"""

ENV_VARS = {
    # App / logging
    "TASKEARN_APP_NAME": "App display name (default: taskearn).",
    "TASKEARN_LOG_LEVEL": "Console logging level (default: INFO). The log file always gets DEBUG.",
    # Backend
    "TASKEARN_BACKEND_URL": "Labeling backend base URL (default: http://localhost:8080).",
    "TASKEARN_BACKEND_TOKEN": "API token sent as 'Authorization: Token <token>'. Re-read on every request.",
    "TASKEARN_PROJECT_IDS": "Optional backend project id overrides, e.g. 'TEXT=3,IMAGE=4,geo=7'.",
    # Remote reads
    "TASKEARN_REQUEST_TIMEOUT_SECONDS": "Per-attempt timeout for task list reads (default: 5).",
    "TASKEARN_FETCH_MAX_ATTEMPTS": "Read attempts before falling back (default: 3).",
    "TASKEARN_FETCH_RETRY_DELAY_SECONDS": "Delay between read attempts (default: 1).",
    # Cache
    "TASKEARN_CACHE_FALLBACK_MAX_ENTRIES": "Tasks kept when a cache write does not fit (default: 20).",
    "TASKEARN_CACHE_MAX_VALUE_BYTES": "Max encoded size of one cache value, 0 = unlimited (default: 0).",
    # Paths (gitignored)
    "TASKEARN_DATA_DIR": "Local data directory, also holds taskearn.log (default: .local/taskearn).",
    "TASKEARN_CACHE_DB_PATH": "Key-value cache SQLite path (default: <data_dir>/cache.sqlite3).",
    "TASKEARN_WALLET_DB_PATH": "Wallet SQLite path (default: <data_dir>/wallet.sqlite3).",
    # Wallet
    "TASKEARN_USER_ID": "Wallet owner used by the console (default: local-user).",
}
