# config.example.py

"""
Documentation-only module (safe to commit).

The real configuration is loaded from environment variables (optionally via a local .env file),
see src/plan_companion/config.py. Do NOT commit real secrets; keep them in .env (gitignored).

This file exists to make the repo self-documenting even without opening config.py.
"""

ENV_VARS = {
    # App / logging
    "PLAN_APP_NAME": "App display name (default: plan-companion).",
    "PLAN_LOG_LEVEL": "Console logging level (default: INFO).",
    # HTTP server
    "PLAN_HOST": "Bind address (default: 127.0.0.1).",
    "PLAN_PORT": "Bind port (default: 5000).",
    # LLM / OpenAI-compatible provider
    "PLAN_OPENAI_API_KEY": "Provider API key; OPENAI_API_KEY is used when unset. Without a key AI runs offline.",
    "PLAN_OPENAI_BASE_URL": "Optional base URL for an OpenAI-compatible endpoint (OPENAI_BASE_URL fallback).",
    "PLAN_LLM_MODELS": "Comma/space separated list of models to try in order (default: OPENAI_MODEL or gpt-4o-mini).",
    "PLAN_LLM_TIMEOUT_SECONDS": "Upper bound for one AI request (default: 30).",
    "PLAN_LLM_CONNECT_TIMEOUT_SECONDS": "Connect timeout for the provider HTTP client (default: 5).",
    "PLAN_LLM_MAX_WORKERS": "Threads reserved for provider calls; timed-out calls may hold one until the provider gives up (default: 4).",
    # Sessions / auth
    "PLAN_SESSION_COOKIE_NAME": "Session cookie name (default: plan_session).",
    "PLAN_SESSION_COOKIE_SECURE": "Mark the session cookie Secure (true/false, default: false).",
    "PLAN_SESSION_TTL_SECONDS": "Session lifetime (default: 7 days).",
    "PLAN_PASSWORD_HASH_ITERATIONS": "PBKDF2 iterations for new password hashes (default: 240000).",
    # Date logic
    "PLAN_WEEK_START": "First day of the week for the 'week' filter, 0=Monday .. 6=Sunday (default: 0).",
    # Paths (gitignored)
    "PLAN_DATA_DIR": "Local data directory (default: .local/plan-companion).",
    "PLAN_DB_PATH": "SQLite path for plans and users (default: <data_dir>/plans.sqlite3).",
}
