"""
Configuration for the journal directory read layer.

NOTE: This module reads from environment variables.
      The .env file must be loaded by the entry point (catalog.cli or api.main)
      using python-dotenv BEFORE importing this module.
"""

import os


# ===================
# Remote Store (Supabase / PostgREST)
# ===================
SUPABASE_URL = os.environ.get("SUPABASE_URL", "")
REST_PATH = "/rest/v1"

# Seconds before a single remote query is treated as failed
QUERY_TIMEOUT = float(os.environ.get("QUERY_TIMEOUT", 10))


# ===================
# Listing Defaults
# ===================
DEFAULT_JOURNAL_STATUS = "active"
DEFAULT_JOURNAL_SORT = "full_title"
FEATURED_SECTION_LIMIT = 3

# Shown when a journal has neither a cover nor a banner image
PLACEHOLDER_IMAGE_URL = (
    "https://images.unsplash.com/photo-1532012197267-da84d127e765"
    "?w=800&auto=format&fit=crop"
)


# ===================
# API Settings
# ===================
CORS_ORIGINS = [
    origin.strip()
    for origin in os.environ.get(
        "CORS_ORIGINS",
        "http://localhost:5173,http://localhost:3000,http://127.0.0.1:5173,http://127.0.0.1:3000",
    ).split(",")
    if origin.strip()
]


# ===================
# Logging
# ===================
LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO").upper()


# ===================
# Helper Functions
# ===================
def get_supabase_credentials() -> tuple[str, str]:
    """
    Get the Supabase project URL and API key from environment variables.

    The key falls back to SUPABASE_PUBLISHABLE_KEY so the front-end's
    publishable key can be reused for read-only access.

    Returns:
        Tuple of (base_url, api_key)

    Raises:
        ValueError: If the URL or key is not set
    """
    url = os.environ.get("SUPABASE_URL") or SUPABASE_URL
    if not url:
        raise ValueError(
            "SUPABASE_URL environment variable not set. "
            "Please add it to your .env file."
        )

    api_key = os.environ.get("SUPABASE_KEY") or os.environ.get("SUPABASE_PUBLISHABLE_KEY")
    if not api_key:
        raise ValueError(
            "SUPABASE_KEY environment variable not set. "
            "Please add it to your .env file."
        )

    return url.rstrip("/"), api_key
