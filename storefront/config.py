"""
Configuration - environment variables for the cart service.

Values are read once at import time. A local `.env` file is loaded first
if present; real environment variables take precedence.
"""

import os

from dotenv import load_dotenv

load_dotenv()

# Upstash Redis - standard env var names per docs
UPSTASH_REDIS_REST_URL = os.environ.get("UPSTASH_REDIS_REST_URL", "")
UPSTASH_REDIS_REST_TOKEN = os.environ.get("UPSTASH_REDIS_REST_TOKEN", "")

# "redis" or "memory"
_default_backend = "redis" if UPSTASH_REDIS_REST_URL and UPSTASH_REDIS_REST_TOKEN else "memory"
CART_STORAGE_BACKEND = os.environ.get("CART_STORAGE_BACKEND", _default_backend).strip().lower()

CART_TTL_SECONDS = int(os.environ.get("CART_TTL_SECONDS", "604800"))  # 7 days

# Per-process cart session locks kept in memory
CART_MAX_SESSIONS = int(os.environ.get("CART_MAX_SESSIONS", "1024"))

CART_CURRENCY = os.environ.get("CART_CURRENCY", "NGN").upper()

ALLOWED_ORIGINS = [
    origin.strip()
    for origin in os.environ.get("ALLOWED_ORIGINS", "*").split(",")
    if origin.strip()
] or ["*"]
