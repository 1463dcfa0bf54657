"""Global pytest configuration."""

import os

# Pin test settings before any imports read them
os.environ["DATABASE_URL"] = ""
os.environ["REDIS_URL"] = ""
os.environ["OPENAI_API_KEY"] = ""
os.environ.setdefault("JWT_SECRET", "test-secret-0123456789abcdef0123456789")
