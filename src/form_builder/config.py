"""Configuration loader for Form Builder with environment-specific support"""

import os
from pathlib import Path

from dotenv import load_dotenv

project_dir = Path(__file__).parent.parent.parent
env_path = project_dir / ".env"

# Load .env file if it exists. For local development only.
if env_path.exists():
    load_dotenv(env_path)

# Configuration dictionary - set once at initialization
config = {
    "database_url": os.getenv("DATABASE_URL", "sqlite:///./form_builder.db"),
    "redis_url": os.getenv("REDIS_URL", "redis://localhost:6379/0"),
    "port": int(os.getenv("PORT", "8000")),
    "log_level": os.getenv("LOG_LEVEL", "INFO"),
    # Base URL used when building shareable form links
    "app_base_url": os.getenv("APP_BASE_URL", "http://localhost:8000"),
    # Sliding expiry for designer sessions held in Redis
    "designer_session_ttl": int(os.getenv("DESIGNER_SESSION_TTL", "1800")),
    "environment": os.getenv("ENVIRONMENT", "development"),
}
