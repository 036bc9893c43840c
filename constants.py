import os

HOST = os.getenv("HOST", "0.0.0.0")
PORT = int(os.getenv("PORT", 8000))
STANDALONE_PORT = int(os.getenv("STANDALONE_PORT", 8765))

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
LOG_FILE = os.getenv("LOG_FILE", None)
RELOAD = os.getenv("RELOAD", "false").lower() in ("1", "true", "yes")

CORS_ORIGINS = [o.strip() for o in os.getenv("CORS_ORIGINS", "*").split(",") if o.strip()]

# Max outbound frames buffered per connection before sends start failing
SEND_BUFFER_SIZE = int(os.getenv("SEND_BUFFER_SIZE", 64))

# 0 disables queue residency expiry
QUEUE_TIMEOUT_SECONDS = float(os.getenv("QUEUE_TIMEOUT_SECONDS", 0))
QUEUE_SWEEP_INTERVAL_SECONDS = float(os.getenv("QUEUE_SWEEP_INTERVAL_SECONDS", 5))
