"""Server configuration constants."""

# Server Configuration
DEFAULT_API_HOST = "0.0.0.0"
DEFAULT_API_PORT = 8080  # Default port for FastAPI backend
DEFAULT_LOG_LEVEL = "INFO"

# Origins allowed by CORS in production mode (comma-separated in ALLOWED_ORIGINS)
DEFAULT_ALLOWED_ORIGINS = "http://localhost:3000"

# WebSocket feed
WS_HEARTBEAT_SECONDS = 5.0  # Idle interval before a heartbeat frame is sent
WS_MAX_CONNECTIONS_PER_IP = 5
