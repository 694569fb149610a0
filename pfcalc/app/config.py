"""Flask configuration objects."""


class Config:
    VERSION = "0.1.0"
    CORS_ORIGINS = [
        "http://localhost:3000",
        "http://localhost:5173",
        "http://127.0.0.1:3000",
        "http://127.0.0.1:5173",
    ]
    LOG_LEVEL = "INFO"
    MAX_CONTENT_LENGTH = 1024 * 1024  # 1 MiB


class TestingConfig(Config):
    TESTING = True
    LOG_LEVEL = "WARNING"
