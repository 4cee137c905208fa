import os

# Must run before any sekolah module builds the engine or caches settings.
os.environ.setdefault("DATABASE_URL", "sqlite:///:memory:")
os.environ.setdefault("ENVIRONMENT", "local")
os.environ.setdefault("SESSION_SECRET", "test-session-secret")
os.environ.setdefault("PBKDF2_ROUNDS", "1000")
os.environ.setdefault("EXPIRY_SWEEP_ON_READ", "true")
os.environ.setdefault("LOG_LEVEL", "WARNING")
