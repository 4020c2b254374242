import os

# Keep the app's module-level engine off any real database during tests.
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("APP_ENV", "dev")
