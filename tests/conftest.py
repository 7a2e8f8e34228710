import os
import tempfile

# Point the app at a throwaway database before config is imported
_TEST_DB_DIR = tempfile.mkdtemp(prefix="discover-tests-")
os.environ["DISCOVER_DATABASE_URL"] = f"sqlite:///{os.path.join(_TEST_DB_DIR, 'test.db')}"
os.environ.setdefault("JWT_SECRET_KEY", "test-secret")
os.environ["AUTH_MODE"] = "jwt"
