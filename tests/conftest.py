# Loaded before any test module: src.depends builds the token codec and the
# internal API key at import and refuses to start without secrets.
from config import ApplicationConfig

ApplicationConfig.JWT_SECRET = "integration-test-jwt-secret-with-enough-length"
ApplicationConfig.INTERNAL_API_KEY = "integration-test-internal-api-key"
