"""Global test configuration — runs before any test module imports."""
import os
import sys

# Must be set BEFORE any reputestack imports: the module-level app reads it
os.environ["RATELIMIT_ENABLED"] = "False"
os.environ.setdefault("LOG_LEVEL", "WARNING")

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))
