import os

# Tests never export spans; the app module reads settings at import time.
os.environ.setdefault("GW_OTEL_ENABLED", "false")
