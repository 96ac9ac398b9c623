import os
import sys

# Tests never touch the configured database server
os.environ.setdefault("VRPA_DATABASE_URL", "sqlite://")
os.environ.setdefault("VRPA_MONITOR_AUTOSTART", "false")
sys.path.insert(0, os.path.dirname(__file__))
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))
