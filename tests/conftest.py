"""Root conftest: shared test configuration."""

import os
from pathlib import Path

# Always run against the seeded in-memory store, never a real database
os.environ["DATABASE_URL"] = ""
os.environ["SEED_FILE"] = str(Path(__file__).resolve().parent.parent / "data" / "digimons.json")
