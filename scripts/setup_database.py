"""
One-command database setup for the advisor chat.
Checks the environment, then creates the collections and indexes the stores need.

Usage: python scripts/setup_database.py
"""

import sys
from pathlib import Path

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from pymongo.errors import PyMongoError

from lifequote.config import get_settings
from lifequote.core.mongodb_client import get_database, ensure_indexes, Collections


def print_step(step: str, status: str = "..."):
    """Print step with status."""
    icons = {
        "...": "...",
        "done": "done",
        "skip": "skip",
        "fail": "FAIL"
    }
    print(f"  [{icons.get(status, status)}] {step}")


def print_header(text: str):
    """Print a header."""
    print(f"\n{'=' * 60}")
    print(f"  {text}")
    print(f"{'=' * 60}")


def main():
    """Main setup function."""
    print_header("Life Insurance Advisor - Setup")

    print("\nChecking environment...")
    settings = get_settings()

    if settings.llm_configured:
        print_step("Fireworks API key configured", "done")
    else:
        print_step("FIREWORKS_API_KEY not set; chat replies will fail", "skip")

    print("\nConnecting to MongoDB...")
    try:
        db = get_database()
        db.command("ping")
        print_step(f"Connected to database: {settings.mongodb_database}", "done")
    except PyMongoError as e:
        print("\n  ERROR: Could not connect to MongoDB!")
        print(f"  {e}")
        print("\n  Please check your MONGODB_URI in .env")
        print("  For local: mongodb://localhost:27017")
        sys.exit(1)

    print_header("Collections")

    existing = set(db.list_collection_names())
    for name in (
        Collections.CONVERSATIONS,
        Collections.MESSAGES,
        Collections.QUOTES,
        Collections.USERS,
        Collections.LEADS,
        Collections.LEAD_ACTIVITIES,
    ):
        if name in existing:
            print_step(f"{name}: {db[name].count_documents({})} documents exist", "skip")
        else:
            db.create_collection(name)
            print_step(f"{name}: created", "done")

    try:
        ensure_indexes()
        print_step("Indexes created", "done")
    except PyMongoError as e:
        print_step(f"Could not create indexes: {e}", "fail")
        sys.exit(1)

    print_header("Setup complete")
    print("\n  Start the API with: uvicorn lifequote.main:app --reload")


if __name__ == "__main__":
    main()
