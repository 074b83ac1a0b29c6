#!/usr/bin/env python3
"""
Database initialization script for Quizdrill
Creates all tables and ingests a question-bank JSON file into an empty bank.

Usage: python init_db.py [path/to/questions.json]
"""

import sys

from quizdrill.config import settings
from quizdrill.database import SessionLocal, init_db
from quizdrill.errors import QuizError
from quizdrill.seed import seed_if_empty

def main(path: str) -> bool:
    print(f"Creating tables in {settings.database_url} ...")
    init_db()

    db = SessionLocal()
    try:
        count = seed_if_empty(db, path)
    except QuizError as e:
        print(f"Seeding failed: {e.detail}")
        return False
    finally:
        db.close()

    if count:
        print(f"Seeded {count} questions from {path}")
    else:
        print("Question bank already populated or seed file missing; nothing ingested")
    return True

if __name__ == "__main__":
    seed_path = sys.argv[1] if len(sys.argv) > 1 else settings.seed_file
    sys.exit(0 if main(seed_path) else 1)
