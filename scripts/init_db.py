import sys
from pathlib import Path

# Add backend/app to path
backend_path = Path(__file__).resolve().parents[1] / "backend" / "app"
sys.path.insert(0, str(backend_path))

from reqtrack.database.config import DATABASE_URL, init_db  # noqa: E402


def main():
    print(f"Creating all tables on {DATABASE_URL}...")
    init_db()
    print("Tables created successfully.")

if __name__ == "__main__":
    main()
