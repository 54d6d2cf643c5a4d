"""Issue a bearer token for a seeded user (local development only)."""

import argparse
import sys
from datetime import timedelta
from pathlib import Path

project_root = Path(__file__).resolve().parent.parent
sys.path.append(str(project_root))

from app.core.security import create_access_token  # noqa: E402

if __name__ == "__main__":
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("open_id", help="users.open_id, e.g. admin-demo")
    parser.add_argument("--minutes", type=int, default=None, help="Token lifetime override")
    args = parser.parse_args()

    delta = timedelta(minutes=args.minutes) if args.minutes else None
    print(create_access_token(args.open_id, expires_delta=delta))
