"""Create a user in the SQL store.

Usage:
  python scripts/create_user.py --name Alice --email alice@example.com --password '...' --role admin

This is the only way to create an admin besides the bootstrap env vars.
"""

import argparse
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(ROOT))

from blog_platform import validation
from blog_platform.config import Config
from blog_platform.errors import DuplicateEmail
from blog_platform.store import SQLStore


def main() -> None:
    ap = argparse.ArgumentParser()
    ap.add_argument("--name", required=True)
    ap.add_argument("--email", required=True)
    ap.add_argument("--password", required=True)
    ap.add_argument("--role", choices=["user", "admin"], default="user")
    args = ap.parse_args()

    errors = validation.validate(
        {"name": args.name, "email": args.email, "password": args.password},
        validation.REGISTER,
    )
    if errors:
        for e in errors:
            print(f"{e['field']}: {e['msg']}")
        sys.exit(2)

    store = SQLStore(Config().DB_DSN)
    try:
        u = store.create_user(name=args.name, email=args.email, password=args.password, role=args.role)
    except DuplicateEmail as e:
        print(e.message)
        sys.exit(1)

    print("Created user:")
    print(u.public())


if __name__ == "__main__":
    main()
