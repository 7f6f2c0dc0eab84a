"""Insert the default blog categories.

Usage:
  python scripts/seed_categories.py          # add the missing ones
  python scripts/seed_categories.py --reset  # delete every category first
"""

import argparse
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(ROOT))

from blog_platform.config import Config
from blog_platform.content.categories import seed_default_categories
from blog_platform.store import SQLStore


def main() -> None:
    ap = argparse.ArgumentParser()
    ap.add_argument("--reset", action="store_true", help="delete existing categories first")
    args = ap.parse_args()

    store = SQLStore(Config().DB_DSN)
    created = seed_default_categories(store, reset=args.reset)
    print(f"Created {len(created)} categories:")
    for c in created:
        print(f"   - {c.name} ({c.slug})")


if __name__ == "__main__":
    main()
