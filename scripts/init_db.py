import sys
from pathlib import Path

# Ensure project root is on sys.path when running as a script
ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(ROOT))

from blog_platform.config import Config
from blog_platform.db import detect_dialect, init_db


def main() -> None:
    # Only the DSN is needed here, so no JWT secret check.
    cfg = Config()
    init_db(cfg.DB_DSN)
    print(f"DB initialized ({detect_dialect(cfg.DB_DSN)})")


if __name__ == "__main__":
    main()
