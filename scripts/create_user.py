"""Create a login for password auth, or reset the password of an existing one.

Usage:
    python scripts/create_user.py <username> [--password PASSWORD]
"""

from __future__ import annotations

import argparse
import getpass
import sys

from pricer_setter.auth import PasswordVerifier
from pricer_setter.config import Settings
from pricer_setter.database import build_engine, init_db


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument("username")
    parser.add_argument("--password", help="Prompted for when omitted")
    args = parser.parse_args(argv)

    password = args.password or getpass.getpass("Password: ")
    if not password:
        print("Password must not be empty", file=sys.stderr)
        return 1

    settings = Settings.from_env()
    engine = build_engine(settings.database_url)
    init_db(engine)

    created = PasswordVerifier(engine).set_password(args.username, password)
    print(f"{'Created' if created else 'Updated'} user {args.username}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
