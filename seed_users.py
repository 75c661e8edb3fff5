# seed_users.py
"""
Seed one active user per role into the configured database.

Usage:  python seed_users.py [password]
Existing e-mail addresses are skipped.
"""
import sys
from getpass import getpass

from core.common.errors import ValidationError
from core.models.user import UserRole
from berkaslifecycle.bootstrap import build_app

SEED_USERS = [
    ("Administrator", "admin@example.com", UserRole.ADMIN),
    ("Operator Data Berkas", "berkas@example.com", UserRole.DATA_BERKAS),
    ("Operator Data Ukur", "ukur@example.com", UserRole.DATA_UKUR),
    ("Operator Data Pemetaan", "pemetaan@example.com", UserRole.DATA_PEMETAAN),
    ("Quality Control", "qc@example.com", UserRole.QUALITY_CONTROL),
]


def prompt_password() -> str:
    try:
        if sys.stdin.isatty() and sys.stdout.isatty():
            return getpass("Password for seeded users: ")
        return input("Password for seeded users: ")
    except (EOFError, KeyboardInterrupt):
        print("\nAborted")
        sys.exit(1)


def main() -> int:
    password = sys.argv[1] if len(sys.argv) > 1 else prompt_password()
    while not password.strip():
        print("Password must not be empty.")
        password = prompt_password()

    app = build_app()
    try:
        for name, email, role in SEED_USERS:
            try:
                app.users.create(name=name, email=email, password=password, role=role)
                print(f"created  {email:<24} {role.value}")
            except ValidationError:
                print(f"exists   {email:<24} {role.value}")
    finally:
        app.close()
    return 0


if __name__ == "__main__":
    sys.exit(main())
