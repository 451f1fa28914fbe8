"""Print a password hash for the admin account.

Usage:
    python -m scripts.create_admin_user [password]

Put the printed value into ADMIN_PASSWORD_HASH (and ADMIN_EMAIL) in .env.
"""

import getpass
import sys

from src.admin.auth import hash_password


def main() -> None:
    if len(sys.argv) > 1:
        password = sys.argv[1]
    else:
        password = getpass.getpass("Admin password: ")
        if password != getpass.getpass("Repeat password: "):
            print("Passwords do not match")
            sys.exit(1)

    if len(password) < 8:
        print("Password must be at least 8 characters")
        sys.exit(1)
    # bcrypt only looks at the first 72 bytes
    if len(password.encode()) > 72:
        print("Password must be at most 72 bytes")
        sys.exit(1)

    print(f"ADMIN_PASSWORD_HASH={hash_password(password)}")


if __name__ == "__main__":
    main()
