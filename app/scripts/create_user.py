"""
Create a user (e.g. first admin). Run from project root:
  python -m app.scripts.create_user EMAIL PASSWORD [role] [--name NAME]
Example:
  python -m app.scripts.create_user admin@example.com your-secure-password admin --name "Ada Admin"
"""
import argparse
import logging
import sys

from app.core.database import SessionLocal
from app.core.errors import CRMError
from app.core.roles import ROLE_OPTIONS, parse_role
from app.core.security import EMAIL_MAX_LEN, PASSWORD_MAX_LEN, PASSWORD_MIN_LEN
from app.services.users import create_user

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s %(message)s",
    datefmt="%Y-%m-%dT%H:%M:%SZ",
)
logger = logging.getLogger(__name__)


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Create a CRM user (no registration UI).")
    parser.add_argument("email", help="Email address used to log in")
    parser.add_argument("password", help=f"Password ({PASSWORD_MIN_LEN}-{PASSWORD_MAX_LEN} chars)")
    parser.add_argument(
        "role",
        nargs="?",
        default="member",
        choices=[r.value for r in ROLE_OPTIONS],
    )
    parser.add_argument("--name", default=None, help="Display name")
    args = parser.parse_args(argv)

    email = args.email.strip()
    if "@" not in email or len(email) > EMAIL_MAX_LEN:
        logger.error("Invalid email address.")
        return 1
    if not PASSWORD_MIN_LEN <= len(args.password) <= PASSWORD_MAX_LEN:
        logger.error("Password must be %s-%s characters.", PASSWORD_MIN_LEN, PASSWORD_MAX_LEN)
        return 1

    db = SessionLocal()
    try:
        user = create_user(db, email, args.password, name=args.name, role=parse_role(args.role))
        logger.info("Created user %s with role %s", user.email, user.role)
        return 0
    except CRMError as e:
        logger.error("Could not create user: %s", e.message)
        return 1
    finally:
        db.close()


if __name__ == "__main__":
    sys.exit(main())
