"""Hash passwords that were stored in plaintext by older deployments.

Login only accepts ``hash.salt`` credentials, so accounts still holding a
plaintext password cannot sign in until this script has run once against
the database:

    python -m data.hash_legacy_passwords            # rewrite in place
    python -m data.hash_legacy_passwords --dry-run  # only report

Running it twice is harmless; already hashed rows are skipped.
"""

from typing import List

from core.logger import get_logger
from core.security import hash_password, is_hashed
from database.database import WriteSessionLocal
from database import models

logger = get_logger("data.hash_legacy_passwords")


def find_legacy_users(session) -> List[models.User]:
    """Return users whose stored password is not a scrypt credential."""
    return [u for u in session.query(models.User).order_by(models.User.id).all() if not is_hashed(u.password)]


def hash_legacy_passwords(session=None, dry_run: bool = False) -> int:
    """Replace every plaintext password with its scrypt credential.

    Args:
        session: Optional SQLAlchemy session. If None, creates a new one.
        dry_run: Only count the affected rows.

    Returns:
        Number of users whose password is (or would be) rewritten.
    """
    close_session = False
    if session is None:
        session = WriteSessionLocal()
        close_session = True
    try:
        users = find_legacy_users(session)
        for user in users:
            logger.info("Legacy password found for user id=%s", user.id)
            if not dry_run:
                user.password = hash_password(user.password or "")
        if users and not dry_run:
            session.commit()
        logger.info("%s %s legacy passwords", "Found" if dry_run else "Hashed", len(users))
        return len(users)
    finally:
        if close_session:
            session.close()


if __name__ == "__main__":
    import argparse

    p = argparse.ArgumentParser("Hash plaintext passwords left by older deployments")
    p.add_argument("--dry-run", action="store_true", help="report without writing")
    args = p.parse_args()
    count = hash_legacy_passwords(dry_run=args.dry_run)
    print(f"{count} user(s) affected")
