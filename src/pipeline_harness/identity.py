"""Invoking user's numeric identity, resolved like ``id -u $USER``."""
import os

from pipeline_harness.exceptions import UserIdentityError


def current_user() -> tuple[int, int]:
    """Return (uid, gid) for $USER, or for the process when $USER is unset."""
    name = os.environ.get('USER')
    if not name:
        try:
            return os.geteuid(), os.getegid()
        except AttributeError:
            raise UserIdentityError("no numeric user id on this platform") from None

    try:
        import pwd
    except ImportError:
        raise UserIdentityError("no passwd database on this platform") from None

    try:
        entry = pwd.getpwnam(name)
    except KeyError:
        raise UserIdentityError(f"no such user: {name}") from None
    return entry.pw_uid, entry.pw_gid


def user_spec() -> str:
    uid, gid = current_user()
    return f"{uid}:{gid}"
