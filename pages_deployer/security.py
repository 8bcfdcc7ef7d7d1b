from .errors import AuthRejected
from .settings import settings

def verify_secret(secret: str, expected: str = None) -> bool:
    """Constant-time comparison against the configured shared secret."""
    if expected is None:
        expected = settings.EXPECTED_SECRET
    got, want = secret.encode(), expected.encode()
    if not want or len(got) != len(want):
        return False
    diff = 0
    for x, y in zip(got, want):
        diff |= x ^ y
    return diff == 0

def require_secret(secret: object, expected: str = None) -> None:
    if not isinstance(secret, str) or not verify_secret(secret, expected):
        raise AuthRejected("Invalid secret")
