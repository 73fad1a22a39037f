"""
auth/avatar.py -- Gravatar URL derivation for new accounts.

Gravatar keys avatars by the MD5 of the trimmed, lowercased email. No network
call is made: the browser fetches the image. Size 200px, rating "pg", and the
"mystery person" silhouette when the address has no Gravatar.
"""

import hashlib
from urllib.parse import urlencode

_GRAVATAR_BASE = "//www.gravatar.com/avatar/"


def gravatar_url(email: str, size: int = 200, rating: str = "pg", default: str = "mm") -> str:
    digest = hashlib.md5(email.strip().lower().encode("utf-8")).hexdigest()  # noqa: S324 -- Gravatar key, not a secret
    return f"{_GRAVATAR_BASE}{digest}?{urlencode({'s': size, 'r': rating, 'd': default})}"
