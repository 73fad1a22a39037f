"""
fetcher.py -- External data fetching (GitHub repository listings).

The profile page shows a developer's latest public repositories. The lookup is
proxied through the API so the GitHub OAuth app credentials never reach the
browser.
"""

import logging
from typing import Any, Optional

import requests

logger = logging.getLogger("devconnector.fetcher")

GITHUB_REPOS_URL = "https://api.github.com/users/{username}/repos"

# Module-level session shared across all fetcher calls for connection pooling.
# max_redirects=3 replaces the requests default of 30 -- this is a known public
# API, 3 hops is generous and limits redirect-chain abuse.
_session = requests.Session()
_session.max_redirects = 3
_session.headers["User-Agent"] = "devconnector-api"


def fetch_github_repos(
    username: str,
    client_id: str = "",
    client_secret: str = "",
) -> Optional[list[dict[str, Any]]]:
    """Return the five oldest-created public repos for a GitHub user.

    Args:
        username:      GitHub login, taken verbatim from the request path.
        client_id:     Optional OAuth app client id. Raises the GitHub rate
                       limit from 60 to 5000 requests/hour when set.
        client_secret: Optional OAuth app client secret.

    Returns None when GitHub answers with anything other than 200 (unknown
    user, rate limit) or the request fails. The caller turns None into 404.
    """
    params: dict[str, str] = {"per_page": "5", "sort": "created:asc"}
    if client_id and client_secret:
        params["client_id"] = client_id
        params["client_secret"] = client_secret
    url = GITHUB_REPOS_URL.format(username=requests.utils.quote(username, safe=""))
    try:
        resp = _session.get(url, params=params, timeout=10)
    except requests.RequestException as e:
        logger.warning("GitHub fetch failed for %s: %s", username, e)
        return None
    if resp.status_code != 200:
        logger.info("GitHub returned %d for %s", resp.status_code, username)
        return None
    try:
        return resp.json()
    except ValueError:
        logger.warning("GitHub returned a non-JSON body for %s", username)
        return None
