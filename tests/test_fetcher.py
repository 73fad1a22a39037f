"""Tests for core.fetcher.fetch_github_repos with the HTTP session mocked."""

from unittest.mock import MagicMock, patch

import requests

from core.fetcher import fetch_github_repos


def _response(status_code=200, payload=None):
    resp = MagicMock()
    resp.status_code = status_code
    resp.json.return_value = payload
    return resp


class TestFetchGithubRepos:
    def test_returns_repo_list(self):
        repos = [{"name": "engine"}]
        with patch("core.fetcher._session") as session:
            session.get.return_value = _response(200, repos)
            assert fetch_github_repos("ada") == repos

        url = session.get.call_args.args[0]
        params = session.get.call_args.kwargs["params"]
        assert url == "https://api.github.com/users/ada/repos"
        assert params == {"per_page": "5", "sort": "created:asc"}

    def test_credentials_added_when_both_set(self):
        with patch("core.fetcher._session") as session:
            session.get.return_value = _response(200, [])
            fetch_github_repos("ada", client_id="cid", client_secret="csecret")
        params = session.get.call_args.kwargs["params"]
        assert params["client_id"] == "cid"
        assert params["client_secret"] == "csecret"

    def test_partial_credentials_ignored(self):
        with patch("core.fetcher._session") as session:
            session.get.return_value = _response(200, [])
            fetch_github_repos("ada", client_id="cid")
        assert "client_id" not in session.get.call_args.kwargs["params"]

    def test_username_is_path_quoted(self):
        with patch("core.fetcher._session") as session:
            session.get.return_value = _response(200, [])
            fetch_github_repos("../orgs")
        assert session.get.call_args.args[0] == "https://api.github.com/users/..%2Forgs/repos"

    def test_not_found_returns_none(self):
        with patch("core.fetcher._session") as session:
            session.get.return_value = _response(404, {"message": "Not Found"})
            assert fetch_github_repos("nobody") is None

    def test_network_error_returns_none(self):
        with patch("core.fetcher._session") as session:
            session.get.side_effect = requests.ConnectionError("down")
            assert fetch_github_repos("ada") is None

    def test_non_json_body_returns_none(self):
        with patch("core.fetcher._session") as session:
            resp = _response(200)
            resp.json.side_effect = ValueError("bad json")
            session.get.return_value = resp
            assert fetch_github_repos("ada") is None
