"""Tests for the Flavortown client and helper resolution."""

import httpx
import pytest

from crimson.clients.flavortown import FlavortownClient, UserResolver
from crimson.errors import DirectoryUnavailable, NoMatchFound
from tests.conftest import API_KEY, FakeDirectory, flavortown_user, raw_transport


def resolver_for(settings, transport) -> tuple[FlavortownClient, UserResolver]:
    client = FlavortownClient(settings, transport=transport)
    return client, UserResolver(client, settings.flavortown_site_root)


class TestGetUsers:
    def test_request_shape(self, settings, directory):
        with FlavortownClient(settings, transport=directory.transport) as client:
            users = client.get_users("U073M5L9U13")

        assert users == []
        request = directory.requests[0]
        assert request.method == "GET"
        assert str(request.url) == "https://flavortown.example.com/api/v1/users?query=U073M5L9U13"
        assert request.headers["Authorization"] == f"Bearer {API_KEY}"
        assert request.headers["Accept"] == "application/json"

    def test_parses_users(self, settings, directory):
        with FlavortownClient(settings, transport=directory.transport) as client:
            users = client.get_users("U1")
        assert len(users) == 1
        assert users[0].id == 11
        assert users[0].display_name == "Alice"
        assert users[0].cookies == 120

    def test_requires_context(self, settings):
        with pytest.raises(RuntimeError):
            FlavortownClient(settings).get_users("U1")

    def test_error_status(self, settings):
        transport = raw_transport(500, "boom")
        with FlavortownClient(settings, transport=transport) as client:
            with pytest.raises(DirectoryUnavailable) as exc_info:
                client.get_users("U1")
        assert exc_info.value.status_code == 500
        assert "500" in str(exc_info.value)
        assert "boom" in str(exc_info.value)

    def test_malformed_body(self, settings):
        transport = raw_transport(200, b"<html>not json</html>")
        with FlavortownClient(settings, transport=transport) as client:
            with pytest.raises(DirectoryUnavailable):
                client.get_users("U1")

    def test_missing_users_key(self, settings):
        transport = raw_transport(200, {"people": []})
        with FlavortownClient(settings, transport=transport) as client:
            with pytest.raises(DirectoryUnavailable):
                client.get_users("U1")

    def test_transport_failure(self, settings):
        def _fail(request):
            raise httpx.ConnectError("connection refused", request=request)

        with FlavortownClient(settings, transport=httpx.MockTransport(_fail)) as client:
            with pytest.raises(DirectoryUnavailable):
                client.get_users("U1")


class TestResolve:
    def test_resolves_identity(self, settings, directory):
        client, resolver = resolver_for(settings, directory.transport)
        with client:
            identity = resolver.resolve("U1")

        assert identity.helper_id == "U1"
        assert identity.display_name == "Alice"
        assert identity.directory_numeric_id == 11
        assert identity.profile_url == "https://flavortown.example.com/users/11"
        assert identity.cookies == 120

    def test_no_match(self, settings, directory):
        client, resolver = resolver_for(settings, directory.transport)
        with client:
            with pytest.raises(NoMatchFound) as exc_info:
                resolver.resolve("U404")
        assert exc_info.value.helper_id == "U404"

    def test_multiple_matches_picks_first(self, settings, caplog):
        directory = FakeDirectory(
            {"U1": [flavortown_user(5, "U1", "First"), flavortown_user(6, "U1x", "Second")]}
        )
        client, resolver = resolver_for(settings, directory.transport)
        with client, caplog.at_level("WARNING", logger="crimson.clients.flavortown"):
            identity = resolver.resolve("U1")

        assert identity.display_name == "First"
        assert identity.directory_numeric_id == 5
        assert "returned 2 users" in caplog.text
