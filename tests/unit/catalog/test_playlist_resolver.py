import pytest
import requests

from tests.support.factories import PLAYLIST_ID, PLAYLIST_URL, playlist_payload
from tests.support.stubs import FakeResponse, token_response


@pytest.mark.unit
def test_extract_playlist_id_ignores_query_string():
    from src.domain.catalog import extract_playlist_id

    url = "https://open.spotify.com/playlist/37i9dQZF1DXcBWIGoYBM5M?si=abc"
    assert extract_playlist_id(url) == "37i9dQZF1DXcBWIGoYBM5M"


@pytest.mark.unit
@pytest.mark.parametrize(
    "url,expected",
    [
        ("https://open.spotify.com/playlist/abc123", "abc123"),
        ("https://open.spotify.com/playlist/abc123/", "abc123"),
        ("https://open.spotify.com/user/x/playlist/abc123", "abc123"),
        ("https://open.spotify.com/playlist/", None),
        ("https://open.spotify.com/album/abc123", None),
        ("not a url", None),
    ],
)
def test_extract_playlist_id_cases(url, expected):
    from src.domain.catalog import extract_playlist_id

    assert extract_playlist_id(url) == expected


@pytest.mark.unit
@pytest.mark.parametrize(
    "url,valid",
    [
        ("https://open.spotify.com/playlist/37i9dQZF1DXcBWIGoYBM5M", True),
        ("https://open.spotify.com/playlist/37i9dQZF1DXcBWIGoYBM5M?si=abc", True),
        ("http://open.spotify.com/playlist/37i9dQZF1DXcBWIGoYBM5M", False),
        ("https://example.com/playlist/37i9dQZF1DXcBWIGoYBM5M", False),
        ("https://open.spotify.com/album/37i9dQZF1DXcBWIGoYBM5M", False),
        ("https://open.spotify.com/playlist/", False),
        ("", False),
    ],
)
def test_is_valid_playlist_url(url, valid):
    from src.domain.catalog import is_valid_playlist_url

    assert is_valid_playlist_url(url) is valid


@pytest.mark.unit
@pytest.mark.parametrize(
    "url",
    [
        "https://example.com/playlist/abc",
        "spotify:playlist:abc",
        "https://open.spotify.com/track/abc",
        "ftp://open.spotify.com/playlist/abc",
    ],
)
def test_invalid_urls_fail_without_network(resolver, token_session, api_session, url):
    from src.domain.catalog import InvalidUrlError

    with pytest.raises(InvalidUrlError):
        resolver.resolve(url)
    assert token_session.calls == []
    assert api_session.calls == []


@pytest.mark.unit
def test_resolve_requests_playlist_by_extracted_id(resolver, token_session, api_session):
    token_session.queue(token_response("tok-1"))
    payload = playlist_payload()
    api_session.queue(FakeResponse(200, payload))

    result = resolver.resolve(PLAYLIST_URL)

    assert result == payload
    (call,) = api_session.calls
    assert call["url"] == f"https://api.spotify.com/v1/playlists/{PLAYLIST_ID}"
    assert call["headers"] == {"Authorization": "Bearer tok-1"}


@pytest.mark.unit
def test_resolve_reuses_cached_token(resolver, token_session, api_session):
    token_session.queue(token_response("tok-1"))
    api_session.queue(FakeResponse(200, playlist_payload()), FakeResponse(200, playlist_payload()))

    resolver.resolve(PLAYLIST_URL)
    resolver.resolve(PLAYLIST_URL)

    assert len(token_session.calls) == 1
    assert len(api_session.calls) == 2


@pytest.mark.unit
def test_resolve_maps_404_to_not_found(resolver, token_session, api_session):
    from src.domain.catalog import NotFoundError

    token_session.queue(token_response())
    api_session.queue(FakeResponse(404, {"error": {"status": 404}}, reason="Not Found"))

    with pytest.raises(NotFoundError) as excinfo:
        resolver.resolve(PLAYLIST_URL)
    assert excinfo.value.message == "Playlist not found"
    assert excinfo.value.status_code == 404


@pytest.mark.unit
def test_resolve_maps_other_failures_to_upstream_error(resolver, token_session, api_session):
    from src.domain.catalog import UpstreamError

    token_session.queue(token_response())
    api_session.queue(FakeResponse(502, None, reason="Bad Gateway"))

    with pytest.raises(UpstreamError) as excinfo:
        resolver.resolve(PLAYLIST_URL)
    assert excinfo.value.message == "Failed to fetch playlist: Bad Gateway"
    assert excinfo.value.upstream_status == 502


@pytest.mark.unit
def test_resolve_wraps_transport_errors(resolver, token_session, api_session):
    from src.domain.catalog import UpstreamError

    token_session.queue(token_response())
    api_session.queue(requests.Timeout("slow"))

    with pytest.raises(UpstreamError):
        resolver.resolve(PLAYLIST_URL)


@pytest.mark.unit
def test_resolve_without_credentials_is_configuration_error(api_session):
    from src.domain.catalog import ConfigurationError, CredentialProvider, PlaylistResolver

    provider = CredentialProvider(None, None)
    resolver = PlaylistResolver(provider, session=api_session)

    with pytest.raises(ConfigurationError):
        resolver.resolve(PLAYLIST_URL)
    assert api_session.calls == []


@pytest.mark.unit
def test_rejected_bearer_is_dropped_and_next_lookup_exchanges_again(resolver, credentials, token_session, api_session):
    from src.domain.catalog import UpstreamError

    token_session.queue(token_response("revoked"), token_response("tok-2"))
    api_session.queue(
        FakeResponse(401, {"error": {"status": 401}}, reason="Unauthorized"),
        FakeResponse(200, playlist_payload()),
    )

    with pytest.raises(UpstreamError) as excinfo:
        resolver.resolve(PLAYLIST_URL)
    assert excinfo.value.upstream_status == 401
    assert credentials.cached_token is None

    assert resolver.resolve(PLAYLIST_URL)["id"] == PLAYLIST_ID
    assert len(token_session.calls_for("POST")) == 2
    assert api_session.calls[1]["headers"] == {"Authorization": "Bearer tok-2"}


@pytest.mark.unit
def test_other_failures_keep_cached_token(resolver, credentials, token_session, api_session):
    from src.domain.catalog import UpstreamError

    token_session.queue(token_response("tok-1"))
    api_session.queue(FakeResponse(503, None, reason="Service Unavailable"))

    with pytest.raises(UpstreamError):
        resolver.resolve(PLAYLIST_URL)
    assert credentials.cached_token.value == "tok-1"
