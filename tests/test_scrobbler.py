import pytest

from scrobble_cli.api.auth import SessionManager
from scrobble_cli.core.scrobbler import Scrobbler
from scrobble_cli.exceptions import (
    DurationFormatError,
    EmptyPlaylistError,
    NotAuthenticatedError,
    SessionExpiredError,
)
from scrobble_cli.models.album import AlbumDetails, AlbumTrack, ScrobbleOptions
from tests.factories import SESSION_KEY, make_album

NOW = 1_700_000_000


@pytest.fixture
def scrobbler(api_client):
    return Scrobbler(api_client, SessionManager(api_client, SESSION_KEY), clock=lambda: NOW)


@pytest.fixture
def playlist():
    # 120 tracks: 10 albums of 12
    return [make_album(f"Album {i}", track_count=12) for i in range(10)]


async def collect(stream) -> list[int]:
    return [accepted async for accepted in stream]


async def test_requires_login(api_client, lastfm):
    scrobbler = Scrobbler(api_client, SessionManager(api_client))

    with pytest.raises(NotAuthenticatedError) as exc_info:
        await collect(scrobbler.scrobble_albums([make_album()]))

    assert "login to Last.fm first" in str(exc_info.value)
    assert lastfm.requests == []


async def test_login_is_checked_before_the_playlist(api_client, lastfm):
    scrobbler = Scrobbler(api_client, SessionManager(api_client))

    with pytest.raises(NotAuthenticatedError):
        await collect(scrobbler.scrobble_albums([]))


async def test_empty_playlist_fails_before_any_request(scrobbler, lastfm):
    with pytest.raises(EmptyPlaylistError) as exc_info:
        await collect(scrobbler.scrobble_albums([]))

    assert "playlist is empty" in str(exc_info.value)
    assert lastfm.requests == []


async def test_yields_accepted_count_per_batch(scrobbler, lastfm, playlist):
    assert await collect(scrobbler.scrobble_albums(playlist)) == [50, 50, 20]

    assert len(lastfm.requests) == 3
    assert all(params["sk"] == SESSION_KEY for params in lastfm.requests)
    assert lastfm.requests[0]["track[0]"] == "Album 0 - Track 1"
    assert lastfm.requests[2]["track[19]"] == "Album 9 - Track 12"
    assert lastfm.requests[2]["timestamp[19]"] == str(NOW - 180)


async def test_batches_are_submitted_one_at_a_time(scrobbler, lastfm, playlist):
    stream = scrobbler.scrobble_albums(playlist)

    assert await stream.__anext__() == 50
    assert len(lastfm.requests) == 1

    await stream.aclose()
    assert len(lastfm.requests) == 1


async def test_partial_acceptance_is_reported(scrobbler, lastfm):
    lastfm.respond(200, {"scrobbles": {"@attr": {"accepted": 1, "ignored": 2}}})
    assert await collect(scrobbler.scrobble_albums([make_album()])) == [1]


async def test_failed_batch_ends_the_stream(scrobbler, lastfm, playlist):
    lastfm.respond(200, {"scrobbles": {"@attr": {"accepted": 50, "ignored": 0}}})
    lastfm.respond(403, {"error": 9, "message": "Invalid session key"})

    received = []
    with pytest.raises(SessionExpiredError):
        async for accepted in scrobbler.scrobble_albums(playlist):
            received.append(accepted)

    assert received == [50]
    assert len(lastfm.requests) == 2


async def test_malformed_duration_fails_before_any_request(scrobbler, lastfm):
    album = AlbumDetails(title="A", tracks=[AlbumTrack(title="t", duration="soon")])

    with pytest.raises(DurationFormatError):
        await collect(scrobbler.scrobble_albums([album]))

    assert lastfm.requests == []


async def test_options_are_applied(scrobbler, lastfm):
    options = ScrobbleOptions(inclusion_mask={0: {0: False}}, offset_in_seconds=600)

    assert await collect(scrobbler.scrobble_albums([make_album(track_count=2)], options)) == [1]

    [params] = lastfm.requests
    assert params["track[0]"] == "Album - Track 2"
    assert params["timestamp[0]"] == str(NOW - 600 - 180)


async def test_plan_builds_the_queue_without_submitting(scrobbler, playlist):
    queue = scrobbler.plan(playlist)
    assert queue.size == 120
    assert queue.entries[-1].timestamp == NOW - 180

    with pytest.raises(EmptyPlaylistError):
        scrobbler.plan([])


async def test_submit_queue_sends_the_planned_timestamps(api_client, lastfm, playlist):
    ticks = iter([NOW, NOW + 500])
    scrobbler = Scrobbler(api_client, SessionManager(api_client, SESSION_KEY), clock=lambda: next(ticks))

    queue = scrobbler.plan(playlist)
    accepted = await collect(scrobbler.submit_queue(queue))

    assert accepted == [50, 50, 20]
    sent = [
        int(params[f"timestamp[{i}]"])
        for params in lastfm.requests
        for i in range(50)
        if f"timestamp[{i}]" in params
    ]
    assert sent == [entry.timestamp for entry in queue.entries]


async def test_submit_queue_requires_login(api_client, lastfm, playlist):
    scrobbler = Scrobbler(api_client, SessionManager(api_client), clock=lambda: NOW)
    queue = scrobbler.plan(playlist)

    with pytest.raises(NotAuthenticatedError):
        await collect(scrobbler.submit_queue(queue))

    assert lastfm.requests == []
