"""
Playlist scheduling engine.

Turns a station's enabled playlists into the scheduling part of the program:
one source variable per playlist, routed by playlist type into

- a weighted random pick across all ``default`` playlists,
- ``rotate`` insertions for once-per-N-songs playlists,
- delayed ``fallback`` insertions for once-per-N-minutes playlists,
- two ordered ``switch`` lists (track-sensitive and interrupting) gated by
  time predicates for once-per-hour and scheduled playlists,

then wrapped with the manual request queue, a cue trimmer exposing the skip
command, and a failure-safety fallback onto a static error track.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from urllib.parse import urlparse

import structlog

from ..domain.entities import StationPlaylist
from ..shared.types import PlaylistOrder, PlaylistSource, PlaylistType, RemoteType
from .builder import (
    Assign,
    Blank,
    Call,
    Comment,
    Expr,
    Line,
    ListOf,
    Pair,
    Raw,
    Statement,
    Thunk,
    Var,
)
from .context import RADIO, WriteContext
from .schedule import build_hourly_predicate, build_schedule_predicate

_log = structlog.get_logger(__name__)

FUNC_ONCE = "playlist.once"
FUNC_MERGE = "playlist.merge"
FUNC_RANDOMIZED = "playlist"

FALLBACK_DEFAULT_DURATION = 10.0
FALLBACK_LENGTH = 20.0

ORDER_MODES = {
    PlaylistOrder.SEQUENTIAL.value: "normal",
    PlaylistOrder.SHUFFLE.value: "randomize",
    PlaylistOrder.RANDOM.value: "random",
}

REQUESTS = "requests"


@dataclass
class ScheduleBuckets:
    """Routing targets collected while walking the playlists."""

    weights: list[int] = field(default_factory=list)
    sources: list[Expr] = field(default_factory=list)
    once_per_songs: list[Statement] = field(default_factory=list)
    once_per_minutes: list[Statement] = field(default_factory=list)
    switches: list[Pair] = field(default_factory=list)
    interrupting: list[Pair] = field(default_factory=list)


def composition_func(playlist: StationPlaylist) -> str:
    if playlist.loop_playlist_once:
        return FUNC_ONCE
    if playlist.merge_playlist:
        return FUNC_MERGE
    return FUNC_RANDOMIZED


def enabled_playlists(ctx: WriteContext) -> list[StationPlaylist]:
    """Enabled playlists in entity order, creating an empty default playlist if none exists."""
    station = ctx.station
    playlists = [p for p in station.playlists if p.is_enabled]

    if not any(p.type == PlaylistType.DEFAULT.value for p in playlists):
        default = StationPlaylist(
            station=station,
            name="default",
            type=PlaylistType.DEFAULT.value,
            source=PlaylistSource.SONGS.value,
            is_enabled=True,
        )
        ctx.db.add(default)
        ctx.db.flush()
        _log.info(
            "default_playlist_created",
            station_id=station.id,
            station_name=station.name,
            playlist_id=default.id,
        )
        playlists.append(default)

    return playlists


def _local_source(ctx: WriteContext, playlist: StationPlaylist) -> Expr:
    var = playlist.var_name
    path = ctx.manifests.write(playlist, notify=False)
    if path is None:
        # Never ready; the failure-safety fallback covers it.
        return Call("fail", id=var)

    func = composition_func(playlist)
    params: dict[str, object] = {"id": var}

    if func == FUNC_RANDOMIZED:
        params["mode"] = ORDER_MODES.get(playlist.order, "randomize")
    elif playlist.order != PlaylistOrder.SEQUENTIAL.value:
        params["random"] = True

    if func != FUNC_MERGE:
        params["reload_mode"] = "watch"

    if func == FUNC_RANDOMIZED:
        params["conservative"] = True
        params["default_duration"] = FALLBACK_DEFAULT_DURATION
        params["length"] = FALLBACK_LENGTH

    return Call(func, str(path), **params)


def _remote_source(playlist: StationPlaylist) -> Expr:
    url = playlist.remote_url or ""

    if playlist.remote_type == RemoteType.PLAYLIST.value:
        return Call(composition_func(playlist), url)

    input_func = "input.https" if urlparse(url).scheme == "https" else "input.http"
    buffer = playlist.remote_buffer or 0
    if buffer < 1:
        buffer = StationPlaylist.DEFAULT_REMOTE_BUFFER
    return Call("mksafe", Call(input_func, url, max=float(buffer)))


def playlist_statements(ctx: WriteContext, playlist: StationPlaylist) -> list[Statement]:
    """Statements declaring one playlist's source variable."""
    var = playlist.var_name

    if playlist.source == PlaylistSource.REMOTE_URL.value:
        source = _remote_source(playlist)
    else:
        source = _local_source(ctx, playlist)

    statements: list[Statement] = [
        Assign(var, source),
        Assign(var, Call("audio_to_stereo", Var(var), id=f"stereo_{var}")),
    ]
    if playlist.is_jingle:
        statements.append(Assign(var, Call("drop_metadata", Var(var))))
    if playlist.type == PlaylistType.ADVANCED.value:
        statements.append(Line(Call("ignore", Var(var))))
    return statements


def route_playlist(playlist: StationPlaylist, buckets: ScheduleBuckets) -> None:
    """Place a declared playlist into the bucket its type calls for."""
    ref: Expr = Var(playlist.var_name)
    if playlist.play_single_track:
        ref = Call("once", ref)

    kind = playlist.type
    if kind == PlaylistType.DEFAULT.value:
        buckets.weights.append(StationPlaylist.DEFAULT_WEIGHT if playlist.weight is None else int(playlist.weight))
        buckets.sources.append(ref)

    elif kind == PlaylistType.ONCE_PER_X_SONGS.value:
        buckets.once_per_songs.append(
            Assign(
                RADIO,
                Call("rotate", ListOf([ref, Var(RADIO)]), weights=ListOf([1, int(playlist.play_per_songs)])),
            )
        )

    elif kind == PlaylistType.ONCE_PER_X_MINUTES.value:
        delay_seconds = float(int(playlist.play_per_minutes) * 60)
        buckets.once_per_minutes.append(
            Assign(
                RADIO,
                Call(
                    "fallback",
                    ListOf([Call("delay", delay_seconds, ref), Var(RADIO)]),
                    track_sensitive=not playlist.interrupt_other_songs,
                ),
            )
        )

    elif kind in (PlaylistType.ONCE_PER_HOUR.value, PlaylistType.SCHEDULED.value):
        if kind == PlaylistType.ONCE_PER_HOUR.value:
            predicate = build_hourly_predicate(playlist.play_per_hour_minute)
        else:
            predicate = build_schedule_predicate(
                playlist.schedule_start_time,
                playlist.schedule_end_time,
                playlist.schedule_days,
            )
        entry = Pair(Thunk(predicate), ref)
        if playlist.interrupt_other_songs:
            buckets.interrupting.append(entry)
        else:
            buckets.switches.append(entry)

    elif kind != PlaylistType.ADVANCED.value:
        _log.warning("playlist_type_unknown", playlist=playlist.var_name, type=kind)


def _switch(ctx: WriteContext, name: str, entries: list[Pair], *, track_sensitive: bool) -> Assign:
    fallthrough = Pair(Thunk(Raw("true"), compact=True), Var(RADIO))
    return Assign(
        RADIO,
        Call(
            "switch",
            ListOf([*entries, fallthrough]),
            id=ctx.station.var_name(name),
            track_sensitive=track_sensitive,
        ),
    )


def write_playlists(ctx: WriteContext) -> None:
    station = ctx.station
    buffer = ctx.buffer
    var = station.var_name

    ctx.manifests.clear(station.radio_playlists_dir)

    buffer.append(Comment("Playlists"))
    buckets = ScheduleBuckets()
    for playlist in enabled_playlists(ctx):
        buffer.append(*playlist_statements(ctx, playlist))
        route_playlist(playlist, buckets)

    buffer.append(
        Comment("Standard Playlists"),
        Assign(
            RADIO,
            Call(
                "random",
                ListOf(buckets.sources),
                id=var("standard_playlists"),
                weights=ListOf(buckets.weights),
            ),
        ),
    )

    if buckets.switches:
        buffer.append(
            Comment("Standard Schedule Switches"),
            _switch(ctx, "schedule_switch", buckets.switches, track_sensitive=True),
        )
    if buckets.interrupting:
        buffer.append(
            Comment("Interrupting Schedule Switches"),
            _switch(ctx, "interrupt_switch", buckets.interrupting, track_sensitive=False),
        )

    if buckets.once_per_songs:
        buffer.append(Comment("Once per x Songs Playlists"), *buckets.once_per_songs)
    if buckets.once_per_minutes:
        buffer.append(Comment("Once per x Minutes Playlists"), *buckets.once_per_minutes)

    buffer.append(
        Assign(REQUESTS, Call("audio_to_stereo", Call("request.queue", id=var("requests")))),
        Assign(
            RADIO,
            Call(
                "fallback",
                ListOf([Var(REQUESTS), Var(RADIO)]),
                id=var("requests_fallback"),
                track_sensitive=True,
            ),
        ),
        Blank(),
        Assign(RADIO, Call("cue_cut", Var(RADIO), id=var("radio_cue"))),
        Line(Call("add_skip_command", Var(RADIO))),
        Blank(),
        Assign(
            RADIO,
            Call(
                "fallback",
                ListOf([Var(RADIO), Call("single", ctx.settings.error_track_path, id="error_jingle")]),
                id=var("safe_fallback"),
                track_sensitive=False,
            ),
        ),
    )
