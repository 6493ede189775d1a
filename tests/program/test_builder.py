"""Tests for the program expression/statement builder."""

import pytest

from radiocore.infra.exceptions import UndefinedReferenceError
from radiocore.program.builder import (
    Assign,
    Blank,
    Call,
    Comment,
    Concat,
    Def,
    Deref,
    Encoder,
    If,
    Line,
    ListOf,
    Pair,
    ProgramBuffer,
    Raw,
    SetEnv,
    Setting,
    Str,
    Thunk,
    Var,
    Verbatim,
    clean_up_string,
    render_value,
    to_float,
)


class TestLiterals:
    def test_clean_up_string_replaces_quotes_and_strips_newlines(self):
        assert clean_up_string('My "Best"\r\nStation') == "My 'Best'Station"

    def test_clean_up_string_none_is_empty(self):
        assert clean_up_string(None) == ""

    def test_to_float_integral_values_get_trailing_dot(self):
        assert to_float(2) == "2."
        assert to_float(3.0) == "3."
        assert to_float(-16.0) == "-16."

    def test_to_float_fractional_values_get_two_decimals(self):
        assert to_float(1.5) == "1.50"
        assert to_float(0.03) == "0.03"

    def test_render_value_types(self):
        assert render_value(True) == "true"
        assert render_value(False) == "false"
        assert render_value(128) == "128"
        assert render_value(5.0) == "5."
        assert render_value('say "hi"') == "\"say 'hi'\""

    def test_render_value_rejects_unknown_types(self):
        with pytest.raises(TypeError):
            render_value(None)


class TestExpressions:
    def test_call_renders_labelled_arguments_first(self):
        call = Call("single", "/tmp/a.mp3", id="intro")
        assert call.render() == 'single(id="intro", "/tmp/a.mp3")'

    def test_nested_calls_and_lists(self):
        expr = Call(
            "fallback",
            ListOf([Var("radio"), Call("blank", duration=2.0)]),
            id="x_fallback",
            track_sensitive=False,
        )
        assert expr.render() == 'fallback(id="x_fallback", track_sensitive=false, [radio, blank(duration=2.)])'
        assert list(expr.references()) == ["radio"]

    def test_thunk_spacing(self):
        assert Thunk(Raw("15m")).render() == "{ 15m }"
        assert Thunk(Raw("9h0m-17h0m")).render() == "{ 9h0m-17h0m }"
        assert Thunk(Raw("(1w or 2w) and 9h0m-17h0m")).render() == "{ (1w or 2w) and 9h0m-17h0m }"
        assert Thunk(Raw("true"), compact=True).render() == "{true}"

    def test_pair_with_deref(self):
        pair = Pair(Thunk(Deref(Var("live_enabled")), compact=True), Var("live"))
        assert pair.render() == "({!live_enabled}, live)"
        assert sorted(pair.references()) == ["live", "live_enabled"]

    def test_encoder_literal(self):
        enc = Encoder("mp3", samplerate=44100, stereo=True, bitrate=128, id3v2=True)
        assert enc.render() == "%mp3(samplerate=44100, stereo=true, bitrate=128, id3v2=true)"

    def test_concat_quotes_runtime_values(self):
        expr = Concat("curl --form user=", Var("user"), " --form api_auth=", Str("k\"ey"))
        assert expr.render() == '"curl --form user="^quote(user)^" --form api_auth="^quote("k\'ey")^""'


class TestStatements:
    def test_setting_and_setenv(self):
        assert Setting("log.stdout", True).lines() == ['set("log.stdout", true)']
        assert Setting("harbor.bind_addrs", ListOf(["0.0.0.0"])).lines() == ['set("harbor.bind_addrs", ["0.0.0.0"])']
        assert SetEnv("TZ", "UTC").lines() == ['setenv("TZ", "UTC")']

    def test_comment_is_sanitized(self):
        assert Comment('Station "A"\nB').lines() == ["# Station 'A'B"]

    def test_def_with_nested_if(self):
        stmt = Def(
            "metadata_updated",
            ["m"],
            [If('m["song_id"] != ""', [Line(Call("log", Raw('"hi"')))])],
        )
        assert stmt.lines() == [
            "def metadata_updated(m) =",
            '  if (m["song_id"] != "") then',
            '    log("hi")',
            "  end",
            "end",
        ]
        assert list(stmt.defines()) == ["metadata_updated"]

    def test_verbatim_keeps_text(self):
        assert Verbatim('a = "x"\nb = 1').lines() == ['a = "x"', "b = 1"]


class TestProgramBuffer:
    def test_append_and_render(self):
        buf = ProgramBuffer()
        buf.append(Assign("radio", Call("single", "/tmp/a.mp3", id="intro")), Blank())
        buf.append(Line(Call("ignore", Var("radio"))))
        assert buf.render() == 'radio = single(id="intro", "/tmp/a.mp3")\n\nignore(radio)'

    def test_forward_reference_is_rejected(self):
        buf = ProgramBuffer()
        with pytest.raises(UndefinedReferenceError) as excinfo:
            buf.append(Assign("radio", Call("cue_cut", Var("radio"))))
        assert excinfo.value.name == "radio"

    def test_known_names_seed_the_buffer(self):
        buf = ProgramBuffer(known=["radio"])
        buf.append(Line(Call("ignore", Var("radio"))))
        assert buf.is_defined("radio")

    def test_def_names_can_be_referenced(self):
        buf = ProgramBuffer()
        buf.append(Def("dj_auth", ["user", "password"], [Line(Raw("true"))]))
        buf.append(Assign("live", Call("input.harbor", "/", auth=Var("dj_auth"))))
        assert "dj_auth" in buf.defined

    def test_prepend_goes_to_the_very_top(self):
        buf = ProgramBuffer()
        buf.append(Comment("body"))
        buf.prepend(Comment("second"))
        buf.prepend(Comment("first"))
        assert buf.lines() == ["# first", "# second", "# body"]

    def test_prepend_rejects_references(self):
        buf = ProgramBuffer(known=["radio"])
        with pytest.raises(ValueError):
            buf.prepend(Line(Call("ignore", Var("radio"))))
