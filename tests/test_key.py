import base64

from lyric_key import LyricKey
from lyric_state import PlayerState


def test_key_renders_png_data_url(renderer, clock):
    key = LyricKey(renderer, clock)
    state = PlayerState()
    state.apply({"type": "CurrentLyricUpdate", "data": {
        "lineIndex": 0, "wordIndex": 1, "line": {"originalLyric": "I love you"},
    }})
    url = key.render(state, {"primaryAlign": "center"}, {"width": 320})
    assert url.startswith("data:image/png;base64,")
    png = base64.b64decode(url.split(",", 1)[1])
    assert png.startswith(b"\x89PNG")


def test_key_size_from_style(renderer, clock):
    key = LyricKey(renderer, clock)
    assert key.key_size({"width": 600}) == (600, 60)
    assert key.key_size({"width": "junk"}) == (480, 60)
    assert key.key_size({"width": -5}) == (480, 60)
    assert key.key_size(None) == (480, 60)


def test_key_without_state_shows_idle(renderer, clock):
    key = LyricKey(renderer, clock)
    frame = key.render_frame(PlayerState())
    assert frame.state == "no_position"
    assert (frame.width, frame.height) == (480, 60)
