"""
Pytest configuration and shared fixtures.

Provides a small origins payload, a matching color map and a fake HTTP
session so no test touches the network.
"""

import pytest
from typing import Dict, List


# Array-encoded objects, exactly as the origins export writes them.
LEGACY_PAYLOAD = (
    b'["M":['
    b'"hd":[["s":180,"p":["hd":"1","ey":"1","fc":"1"],"c":["FFCB98","F4AC54"]]],'
    b'"hr":[["s":120,"p":["hr":"120"],"c":["FFFFFF","000000"]],'
    b'["s":100,"p":["hr":"100"],"c":["E0BA3F"]]],'
    b'"ch":[["s":255,"p":["ch":"255","ls":"1","rs":"1"],"c":["96743D","E05FB6"]]],'
    b'"lg":[["s":285,"p":["lg":"285"],"c":["5D5D5D"]]],'
    b'"sh":[["s":290,"p":["sh":"290"],"c":["000000"]]]'
    b'],"F":['
    b'"hr":[["s":525,"p":["hr":"525"],"c":["FFFFFF"]]],'
    b'"ch":[["s":630,"p":["ch":"630"],"c":["E05FB6"]]]'
    b']]'
)

COLOR_MAP = {
    "hd": {"ffcb98": 1, "f4ac54": 2},
    "hr": {"ffffff": 5, "000000": 6, "e0ba3f": 7},
    "ha": {"ffffff": 5},
    "ch": {"96743d": 10, "e05fb6": 11},
    "lg": {"5d5d5d": 20},
    "sh": {"000000": 30},
}


class FakeResponse:
    def __init__(self, status_code: int = 200, content: bytes = b""):
        self.status_code = status_code
        self.content = content
        self.headers: Dict[str, str] = {}


class FakeSession:
    """Hands out queued responses (or raises queued exceptions) per get()."""

    def __init__(self, responses=None):
        self.responses: List = list(responses or [])
        self.calls: List[str] = []

    def get(self, url, **kwargs):
        self.calls.append(url)
        if not self.responses:
            raise AssertionError(f"unexpected request to {url}")
        item = self.responses.pop(0)
        if isinstance(item, Exception):
            raise item
        return item


@pytest.fixture
def legacy_payload() -> bytes:
    return LEGACY_PAYLOAD


@pytest.fixture
def color_map():
    return {part_type: dict(colors) for part_type, colors in COLOR_MAP.items()}


@pytest.fixture
def figure_data():
    from origins_figuredata import load_origins_figuredata
    return load_origins_figuredata(LEGACY_PAYLOAD)


@pytest.fixture
def fetch_config():
    from gamedata_cache import FetchConfig
    return FetchConfig(timeout_seconds=5.0, retries=2, verbose=False)


@pytest.fixture(autouse=True)
def no_sleep(monkeypatch):
    """Retry backoff never actually sleeps in tests."""
    import gamedata_cache
    monkeypatch.setattr(gamedata_cache.time, "sleep", lambda seconds: None)


@pytest.fixture
def make_session():
    """Build a FakeSession from a list of responses/exceptions."""
    return FakeSession


@pytest.fixture
def make_response():
    return FakeResponse


@pytest.fixture
def modern_figure_data() -> bytes:
    return (
        b'<?xml version="1.0" encoding="UTF-8"?>\n'
        b"<figuredata>"
        b"<colors>"
        b'<palette id="1">'
        b'<color id="1" index="1" club="0" selectable="1">FFCB98</color>'
        b'<color id="2" index="2" club="0" selectable="1">F4AC54</color>'
        b"</palette>"
        b'<palette id="3">'
        b'<color id="10" index="1" club="0" selectable="1">96743D</color>'
        b'<color id="11" index="2" club="2" selectable="1">E05FB6</color>'
        b"</palette>"
        b"</colors>"
        b"<sets>"
        b'<settype type="hd" paletteid="1" mand_m_0="1" mand_f_0="1" mand_m_1="1" mand_f_1="1"/>'
        b'<settype type="ch" paletteid="3" mand_m_0="1" mand_f_0="1" mand_m_1="1" mand_f_1="1"/>'
        b'<settype type="cc" paletteid="99" mand_m_0="0" mand_f_0="0" mand_m_1="0" mand_f_1="0"/>'
        b"</sets>"
        b"</figuredata>"
    )
