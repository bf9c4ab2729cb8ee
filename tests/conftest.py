"""
Test fixtures for media-resolver.

Provider payloads and HTTP doubles live in ``factories.py``; nothing here
touches the network.
"""

import sys
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"

# Make src/ importable so tests can do `import media_resolver...`
for p in {ROOT, SRC}:
    p_str = str(p)
    if p_str not in sys.path:
        sys.path.insert(0, p_str)

from media_resolver.main import app  # noqa: E402

import factories  # noqa: E402


# ---------------------------------------------------------------------------
# Core Test Client
# ---------------------------------------------------------------------------


@pytest.fixture
def client() -> TestClient:
    """Per-test FastAPI TestClient."""
    return TestClient(app)


# ---------------------------------------------------------------------------
# Provider payload fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def douyin_video_data():
    return {"aweme_detail": factories.douyin_video_detail()}


@pytest.fixture
def douyin_gallery_data():
    return {"aweme_detail": factories.douyin_gallery_detail()}


@pytest.fixture
def xiaohongshu_image_data():
    return factories.xiaohongshu_note("normal")


@pytest.fixture
def xiaohongshu_video_data():
    return factories.xiaohongshu_note("video")
