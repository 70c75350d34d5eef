"""
Pytest configuration and fixtures for generate-metadata tests
"""

import os
import sys

import pytest

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))  # noqa: PTH100, PTH118, PTH119, PTH120

from generate_metadata.adapters import HeadAdapter, MetadataAdapter  # noqa: E402
from generate_metadata.core import GenerateMetadataCore  # noqa: E402
from utils.mocks import MockTransport, RevalidateRecorder  # noqa: E402

TEST_DSN = "test-site"
TEST_SECRET = "test-webhook-secret"


@pytest.fixture
def sample_document_data():
    """A get-latest metadata document as sent by the API (camelCase keys)."""
    return {
        "title": "Generated",
        "description": "Gen desc",
        "favicon": {"url": "https://cdn.example.com/favicon.ico", "mimeType": "image/x-icon"},
        "icon": [{"url": "https://cdn.example.com/icon.png", "width": 32, "height": 32, "mimeType": "image/png"}],
        "appleTouchIcon": [{"url": "https://cdn.example.com/apple.png", "width": 180, "height": 180}],
        "openGraph": {
            "title": "OG title",
            "description": "OG desc",
            "locale": "en_US",
            "siteName": "Example",
            "type": "website",
            "image": {"url": "https://cdn.example.com/og.png", "alt": "OG image", "width": 1200, "height": 630},
            "images": [{"url": "https://cdn.example.com/og-2.png"}],
        },
        "twitter": {
            "card": "summary_large_image",
            "title": "TW title",
            "description": "TW desc",
            "image": {"url": "https://cdn.example.com/tw.png", "alt": "TW image"},
        },
        "noindex": False,
        "customTags": [{"name": "author", "content": "Jane"}],
    }


@pytest.fixture
def transport():
    """Transport returning ``{"title": "Generated", "description": "Gen desc"}`` for every path."""
    return MockTransport({"title": "Generated", "description": "Gen desc"})


@pytest.fixture
def core(transport):
    return GenerateMetadataCore(TEST_DSN, "test-api-key", transport=transport)


@pytest.fixture
def revalidate_recorder():
    return RevalidateRecorder()


@pytest.fixture
def metadata_adapter(transport, revalidate_recorder):
    return MetadataAdapter(
        TEST_DSN,
        "test-api-key",
        transport=transport,
        revalidate_path=revalidate_recorder,
        webhook_secret=TEST_SECRET,
    )


@pytest.fixture
def head_adapter(transport, revalidate_recorder):
    return HeadAdapter(
        TEST_DSN,
        transport=transport,
        revalidate_path=revalidate_recorder,
        webhook_secret=TEST_SECRET,
    )
