"""
Pytest configuration and fixtures for Blockslides tests.
"""

import sys
from pathlib import Path

import pytest

# Add the repository root to path for imports
# This allows `from blockslides.extensions import ...` to work
repo_root = Path(__file__).parent.parent
if str(repo_root) not in sys.path:
    sys.path.insert(0, str(repo_root))

from blockslides.editor import Editor  # noqa: E402
from blockslides.kit import Document, Paragraph, Slide, StarterKit, Text  # noqa: E402
from blockslides.schema import synthesize_schema  # noqa: E402


@pytest.fixture
def base_extensions():
    """Smallest extension list that yields a valid slide schema."""
    return [Document, Slide, Paragraph, Text]


@pytest.fixture
def kit_schema():
    """Schema synthesized from the full StarterKit."""
    return synthesize_schema([StarterKit])


@pytest.fixture
def editor():
    """StarterKit editor holding one slide with one paragraph: 'Hello'."""
    instance = Editor([StarterKit], content="<p>Hello</p>")
    yield instance
    instance.destroy()


@pytest.fixture
def sample_json():
    """A two-slide document in the JSON exchange shape."""
    return {
        "type": "doc",
        "content": [
            {
                "type": "slide",
                "content": [
                    {
                        "type": "heading",
                        "attrs": {"level": 1},
                        "content": [{"type": "text", "text": "Title"}],
                    },
                ],
            },
            {
                "type": "slide",
                "content": [
                    {
                        "type": "paragraph",
                        "content": [
                            {"type": "text", "text": "Body "},
                            {"type": "text", "text": "bold", "marks": [{"type": "bold"}]},
                        ],
                    },
                ],
            },
        ],
    }
