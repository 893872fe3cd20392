"""Shared fixtures for slidedeck tests."""

from __future__ import annotations

import textwrap

import pytest


# ---------------------------------------------------------------------------
# Sample decks (strings) used across multiple test modules
# ---------------------------------------------------------------------------

LANDSLIDE_DECK = textwrap.dedent("""\
    # Advanced Django

    Training slides.

    ---

    # Testing
    .fx: extra-large

    - unit tests
    - integration tests

    ```python
    # not a title
    def test_ok():
        assert True
    ```

    # Presenter Notes

    Mention the test client.

    ---

    # Screenshots

    <img src="img/admin.png" width="600">
    <video src="media/demo.mp4" controls></video>
    """)

REMARK_DECK = textwrap.dedent("""\
    class: center, middle

    # Toolbar

    ---
    layout: true
    name: body

    # Editing

    1. Click
    2. Type

    ???
    Keep it short.
    """)

UNTERMINATED_DECK = textwrap.dedent("""\
    # Fine

    ---

    # Broken

    ```python
    print("never closed")
    """)


@pytest.fixture
def tmp_deck(tmp_path):
    """Write LANDSLIDE_DECK to a temp file and return its path."""
    p = tmp_path / "deck.md"
    p.write_text(LANDSLIDE_DECK, encoding="utf-8")
    return p


@pytest.fixture
def tmp_remark_deck(tmp_path):
    """Write REMARK_DECK to a temp file and return its path."""
    p = tmp_path / "remark.md"
    p.write_text(REMARK_DECK, encoding="utf-8")
    return p
