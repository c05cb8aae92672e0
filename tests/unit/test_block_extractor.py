"""Unit tests for edscal.calendar.block_extractor."""

import re
from collections.abc import Iterator
from typing import Callable, Optional

import pytest

from edscal.calendar import block_extractor
from edscal.calendar.block_extractor import iter_vevent_blocks, unescape_block

pytestmark = pytest.mark.unit

ESCAPED_CRLF = "\\r\\n"


class TestUnescapeBlock:
    """Tests for unescape_block."""

    def test_escaped_crlf_becomes_newline(self) -> None:
        assert unescape_block("A:1\\r\\nB:2") == "A:1\nB:2"

    def test_escaped_lf_becomes_newline(self) -> None:
        assert unescape_block("A:1\\nB:2") == "A:1\nB:2"

    def test_real_newlines_untouched(self) -> None:
        assert unescape_block("A:1\r\nB:2") == "A:1\r\nB:2"

    def test_lone_escaped_cr_kept(self) -> None:
        assert unescape_block("A:1\\rB:2") == "A:1\\rB:2"


class TestQuotedExtraction:
    """Primary strategy: single-quoted runs holding both markers."""

    def test_extracts_each_quoted_block_in_order(
        self, make_vevent: Callable[..., str], gdbus_dump: Callable[..., str]
    ) -> None:
        first = make_vevent("UID:1", "SUMMARY:One", sep=ESCAPED_CRLF)
        second = make_vevent("UID:2", "SUMMARY:Two", sep=ESCAPED_CRLF)

        blocks = list(iter_vevent_blocks(gdbus_dump(first, second)))

        assert len(blocks) == 2
        assert "UID:1\nSUMMARY:One" in blocks[0]
        assert "UID:2\nSUMMARY:Two" in blocks[1]

    def test_quoted_content_excludes_quotes(self, make_vevent: Callable[..., str]) -> None:
        text = "noise '" + make_vevent("UID:1", sep=ESCAPED_CRLF) + "' more noise"

        (block,) = iter_vevent_blocks(text)

        assert block.startswith("BEGIN:VEVENT")
        assert block.endswith("END:VEVENT")

    def test_vcalendar_wrapper_kept_inside_block(self) -> None:
        text = "'BEGIN:VCALENDAR\\nBEGIN:VEVENT\\nUID:1\\nEND:VEVENT\\nEND:VCALENDAR'"

        (block,) = iter_vevent_blocks(text)

        assert block == "BEGIN:VCALENDAR\nBEGIN:VEVENT\nUID:1\nEND:VEVENT\nEND:VCALENDAR"

    def test_quoted_strings_without_markers_ignored(self, make_vevent: Callable[..., str]) -> None:
        text = "('/org/gnome/path', 'bus.name', '" + make_vevent("UID:1", sep="\\n") + "')"

        blocks = list(iter_vevent_blocks(text))

        assert len(blocks) == 1
        assert "UID:1" in blocks[0]

    def test_quoted_match_suppresses_unquoted_scan(self, make_vevent: Callable[..., str]) -> None:
        """Bare blocks are ignored as soon as any quoted block exists."""
        quoted = "'" + make_vevent("UID:quoted", sep="\\n") + "'"
        bare = make_vevent("UID:bare")

        blocks = list(iter_vevent_blocks(bare + "\n" + quoted))

        assert len(blocks) == 1
        assert "UID:quoted" in blocks[0]


class TestUnquotedFallback:
    """Fallback strategy: explicit BEGIN/END marker scan."""

    @pytest.mark.smoke
    def test_bare_block_extracted(self) -> None:
        text = "BEGIN:VEVENT\nSUMMARY:Test\nEND:VEVENT\n"

        blocks = list(iter_vevent_blocks(text))

        assert blocks == ["BEGIN:VEVENT\nSUMMARY:Test\nEND:VEVENT"]

    def test_multiple_bare_blocks_do_not_overlap(self, make_vevent: Callable[..., str]) -> None:
        text = "\n".join([make_vevent("UID:1"), "junk", make_vevent("UID:2"), make_vevent("UID:3")])

        blocks = list(iter_vevent_blocks(text))

        assert len(blocks) == 3
        for i, block in enumerate(blocks, start=1):
            assert block.count("BEGIN:VEVENT") == 1
            assert f"UID:{i}" in block

    def test_properties_containing_letter_e_survive(self) -> None:
        """Blocks are cut at END:VEVENT, not at the first 'E'."""
        text = "BEGIN:VEVENT\nSUMMARY:Weekly Review\nDESCRIPTION:Everyone\nEND:VEVENT"

        (block,) = iter_vevent_blocks(text)

        assert "SUMMARY:Weekly Review" in block
        assert "DESCRIPTION:Everyone" in block

    def test_bare_block_with_escaped_newlines_unescaped(self) -> None:
        text = "BEGIN:VEVENT\\r\\nSUMMARY:Test\\r\\nEND:VEVENT"

        (block,) = iter_vevent_blocks(text)

        assert block == "BEGIN:VEVENT\nSUMMARY:Test\nEND:VEVENT"

    def test_unterminated_block_yields_nothing(self) -> None:
        assert list(iter_vevent_blocks("BEGIN:VEVENT\nSUMMARY:Dangling\n")) == []

    def test_end_before_begin_ignored(self) -> None:
        text = "END:VEVENT\nBEGIN:VEVENT\nUID:1\nEND:VEVENT"

        blocks = list(iter_vevent_blocks(text))

        assert blocks == ["BEGIN:VEVENT\nUID:1\nEND:VEVENT"]


class TestLaziness:
    """The extractor is a one-pass generator."""

    def test_returns_iterator(self) -> None:
        result = iter_vevent_blocks("BEGIN:VEVENT\nEND:VEVENT")
        assert isinstance(result, Iterator)

    def test_exhausted_after_one_pass(self) -> None:
        blocks = iter_vevent_blocks("BEGIN:VEVENT\nEND:VEVENT")
        assert len(list(blocks)) == 1
        assert list(blocks) == []

    def test_fresh_call_re_extracts(self) -> None:
        text = "BEGIN:VEVENT\nEND:VEVENT"
        assert list(iter_vevent_blocks(text)) == list(iter_vevent_blocks(text))

    @pytest.mark.parametrize("text", ["", "no events here", "'quoted but empty'"])
    def test_no_blocks(self, text: str) -> None:
        assert list(iter_vevent_blocks(text)) == []


class CountingPattern:
    """Wraps a compiled pattern and counts full-text scans."""

    def __init__(self, pattern: re.Pattern[str]) -> None:
        self.pattern = pattern
        self.scans = 0

    def finditer(self, text: str) -> Iterator[re.Match[str]]:
        self.scans += 1
        return self.pattern.finditer(text)

    def search(self, text: str) -> Optional[re.Match[str]]:
        self.scans += 1
        return self.pattern.search(text)


class TestSingleScan:
    """The quoted pattern runs over the input once per extraction."""

    @pytest.fixture
    def counting_pattern(self, monkeypatch: pytest.MonkeyPatch) -> CountingPattern:
        counter = CountingPattern(block_extractor.QUOTED_VEVENT_PATTERN)
        monkeypatch.setattr(block_extractor, "QUOTED_VEVENT_PATTERN", counter)
        return counter

    def test_quoted_input_scanned_once(
        self, counting_pattern: CountingPattern, make_vevent: Callable[..., str]
    ) -> None:
        text = ", ".join(f"'{make_vevent(f'UID:{i}', sep=ESCAPED_CRLF)}'" for i in range(3))

        blocks = list(iter_vevent_blocks(text))

        assert len(blocks) == 3
        assert blocks[0].startswith("BEGIN:VEVENT\nUID:0")
        assert counting_pattern.scans == 1

    def test_unquoted_input_scanned_once(self, counting_pattern: CountingPattern) -> None:
        assert len(list(iter_vevent_blocks("BEGIN:VEVENT\nUID:1\nEND:VEVENT"))) == 1
        assert counting_pattern.scans == 1
