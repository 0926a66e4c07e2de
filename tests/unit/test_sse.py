"""Unit tests for client-side SSE frame decoding."""

import pytest_check as check

from pdf_chat.chat.sse import SSEDecoder, parse_sse_line
from pdf_chat.models.schemas import StreamEvent


class TestParseSseLine:
    """Tests for single-line decoding."""

    def test_token_line(self) -> None:
        """A data line decodes into its event."""
        event = parse_sse_line('data: {"type":"token","data":"Hi"}')

        check.equal(event, StreamEvent.token("Hi"))

    def test_missing_data_defaults_to_empty(self) -> None:
        """Events without a data field get an empty string."""
        check.equal(parse_sse_line('data: {"type":"done"}'), StreamEvent.done())

    def test_non_data_lines_ignored(self) -> None:
        """Comments and other SSE fields are not events."""
        check.is_none(parse_sse_line(": keep-alive"))
        check.is_none(parse_sse_line("event: message"))
        check.is_none(parse_sse_line(""))

    def test_malformed_json_dropped(self) -> None:
        """Unparseable payloads are dropped."""
        check.is_none(parse_sse_line("data: {not json"))

    def test_unknown_event_type_dropped(self) -> None:
        """Events with an unrecognized type are dropped."""
        check.is_none(parse_sse_line('data: {"type":"ping","data":""}'))


class TestSSEDecoder:
    """Tests for incremental decoding across reads."""

    def test_frame_split_across_reads(self) -> None:
        """A frame cut mid-JSON is completed by the next read."""
        decoder = SSEDecoder()

        check.equal(decoder.feed('data: {"type":"tok'), [])
        check.equal(decoder.feed('en","data":"Hello"}\n\n'), [StreamEvent.token("Hello")])

    def test_several_frames_in_one_read(self) -> None:
        """All frames completed by a read are returned in order."""
        decoder = SSEDecoder()
        chunk = (
            'data: {"type":"token","data":"a"}\n\n'
            'data: {"type":"token","data":"b"}\n\n'
            'data: {"type":"done","data":""}\n\n'
        )

        events = decoder.feed(chunk)

        check.equal(events, [StreamEvent.token("a"), StreamEvent.token("b"), StreamEvent.done()])

    def test_crlf_line_endings(self) -> None:
        """Carriage returns are tolerated."""
        decoder = SSEDecoder()

        events = decoder.feed('data: {"type":"token","data":"x"}\r\n\r\n')

        check.equal(events, [StreamEvent.token("x")])

    def test_malformed_frame_does_not_stop_decoding(self) -> None:
        """A bad frame is skipped and later frames still decode."""
        decoder = SSEDecoder()

        events = decoder.feed('data: oops\n\ndata: {"type":"done","data":""}\n\n')

        check.equal(events, [StreamEvent.done()])

    def test_flush_decodes_unterminated_tail(self) -> None:
        """A final line without a newline is decoded at end of stream."""
        decoder = SSEDecoder()

        check.equal(decoder.feed('data: {"type":"done","data":""}'), [])
        check.equal(decoder.flush(), [StreamEvent.done()])
        check.equal(decoder.flush(), [])

    def test_token_whitespace_preserved(self) -> None:
        """Token data is returned verbatim, including spaces."""
        decoder = SSEDecoder()

        events = decoder.feed('data: {"type":"token","data":" world "}\n\n')

        check.equal(events[0].data, " world ")
