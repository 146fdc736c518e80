"""Tests for calendar feed parsing."""

import pytest

from almanac.core.feed import RawEvent, parse_feed, unfold


def feed(*lines: str, newline: str = "\r\n") -> str:
    return newline.join(["BEGIN:VCALENDAR", *lines, "END:VCALENDAR"]) + newline


class TestUnfold:
    def test_space_continuation(self):
        assert unfold("SUMMARY:Hel\n lo") == "SUMMARY:Hello"

    def test_tab_continuation_with_crlf(self):
        assert unfold("SUMMARY:Hel\r\n\tlo") == "SUMMARY:Hello"

    def test_only_one_whitespace_char_removed(self):
        assert unfold("SUMMARY:Hello\n  world") == "SUMMARY:Hello world"

    def test_unfolded_text_untouched(self):
        text = "SUMMARY:A\nDTSTART:20250310"
        assert unfold(text) == text


class TestParseFeed:
    def test_single_event(self):
        events = parse_feed(
            feed(
                "BEGIN:VEVENT",
                "SUMMARY:Team sync",
                "DTSTART:20250310T090000",
                "RRULE:FREQ=WEEKLY;INTERVAL=2",
                "END:VEVENT",
            )
        )
        assert events == [
            RawEvent(
                summary="Team sync",
                raw_date="20250310T090000",
                raw_recurrence="FREQ=WEEKLY;INTERVAL=2",
            )
        ]

    def test_folded_summary(self):
        events = parse_feed("BEGIN:VEVENT\nSUMMARY:Hel\n lo\nEND:VEVENT\n")
        assert events[0].summary == "Hello"

    def test_bare_newlines(self):
        events = parse_feed(feed("BEGIN:VEVENT", "SUMMARY:Lunch", "END:VEVENT", newline="\n"))
        assert [e.summary for e in events] == ["Lunch"]

    def test_summary_trimmed(self):
        events = parse_feed(feed("BEGIN:VEVENT", "SUMMARY:   Padded  ", "END:VEVENT"))
        assert events[0].summary == "Padded"

    def test_dtstart_with_parameters(self):
        events = parse_feed(feed("BEGIN:VEVENT", "DTSTART;VALUE=DATE:20250310", "END:VEVENT"))
        assert events[0].raw_date == "20250310"

    def test_dtstart_with_tzid_takes_text_after_first_colon(self):
        events = parse_feed(
            feed("BEGIN:VEVENT", "DTSTART;TZID=Europe/Paris:20250310T090000", "END:VEVENT")
        )
        assert events[0].raw_date == "20250310T090000"

    def test_dtstart_without_colon_left_unset(self):
        events = parse_feed(feed("BEGIN:VEVENT", "DTSTART", "END:VEVENT"))
        assert events[0].raw_date is None

    def test_missing_fields_are_none(self):
        events = parse_feed(feed("BEGIN:VEVENT", "DESCRIPTION:nothing useful", "END:VEVENT"))
        assert events == [RawEvent()]

    def test_preserves_block_order(self):
        events = parse_feed(
            feed(
                "BEGIN:VEVENT", "SUMMARY:First", "END:VEVENT",
                "BEGIN:VEVENT", "SUMMARY:Second", "END:VEVENT",
                "BEGIN:VEVENT", "SUMMARY:Third", "END:VEVENT",
            )
        )
        assert [e.summary for e in events] == ["First", "Second", "Third"]

    def test_unterminated_block_yields_nothing(self):
        assert parse_feed("BEGIN:VEVENT\nSUMMARY:Dangling\nDTSTART:20250310\n") == []

    def test_unterminated_block_after_complete_one(self):
        events = parse_feed(
            "BEGIN:VEVENT\nSUMMARY:Done\nEND:VEVENT\nBEGIN:VEVENT\nSUMMARY:Dangling\n"
        )
        assert [e.summary for e in events] == ["Done"]

    def test_reopened_block_restarts_record(self):
        events = parse_feed(
            feed(
                "BEGIN:VEVENT", "SUMMARY:Lost", "DTSTART:20250101",
                "BEGIN:VEVENT", "SUMMARY:Kept", "END:VEVENT",
            )
        )
        assert events == [RawEvent(summary="Kept")]

    def test_lines_outside_blocks_ignored(self):
        events = parse_feed(
            feed("SUMMARY:Calendar name", "DTSTART:20250101", "BEGIN:VEVENT", "END:VEVENT")
        )
        assert events == [RawEvent()]

    def test_close_without_open_ignored(self):
        assert parse_feed("END:VEVENT\nSUMMARY:Stray\n") == []

    def test_markers_must_match_exactly(self):
        assert parse_feed("BEGIN:VEVENTS\nSUMMARY:X\nEND:VEVENTS\n") == []

    def test_nested_alarm_does_not_override_fields(self):
        events = parse_feed(
            feed(
                "BEGIN:VEVENT",
                "SUMMARY:Dentist",
                "DTSTART:20250310T090000Z",
                "BEGIN:VALARM",
                "SUMMARY:Reminder",
                "TRIGGER:-PT15M",
                "END:VALARM",
                "RRULE:FREQ=YEARLY",
                "END:VEVENT",
            )
        )
        assert events == [
            RawEvent(summary="Dentist", raw_date="20250310T090000Z", raw_recurrence="FREQ=YEARLY")
        ]

    def test_mismatched_end_inside_alarm_keeps_nesting(self):
        events = parse_feed(
            feed(
                "BEGIN:VEVENT",
                "SUMMARY:Dentist",
                "BEGIN:VALARM",
                "END:VTODO",
                "SUMMARY:Reminder",
                "END:VALARM",
                "DTSTART:20250310T090000Z",
                "END:VEVENT",
            )
        )
        assert events == [RawEvent(summary="Dentist", raw_date="20250310T090000Z")]

    def test_doubly_nested_components(self):
        events = parse_feed(
            feed(
                "BEGIN:VEVENT",
                "BEGIN:VALARM",
                "BEGIN:X-EXTRA",
                "END:X-EXTRA",
                "SUMMARY:Reminder",
                "END:VALARM",
                "SUMMARY:Dentist",
                "END:VEVENT",
            )
        )
        assert events[0].summary == "Dentist"

    def test_uid(self):
        events = parse_feed(feed("BEGIN:VEVENT", "UID: abc-123@example.com ", "END:VEVENT"))
        assert events[0].uid == "abc-123@example.com"

    def test_alarm_uid_ignored(self):
        events = parse_feed(
            feed("BEGIN:VEVENT", "UID:event-1", "BEGIN:VALARM", "UID:alarm-1", "END:VALARM", "END:VEVENT")
        )
        assert events[0].uid == "event-1"

    @pytest.mark.parametrize("text", ["", "\n\n", "garbage", "BEGIN:VCALENDAR\nEND:VCALENDAR"])
    def test_no_events(self, text):
        assert parse_feed(text) == []
