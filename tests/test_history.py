"""Tests for the history listing parser."""

from __future__ import annotations

from datetime import datetime, timezone

import pytest

from sdtp_client.history import (
    VersionRecord,
    parse_date,
    parse_history,
    render_history,
)

LISTING = (
    "Item data:1\n"
    "  Date: 2024-01-01\n"
    "  Size: 10\n"
    "Item data:2\n"
    "  Date: 2024-02-01\n"
    "  Size: 20\n"
)


class TestParseHistory:
    """Tests for parse_history()."""

    def test_two_records(self):
        records = parse_history("data", LISTING)

        assert records == [
            VersionRecord(
                "data", "1", {"Date": datetime(2024, 1, 1), "Size": "10"}
            ),
            VersionRecord(
                "data", "2", {"Date": datetime(2024, 2, 1), "Size": "20"}
            ),
        ]

    def test_empty_input(self):
        assert parse_history("data", "") == []

    def test_no_headers(self):
        assert parse_history("data", "  Date: 2024-01-01\n  Size: 10\n") == []

    def test_properties_before_first_header_are_ignored(self):
        records = parse_history("data", "Size: 99\nItem data:1\nSize: 1\n")
        assert records == [VersionRecord("data", "1", {"Size": "1"})]

    @pytest.mark.parametrize("newline", ["\r\n", "\r", "\n"])
    def test_line_ending_variants(self, newline):
        text = LISTING.replace("\n", newline)
        assert parse_history("data", text) == parse_history("data", LISTING)

    def test_mixed_line_endings(self):
        text = "Item data:1\r\n  Size: 1\rItem data:2\n  Size: 2"
        records = parse_history("data", text)
        assert [(r.version, r.properties) for r in records] == [
            ("1", {"Size": "1"}),
            ("2", {"Size": "2"}),
        ]

    def test_header_is_case_insensitive(self):
        records = parse_history("Data", "ITEM data:5\n  Size: 1\n")
        assert len(records) == 1
        assert records[0].clipboard == "Data"
        assert records[0].version == "5"

    def test_clipboard_name_is_matched_literally(self):
        text = "Item aXb:1\n  Size: 1\nItem a.b:2\n  Size: 2\n"
        records = parse_history("a.b", text)
        assert [r.version for r in records] == ["2"]

    def test_version_text_preserved(self):
        records = parse_history("data", "Item data:007\n")
        assert records == [VersionRecord("data", "007", {})]

    def test_header_without_properties(self):
        records = parse_history("data", "Item data:1\nItem data:2\n")
        assert [r.version for r in records] == ["1", "2"]
        assert all(r.properties == {} for r in records)

    def test_unmatched_lines_are_ignored(self):
        text = "Item data:1\n\n  garbage line\n  ---\n  Size: 3\n"
        assert parse_history("data", text) == [VersionRecord("data", "1", {"Size": "3"})]

    def test_value_may_contain_colons(self):
        records = parse_history("data", "Item data:1\n  Source: host:/tmp/file\n")
        assert records[0].properties == {"Source": "host:/tmp/file"}

    def test_date_name_is_case_insensitive(self):
        records = parse_history("data", "Item data:1\n  DATE: 2024-03-04 05:06:07\n")
        assert records[0].properties == {"DATE": datetime(2024, 3, 4, 5, 6, 7)}
        assert records[0].date == datetime(2024, 3, 4, 5, 6, 7)

    def test_property_order_preserved(self):
        text = "Item data:1\n  Zeta: z\n  Date: 2024-01-01\n  Alpha: a\n"
        assert list(parse_history("data", text)[0].properties) == ["Zeta", "Date", "Alpha"]

    def test_other_clipboard_header_is_a_property_of_current_record(self):
        text = "Item data:1\nItem other:5\n  Size: 2\n"
        records = parse_history("data", text)
        assert records == [
            VersionRecord("data", "1", {"Item other": "5", "Size": "2"})
        ]

    def test_other_clipboard_header_before_first_record_is_ignored(self):
        assert parse_history("data", "Item other:5\n  Size: 2\n") == []

    def test_records_in_encounter_order(self):
        text = "Item data:9\nItem data:3\nItem data:5\n"
        assert [r.version for r in parse_history("data", text)] == ["9", "3", "5"]


class TestParseDate:
    """Tests for parse_date()."""

    def test_iso_date(self):
        assert parse_date("2024-01-01") == datetime(2024, 1, 1)

    def test_iso_datetime_with_offset(self):
        assert parse_date("2024-01-01T10:00:00+00:00") == datetime(
            2024, 1, 1, 10, 0, tzinfo=timezone.utc
        )

    def test_rfc2822_date(self):
        assert parse_date("Mon, 01 Jan 2024 10:00:00 +0000") == datetime(
            2024, 1, 1, 10, 0, tzinfo=timezone.utc
        )

    def test_unparseable_kept_as_text(self):
        assert parse_date("sometime last week") == "sometime last week"

    def test_record_without_parsed_date(self):
        records = parse_history("data", "Item data:1\n  Date: unknown\n")
        assert records[0].properties == {"Date": "unknown"}
        assert records[0].date is None


class TestRenderHistory:
    """Tests for render_history()."""

    def test_render_format(self):
        records = [VersionRecord("data", "1", {"Date": datetime(2024, 1, 1), "Size": "10"})]
        assert render_history(records) == (
            "Item data:1\n  Date: 2024-01-01T00:00:00\n  Size: 10\n"
        )

    def test_render_empty(self):
        assert render_history([]) == ""

    def test_reparse_is_stable(self):
        records = parse_history("data", LISTING)
        assert parse_history("data", render_history(records)) == records

    def test_reparse_is_stable_with_aware_dates_and_empty_values(self):
        records = [
            VersionRecord(
                "data",
                "12",
                {
                    "Date": datetime(2024, 5, 6, 7, 8, 9, tzinfo=timezone.utc),
                    "Note": "",
                    "Origin": "host:/path",
                },
            ),
            VersionRecord("data", "13", {}),
        ]
        assert parse_history("data", render_history(records)) == records
