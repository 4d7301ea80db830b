"""
Tests for the command-line interface.
"""

import pytest

from booking_engine.models import EntryMode, LegDirection
from cli import main, parse_leg


class TestParseLeg:

    def test_with_taxes(self):
        leg = parse_leg("outbound:turkish:40000:50")

        assert leg.direction == LegDirection.OUTBOUND
        assert leg.partner_id == "turkish"
        assert leg.points == 40000
        assert leg.taxes == 50.0

    def test_without_taxes(self):
        leg = parse_leg("return:emirates:30,000", EntryMode.POINTS)

        assert leg.points == 30000
        assert leg.taxes is None
        assert leg.entry_mode == EntryMode.POINTS

    def test_malformed(self):
        with pytest.raises(ValueError):
            parse_leg("outbound:turkish")
        with pytest.raises(ValueError):
            parse_leg("sideways:turkish:40000")
        with pytest.raises(ValueError):
            parse_leg("outbound:turkish:lots")


class TestCompareCommand:

    def test_portal_recommendation(self, capsys):
        main(["compare", "--portal", "800", "--direct", "850", "--credit", "300"])

        out = capsys.readouterr().out
        assert "Recommendation: PORTAL" in out
        assert "$500.00" in out
        assert "Double-Dip" in out

    def test_tie_output(self, capsys):
        main(["compare", "--portal", "500", "--direct", "510"])

        out = capsys.readouterr().out
        assert "Recommendation: TIE" in out
        assert "too close to call" in out

    def test_award_leg(self, capsys):
        main([
            "compare", "--portal", "800", "--direct", "850", "--credit", "300",
            "--leg", "outbound:turkish:40000:50",
        ])

        out = capsys.readouterr().out
        assert "Recommendation: AWARD" in out
        assert "1.12¢/point" in out or "1.13¢/point" in out

    def test_invalid_award_still_compares(self, capsys):
        main([
            "compare", "--portal", "800", "--direct", "850", "--credit", "300",
            "--leg", "outbound:turkish:500:50",
        ])

        out = capsys.readouterr().out
        assert "Recommendation: PORTAL" in out
        assert "Award not compared: Outbound: enter valid miles (at least 1,000)" in out

    @pytest.mark.parametrize(
        "argv",
        [
            ["compare", "--portal", "-1", "--direct", "850"],
            ["compare", "--portal", "800", "--direct", "850", "--credit", "-5"],
            ["compare", "--portal", "800", "--direct", "850", "--cpp", "0"],
            ["compare", "--portal", "800", "--direct", "850", "--currency", "XYZ"],
            ["compare", "--portal", "800", "--direct", "850", "--leg", "outbound:turkish"],
        ],
    )
    def test_invalid_input_exits_with_error(self, argv, capsys):
        with pytest.raises(SystemExit) as exc_info:
            main(argv)

        assert exc_info.value.code == 1
        assert capsys.readouterr().out.startswith("Error:")


class TestPartnersCommand:

    def test_lists_grouped_partners(self, capsys):
        main(["partners"])

        out = capsys.readouterr().out
        assert "Airlines (1:1)" in out
        assert "turkish" in out
        assert "Emirates Skywards (2:1.5)" in out


def test_no_command_exits(capsys):
    with pytest.raises(SystemExit) as exc_info:
        main([])

    assert exc_info.value.code == 1
