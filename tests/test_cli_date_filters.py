"""Tests for CLI date filter helper."""

from datetime import date

import click
import pytest

from tallybook.cli.date_filters import resolve_cli_window
from tallybook.domain.entities import DateRange


def _ctx() -> click.Context:
    return click.Context(click.Command("test"))


def test_no_options_means_no_window():
    assert resolve_cli_window(_ctx(), period=None, start_date=None, end_date=None) is None


def test_explicit_dates_without_period():
    window = resolve_cli_window(_ctx(), period=None, start_date="2024-01-01", end_date=None)
    assert window == DateRange(date(2024, 1, 1), None)


def test_period_preset():
    window = resolve_cli_window(_ctx(), period="year", start_date=None, end_date=None)
    today = date.today()
    assert window == DateRange(date(today.year, 1, 1), date(today.year, 12, 31))


def test_custom_period_with_dates():
    window = resolve_cli_window(
        _ctx(), period="custom", start_date="2024-01-01", end_date="2024-01-31"
    )
    assert window == DateRange(date(2024, 1, 1), date(2024, 1, 31))


def test_rejects_preset_with_dates(capsys):
    with pytest.raises(click.exceptions.Exit) as excinfo:
        resolve_cli_window(_ctx(), period="month", start_date="2024-01-01", end_date=None)

    assert excinfo.value.exit_code == 1
    assert "--period custom" in capsys.readouterr().err


def test_custom_period_needs_both_dates(capsys):
    with pytest.raises(click.exceptions.Exit):
        resolve_cli_window(_ctx(), period="custom", start_date="2024-01-01", end_date=None)
    assert "requires both" in capsys.readouterr().err


def test_rejects_reversed_dates(capsys):
    with pytest.raises(click.exceptions.Exit):
        resolve_cli_window(_ctx(), period=None, start_date="2024-02-01", end_date="2024-01-01")
    assert "is after" in capsys.readouterr().err


def test_invalid_date(capsys):
    with pytest.raises(click.exceptions.Exit):
        resolve_cli_window(_ctx(), period=None, start_date="not a date", end_date=None)
    assert "Invalid start date" in capsys.readouterr().err
