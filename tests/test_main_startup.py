from __future__ import annotations

import sys

import pytest

import main
from takoyaki import TakoyakiSession


class _DisplayNotReady:
    @staticmethod
    def init() -> None:
        return None

    @staticmethod
    def get_init() -> bool:
        return False


class _FakePygameDisplayDown:
    error = RuntimeError
    display = _DisplayNotReady()

    @staticmethod
    def init() -> None:
        return None


def test_gameui_reports_display_startup_failure(monkeypatch):
    monkeypatch.setattr(main, "pygame", _FakePygameDisplayDown)

    with pytest.raises(RuntimeError, match="--headless"):
        main.GameUI(TakoyakiSession())


def test_gameui_requires_pygame(monkeypatch):
    monkeypatch.setattr(main, "pygame", None)

    with pytest.raises(RuntimeError, match="pygame is required"):
        main.GameUI(TakoyakiSession())


class _BrokenGameUI:
    def __init__(self, session):
        raise RuntimeError("Display subsystem is unavailable. Relaunch with --headless.")


def test_main_handles_gameui_startup_error(monkeypatch, capsys):
    monkeypatch.setattr(main, "GameUI", _BrokenGameUI)
    monkeypatch.setattr(sys, "argv", ["takoyaki-tycoon"])

    with pytest.raises(SystemExit) as exc:
        main.main()

    assert exc.value.code == 1
    captured = capsys.readouterr()
    assert "Startup error:" in captured.err
    assert "--headless" in captured.err


def test_main_headless_prints_summary(monkeypatch, capsys):
    monkeypatch.setattr(sys, "argv", ["takoyaki-tycoon", "--headless", "--seed", "3", "--step-ms", "250"])

    main.main()

    out = capsys.readouterr().out
    assert out.startswith("headless_done ")
    assert "rating[" in out


def test_run_headless_autoplay_serves_customers(capsys):
    summary = main.run_headless(seed=7, step_ms=100)

    assert summary["served_customers"] > 0
    assert summary["items_correct"] > 0
    assert summary["score"] >= summary["items_correct"] * 100
    assert summary["level"] == 1 + summary["served_customers"]
    assert "headless_done" in capsys.readouterr().out


def test_run_headless_is_deterministic(capsys):
    assert main.run_headless(seed=11, step_ms=200) == main.run_headless(seed=11, step_ms=200)
