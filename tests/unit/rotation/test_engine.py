"""Tests for the rotation engine."""

import os
from pathlib import Path
from unittest.mock import MagicMock

from quicksaver.rotation.engine import RotationEngine
from quicksaver.rotation.executor import FileOperator
from quicksaver.rotation.operations import RenameSave
from quicksaver.rotation.state import RotationState, TickOutcome
from quicksaver.saves.catalog import managed_saves, scan_directory


def _managed(save_dir: Path) -> list[tuple[str, bytes]]:
    return [(e.name, e.path.read_bytes()) for e in managed_saves(scan_directory(save_dir))]


class TestChangeDetection:
    def test_first_tick_sets_watermark_without_copying(self, make_save, make_config, focus, save_dir):
        make_save("Quicksave0_A.sfs", 100)
        result = RotationEngine(make_config(), focus).tick(RotationState())
        assert result.outcome is TickOutcome.COMPLETED
        assert result.state.last_observed_quicksave_time == 100
        assert result.copied_to is None
        assert _managed(save_dir) == []

    def test_copies_changed_quicksave(self, make_save, make_config, focus, save_dir):
        make_save("Quicksave0_A.sfs", 100, b"quick")
        result = RotationEngine(make_config(), focus).tick(RotationState(50))
        assert result.copied_to == save_dir / "Save1001_A.sfs"
        assert result.state.last_observed_quicksave_time == 100
        assert _managed(save_dir) == [("Save1001_A.sfs", b"quick")]

    def test_copy_is_idempotent(self, make_save, make_config, focus, save_dir):
        make_save("Quicksave0_A.sfs", 100)
        engine = RotationEngine(make_config(), focus)
        state = engine.tick(RotationState(50)).state
        for _ in range(5):
            result = engine.tick(state)
            state = result.state
            assert result.copied_to is None
        assert len(_managed(save_dir)) == 1

    def test_next_change_gets_next_identifier(self, make_save, make_config, focus, save_dir):
        quicksave = make_save("Quicksave0_A.sfs", 100)
        engine = RotationEngine(make_config(), focus)
        state = engine.tick(RotationState(50)).state
        os.utime(quicksave, (200, 200))
        result = engine.tick(state)
        assert result.copied_to == save_dir / "Save1002_A.sfs"
        assert result.state.last_observed_quicksave_time == 200

    def test_game_saves_inflate_identifier(self, make_save, make_config, focus, save_dir):
        make_save("Quicksave0_A.sfs", 100)
        make_save("Save12_A.sfs", 10)
        result = RotationEngine(make_config(), focus).tick(RotationState(50))
        assert result.copied_to == save_dir / "Save10013_A.sfs"

    def test_copy_disabled(self, make_save, make_config, focus, save_dir):
        make_save("Quicksave0_A.sfs", 100)
        result = RotationEngine(make_config(quicksave_copy=False), focus).tick(RotationState(50))
        assert result.copied_to is None
        assert result.state.last_observed_quicksave_time == 50
        assert _managed(save_dir) == []

    def test_failed_copy_keeps_watermark(self, make_save, make_config, focus):
        make_save("Quicksave0_A.sfs", 100)
        operator = MagicMock(spec=FileOperator)
        operator.apply.return_value = False
        result = RotationEngine(make_config(), focus, operator=operator).tick(RotationState(50))
        assert result.copied_to is None
        assert result.state.last_observed_quicksave_time == 50
        assert result.failures == ["copy 'Quicksave0_A.sfs' to 'Save1001_A.sfs'"]

    def test_newest_of_several_quicksaves(self, make_save, make_config, focus, save_dir):
        make_save("Quicksave0_001.sfs", 100, b"old")
        make_save("Quicksave0_002.sfs", 105, b"new")
        result = RotationEngine(make_config(), focus).tick(RotationState(50))
        assert result.selection.entry.name == "Quicksave0_002.sfs"
        assert _managed(save_dir) == [("Save1001_002.sfs", b"new")]


class TestSkippedTicks:
    def test_not_focused(self, make_save, make_config, focus, save_dir):
        make_save("Quicksave0_A.sfs", 100)
        focus.focused = False
        config = make_config(require_focus=True)
        result = RotationEngine(config, focus).tick(RotationState(50))
        assert result.outcome is TickOutcome.NOT_FOCUSED
        assert result.state == RotationState(50)
        assert focus.queried == ["Starfield"]
        assert _managed(save_dir) == []

    def test_focus_lookup_error_means_not_focused(self, make_save, make_config):
        make_save("Quicksave0_A.sfs", 100)
        focus = MagicMock()
        focus.is_focused.side_effect = OSError("no foreground window")
        result = RotationEngine(make_config(require_focus=True), focus).tick(RotationState())
        assert result.outcome is TickOutcome.NOT_FOCUSED

    def test_no_quicksave_skips_trim(self, make_save, make_config, focus, save_dir):
        for i in range(1, 6):
            make_save(f"Save100{i}_A.sfs", i)
        result = RotationEngine(make_config(quicksave_count=2), focus).tick(RotationState())
        assert result.outcome is TickOutcome.NO_QUICKSAVE
        assert len(_managed(save_dir)) == 5
        assert result.state.last_observed_quicksave_time is None


class TestForcedSave:
    def _engine(self, make_config, focus, **overrides):
        config = make_config(quicksave_save=True, quicksave_save_interval=120, **overrides)
        return RotationEngine(config, focus, clock=lambda: 1000.0)

    def test_sends_when_quicksave_is_old(self, make_save, make_config, focus):
        make_save("Quicksave0_A.sfs", 800)
        result = self._engine(make_config, focus).tick(RotationState())
        assert result.save_command_sent is True
        assert focus.save_commands == 1

    def test_interval_boundary(self, make_save, make_config, focus):
        make_save("Quicksave0_A.sfs", 880)
        assert self._engine(make_config, focus).tick(RotationState()).save_command_sent is True

    def test_skips_recent_quicksave(self, make_save, make_config, focus):
        make_save("Quicksave0_A.sfs", 950)
        result = self._engine(make_config, focus).tick(RotationState())
        assert result.save_command_sent is False
        assert focus.save_commands == 0

    def test_requires_focus_even_when_tick_does_not(self, make_save, make_config, focus):
        make_save("Quicksave0_A.sfs", 800)
        focus.focused = False
        result = self._engine(make_config, focus, require_focus=False).tick(RotationState())
        assert result.outcome is TickOutcome.COMPLETED
        assert focus.save_commands == 0

    def test_disabled(self, make_save, make_config, focus):
        make_save("Quicksave0_A.sfs", 800)
        config = make_config(quicksave_save=False)
        RotationEngine(config, focus, clock=lambda: 1000.0).tick(RotationState())
        assert focus.save_commands == 0

    def test_send_failure_recorded(self, make_save, make_config):
        make_save("Quicksave0_A.sfs", 800)
        focus = MagicMock()
        focus.is_focused.return_value = True
        focus.send_save_command.side_effect = RuntimeError("no display")
        result = self._engine(make_config, focus).tick(RotationState())
        assert result.save_command_sent is False
        assert result.failures == ["send save command"]


class TestRetention:
    def test_trim_and_renumber(self, make_save, make_config, focus, save_dir):
        make_save("Quicksave0_A.sfs", 50)
        for i in range(1, 5):
            make_save(f"Save100{i}_A.sfs", i, str(i).encode())

        result = RotationEngine(make_config(quicksave_count=3), focus).tick(RotationState())

        assert result.deleted == [save_dir / "Save1001_A.sfs"]
        assert _managed(save_dir) == [
            ("Save1001_A.sfs", b"2"),
            ("Save1002_A.sfs", b"3"),
            ("Save1003_A.sfs", b"4"),
        ]

    def test_renumber_preserves_age_order(self, make_save, make_config, focus, save_dir):
        make_save("Quicksave0_A.sfs", 50)
        for i in range(1, 5):
            make_save(f"Save100{i}_A.sfs", i)
        RotationEngine(make_config(quicksave_count=3), focus).tick(RotationState())
        mtimes = [e.modified_at for e in managed_saves(scan_directory(save_dir))]
        assert mtimes == [2, 3, 4]

    def test_swapped_identifiers_renumbered(self, make_save, make_config, focus, save_dir):
        make_save("Quicksave0_A.sfs", 50)
        make_save("Save1002_A.sfs", 1, b"older")
        make_save("Save1001_A.sfs", 2, b"newer")
        RotationEngine(make_config(), focus).tick(RotationState())
        assert _managed(save_dir) == [("Save1001_A.sfs", b"older"), ("Save1002_A.sfs", b"newer")]
        assert sorted(p.name for p in save_dir.iterdir()) == [
            "Quicksave0_A.sfs", "Save1001_A.sfs", "Save1002_A.sfs",
        ]

    def test_gap_closed_without_trim(self, make_save, make_config, focus, save_dir):
        make_save("Quicksave0_A.sfs", 50)
        make_save("Save1001_A.sfs", 1)
        make_save("Save1003_A.sfs", 3)
        RotationEngine(make_config(), focus).tick(RotationState())
        assert [name for name, _ in _managed(save_dir)] == ["Save1001_A.sfs", "Save1002_A.sfs"]

    def test_game_saves_untouched(self, make_save, make_config, focus, save_dir):
        make_save("Quicksave0_A.sfs", 50)
        make_save("Save12_A.sfs", 1)
        make_save("Save2001_A.sfs", 2)
        make_save("Save1001_A.sfs", 3)
        make_save("Save1002_A.sfs", 4)
        RotationEngine(make_config(quicksave_count=1), focus).tick(RotationState())
        names = sorted(p.name for p in save_dir.iterdir())
        assert names == ["Quicksave0_A.sfs", "Save1001_A.sfs", "Save12_A.sfs", "Save2001_A.sfs"]

    def test_failed_rename_stops_renumbering(self, make_save, make_config, focus, save_dir):
        class NoRenames(FileOperator):
            def apply(self, op):
                if isinstance(op, RenameSave):
                    return False
                return super().apply(op)

        make_save("Quicksave0_A.sfs", 50)
        make_save("Save1002_A.sfs", 2)
        make_save("Save1003_A.sfs", 3)
        result = RotationEngine(make_config(), focus, operator=NoRenames()).tick(RotationState())
        assert result.renamed == []
        assert result.failures == ["rename 'Save1002_A.sfs' to 'Save1001_A.sfs'"]

    def test_contiguous_and_bounded_over_many_ticks(self, make_save, make_config, focus, save_dir):
        limit = 3
        engine = RotationEngine(make_config(quicksave_count=limit), focus)
        state = RotationState()
        quicksave = save_dir / "Quicksave0_A.sfs"

        for i in range(1, 8):
            quicksave.write_bytes(f"v{i}".encode())
            os.utime(quicksave, (100 * i, 100 * i))
            state = engine.tick(state).state

            managed = managed_saves(scan_directory(save_dir))
            assert len(managed) <= limit
            assert [e.identifier for e in managed] == list(range(1001, 1001 + len(managed)))
            if managed:
                # Pin the newest copy's mtime so later ticks order deterministically.
                os.utime(managed[-1].path, (10_000 + i, 10_000 + i))

        assert _managed(save_dir) == [
            ("Save1001_A.sfs", b"v5"),
            ("Save1002_A.sfs", b"v6"),
            ("Save1003_A.sfs", b"v7"),
        ]

    def test_interrupted_swap_keeps_copies_in_band(self, make_save, make_config, focus, save_dir):
        class FailSecondRename(FileOperator):
            renames = 0

            def apply(self, op):
                if isinstance(op, RenameSave):
                    self.renames += 1
                    if self.renames == 2:
                        return False
                return super().apply(op)

        quicksave = make_save("Quicksave0_A.sfs", 50)
        make_save("Save1002_A.sfs", 1)
        make_save("Save1001_A.sfs", 2)
        config = make_config(quicksave_count=2)

        state = RotationEngine(config, focus, operator=FailSecondRename()).tick(RotationState()).state
        leftover = sorted(p.name for p in save_dir.iterdir() if p.name.startswith("Save"))
        assert leftover == ["Save1001_A.sfs", "Save1003_A.sfs"]

        engine = RotationEngine(config, focus)
        for i in range(1, 5):
            os.utime(quicksave, (100 * i, 100 * i))
            state = engine.tick(state).state
            assert len(_managed(save_dir)) <= 2

        assert sorted(p.name for p in save_dir.iterdir()) == [
            "Quicksave0_A.sfs", "Save1001_A.sfs", "Save1002_A.sfs",
        ]


class TestWatermark:
    def test_backdated_quicksave_copied_once(self, make_save, make_config, focus, save_dir):
        # A restored quicksave older than the last one copied still differs
        # from the watermark: it is copied, and the watermark follows it back.
        make_save("Quicksave0_A.sfs", 100, b"restored")
        engine = RotationEngine(make_config(), focus)

        result = engine.tick(RotationState(200))
        assert result.copied_to == save_dir / "Save1001_A.sfs"
        assert result.state.last_observed_quicksave_time == 100

        again = engine.tick(result.state)
        assert again.copied_to is None
        assert len(_managed(save_dir)) == 1
