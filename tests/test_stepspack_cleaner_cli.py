"""Tests for stepspack_cleaner/cli.py and args_parser.py modules."""

from __future__ import annotations

import errno
import json
from pathlib import Path
from unittest.mock import patch

import pytest

from stepspack_cleaner.args_parser import parse_args
from stepspack_cleaner.cli import StepsFileError, load_steps_file, main
from tests.assertions import assert_equal
from tests.stepspack_test_utils import dir_names


class TestParseArgs:
    """Tests for CLI argument parsing."""

    def test_defaults(self):
        """Orphan cleaning is the default target."""
        args = parse_args(["demo"])

        assert_equal(args.steps_pack, "demo")
        assert_equal(args.to_clean, ["orphans"])
        assert_equal(args.step_ids, [])
        assert_equal(args.extension, "js")
        assert args.workers is None
        assert not args.dry_run

    def test_repeatable_options(self, tmp_path):
        """Step ids and clean targets accumulate."""
        args = parse_args(
            [
                "demo",
                "--step-id",
                "a1",
                "--step-id",
                "b2",
                "--clean",
                "cache",
                "--base-path",
                str(tmp_path),
                "--workers",
                "3",
            ]
        )

        assert_equal(args.step_ids, ["a1", "b2"])
        assert_equal(args.to_clean, ["cache"])
        assert_equal(args.base_path, tmp_path)
        assert_equal(args.workers, 3)

    def test_rejects_non_positive_workers(self):
        """--workers must be positive."""
        with pytest.raises(SystemExit) as exc_info:
            parse_args(["demo", "--workers", "0"])
        assert_equal(exc_info.value.code, 2)


class TestLoadStepsFile:
    """Tests for load_steps_file."""

    def test_list_manifest(self, tmp_path):
        """A bare list of steps is accepted."""
        path = tmp_path / "steps.json"
        path.write_text(json.dumps([{"id": "a1"}, {"id": "b2"}]))
        assert_equal(load_steps_file(path), [{"id": "a1"}, {"id": "b2"}])

    def test_object_manifest(self, tmp_path):
        """An object with a steps list is accepted."""
        path = tmp_path / "steps.json"
        path.write_text(json.dumps({"name": "demo", "steps": [{"id": "a1"}]}))
        assert_equal(load_steps_file(path), [{"id": "a1"}])

    def test_invalid_shape(self, tmp_path):
        """Anything else is rejected."""
        path = tmp_path / "steps.json"
        path.write_text(json.dumps({"name": "demo"}))
        with pytest.raises(StepsFileError):
            load_steps_file(path)

    def test_invalid_json(self, tmp_path):
        """Malformed JSON is reported as a steps file error."""
        path = tmp_path / "steps.json"
        path.write_text("{not json")
        with pytest.raises(StepsFileError):
            load_steps_file(path)

    def test_missing_file(self, tmp_path):
        """A missing manifest is reported as a steps file error."""
        with pytest.raises(StepsFileError) as exc_info:
            load_steps_file(tmp_path / "missing.json")
        assert "Cannot read steps file" in str(exc_info.value)


class TestMain:
    """Tests for the CLI entry point."""

    def test_cleans_orphans(self, stepspacks_root, make_generated_dir, tmp_path):
        """Steps from the manifest and --step-id are both kept."""
        generated = make_generated_dir(["step-a1.js", "step-b2.js", "step-c3.js"])
        manifest = tmp_path / "steps.json"
        manifest.write_text(json.dumps([{"id": "a1"}]))
        report_path = tmp_path / "report.json"

        exit_code = main(
            [
                "demo",
                "--base-path",
                str(stepspacks_root),
                "--steps-file",
                str(manifest),
                "--step-id",
                "b2",
                "--report-json",
                str(report_path),
            ]
        )

        assert_equal(exit_code, 0)
        assert_equal(dir_names(generated), {"step-a1.js", "step-b2.js"})
        rows = json.loads(report_path.read_text())
        assert_equal([(row["step_id"], row["outcome"]) for row in rows], [("c3", "deleted")])

    def test_dry_run(self, stepspacks_root, make_generated_dir, capsys):
        """--dry-run lists orphans and leaves them in place."""
        generated = make_generated_dir(["step-a1.js", "step-c3.js"])

        exit_code = main(["demo", "--base-path", str(stepspacks_root), "--step-id", "a1", "--dry-run"])

        assert_equal(exit_code, 0)
        assert_equal(dir_names(generated), {"step-a1.js", "step-c3.js"})
        assert "step-c3.js" in capsys.readouterr().out

    def test_nothing_to_clean(self, stepspacks_root, capsys):
        """A pack without generated files exits cleanly."""
        exit_code = main(["absent", "--base-path", str(stepspacks_root)])

        assert_equal(exit_code, 0)
        assert "Nothing to clean" in capsys.readouterr().out

    def test_invalid_pack_name(self, stepspacks_root):
        """Traversal in the pack name is an input error."""
        assert_equal(main(["..", "--base-path", str(stepspacks_root)]), 1)

    def test_unreadable_steps_file(self, stepspacks_root, tmp_path):
        """A missing manifest is an input error and nothing is deleted."""
        exit_code = main(
            ["demo", "--base-path", str(stepspacks_root), "--steps-file", str(tmp_path / "nope.json")]
        )
        assert_equal(exit_code, 1)

    def test_failed_deletion_exit_code(self, stepspacks_root, make_generated_dir, monkeypatch):
        """Deletion failures complete the run but exit with 2."""
        generated = make_generated_dir(["step-c3.js", "step-d4.js"])
        real_unlink = Path.unlink

        def _unlink(self, *args, **kwargs):
            if self.name == "step-c3.js":
                raise PermissionError(errno.EACCES, "denied")
            return real_unlink(self, *args, **kwargs)

        monkeypatch.setattr(Path, "unlink", _unlink)

        exit_code = main(["demo", "--base-path", str(stepspacks_root)])

        assert_equal(exit_code, 2)
        assert_equal(dir_names(generated), {"step-c3.js"})

    def test_dry_run_listing_error_exit_code(self, stepspacks_root, make_generated_dir, capsys):
        """An unreadable generated directory fails a dry run the same way as a real run."""
        make_generated_dir(["step-c3.js"])
        argv = ["demo", "--base-path", str(stepspacks_root)]

        with patch(
            "stepspack_cleaner.reconciler.os.listdir",
            side_effect=PermissionError(errno.EACCES, "denied"),
        ):
            dry_run_code = main([*argv, "--dry-run"])
            real_code = main(argv)

        assert_equal(dry_run_code, 2)
        assert_equal(real_code, 2)
        assert "Could not read" in capsys.readouterr().out
