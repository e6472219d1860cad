"""命令行测试"""

import os
from datetime import datetime, timezone

import pytest
from typer.testing import CliRunner

from replayt.__main__ import app
from replayt.core.filetime import datetime_to_ns, ns_to_datetime

UTC = timezone.utc
runner = CliRunner()


@pytest.fixture
def base_args(tmp_path):
    return ["--quiet", "--log-dir", str(tmp_path / "logs")]


@pytest.fixture
def source(tmp_path):
    root = tmp_path / "source"
    (root / "sub").mkdir(parents=True)
    for name, year in (("a.txt", 2010), ("sub/b.jpg", 2011)):
        path = root / name
        path.write_text(name)
        ns = datetime_to_ns(datetime(year, 1, 1, tzinfo=UTC))
        os.utime(path, ns=(ns, ns))
    return root


def copy_tree(source, target):
    for path in source.rglob("*"):
        if path.is_file():
            destination = target / path.relative_to(source)
            destination.parent.mkdir(parents=True, exist_ok=True)
            destination.write_text(path.read_text())


class TestCollectCommand:

    def test_collect_writes_snapshot(self, base_args, source, tmp_path):
        out = tmp_path / "snap.tsv"
        result = runner.invoke(app, base_args + ["collect", str(source), "-r", "-o", str(out)])

        assert result.exit_code == 0, result.output
        lines = out.read_text(encoding="utf-8").splitlines()
        assert [line.split("\t")[0] for line in lines] == ["a.txt", "sub/b.jpg"]
        assert lines[0].endswith("\t2010-01-01T00:00:00Z")

    def test_collect_missing_directory(self, base_args, tmp_path):
        result = runner.invoke(app, base_args + ["collect", str(tmp_path / "missing"), "-o", str(tmp_path / "x.tsv")])
        assert result.exit_code == 1
        assert "Directory error" in result.output

    def test_collect_empty_directory_reports_empty_collection(self, base_args, tmp_path):
        empty = tmp_path / "empty"
        empty.mkdir()
        result = runner.invoke(app, base_args + ["collect", str(empty), "-o", str(tmp_path / "x.tsv")])
        assert result.exit_code == 1
        assert "Empty collection" in result.output

    def test_recursive_default_from_config(self, tmp_path, source):
        config_file = tmp_path / "config.toml"
        config_file.write_text("[replayt]\nrecursive = true\n", encoding="utf-8")
        out = tmp_path / "snap.tsv"

        result = runner.invoke(app, [
            "--quiet", "--log-dir", str(tmp_path / "logs"), "--config", str(config_file),
            "collect", str(source), "-o", str(out),
        ])

        assert result.exit_code == 0, result.output
        assert len(out.read_text(encoding="utf-8").splitlines()) == 2


class TestReplayCommand:

    def test_collect_then_replay_on_copy(self, base_args, source, tmp_path):
        out = tmp_path / "snap.tsv"
        target = tmp_path / "copy"
        copy_tree(source, target)

        assert runner.invoke(app, base_args + ["collect", str(source), "-r", "-o", str(out)]).exit_code == 0
        result = runner.invoke(app, base_args + ["replay", str(target), "-r", "-i", str(out)])

        assert result.exit_code == 0, result.output
        assert ns_to_datetime((target / "a.txt").stat().st_mtime_ns) == datetime(2010, 1, 1, tzinfo=UTC)
        assert ns_to_datetime((target / "sub" / "b.jpg").stat().st_mtime_ns) == datetime(2011, 1, 1, tzinfo=UTC)

    def test_replay_with_pattern(self, base_args, tmp_path):
        snapshot_file = tmp_path / "snap.tsv"
        snapshot_file.write_text("b.jpg\t2012-01-01T00:00:00Z\t2012-02-01T00:00:00Z\n", encoding="utf-8")
        target = tmp_path / "target"
        target.mkdir()
        (target / "b.jpeg").write_text("b")

        result = runner.invoke(app, base_args + [
            "replay", str(target), "-i", str(snapshot_file), "--pattern", r"\.jpeg$", "--replace", ".jpg",
        ])

        assert result.exit_code == 0, result.output
        assert ns_to_datetime((target / "b.jpeg").stat().st_mtime_ns) == datetime(2012, 2, 1, tzinfo=UTC)

    def test_replay_preview_does_not_write(self, base_args, tmp_path):
        snapshot_file = tmp_path / "snap.tsv"
        snapshot_file.write_text("b.txt\t2012-01-01T00:00:00Z\t2012-02-01T00:00:00Z\n", encoding="utf-8")
        target = tmp_path / "target"
        target.mkdir()
        (target / "b.txt").write_text("b")
        before = (target / "b.txt").stat().st_mtime_ns

        result = runner.invoke(app, base_args + ["replay", str(target), "-i", str(snapshot_file), "--preview"])

        assert result.exit_code == 0, result.output
        assert (target / "b.txt").stat().st_mtime_ns == before

    def test_replay_empty_snapshot_file(self, base_args, tmp_path):
        snapshot_file = tmp_path / "empty.tsv"
        snapshot_file.write_text("", encoding="utf-8")

        result = runner.invoke(app, base_args + ["replay", str(tmp_path), "-i", str(snapshot_file)])

        assert result.exit_code == 1
        assert "Empty collection" in result.output

    def test_replay_broken_snapshot_file(self, base_args, tmp_path):
        snapshot_file = tmp_path / "broken.tsv"
        snapshot_file.write_text("only-one-field\n", encoding="utf-8")

        result = runner.invoke(app, base_args + ["replay", str(tmp_path), "-i", str(snapshot_file)])

        assert result.exit_code == 1
        assert "Open file error" in result.output


class TestShowCommand:

    def test_show_lists_entries(self, base_args, tmp_path):
        snapshot_file = tmp_path / "snap.tsv"
        snapshot_file.write_text(
            "x.txt\t2021-01-01T00:00:00Z\t2021-01-02T00:00:00Z\n"
            "y.txt\t2021-01-03T00:00:00Z\t2021-01-04T00:00:00Z\n",
            encoding="utf-8",
        )

        result = runner.invoke(app, base_args + ["show", str(snapshot_file)])

        assert result.exit_code == 0, result.output
        assert "x.txt" in result.output
        assert "共 2 条记录" in result.output


class TestInteractive:

    def test_no_subcommand_starts_interactive_and_exits(self, base_args):
        result = runner.invoke(app, base_args, input="0\n")
        assert result.exit_code == 0, result.output
        assert "文件日期回放" in result.output
