import json
import logging
import os
import stat
from pathlib import Path

import pytest

from core import (
    CopyOptions,
    NodeKind,
    RenameTable,
    copy,
    copy_file_sed,
    execute_copy,
    plan_copy,
)


def _files(root: Path):
    return {
        p.relative_to(root).as_posix(): p.read_bytes()
        for p in sorted(root.rglob("*"))
        if p.is_file()
    }


def test_copy_renames_names_and_contents(maven_project: Path, tmp_path: Path) -> None:
    dst = tmp_path / "newproject"
    assert copy(maven_project, dst, {"oldproject": "newproject", "acme": "initech"})

    pkg = dst / "src" / "main" / "java" / "initech" / "newproject"
    assert (dst / "pom.xml").read_text() == (
        "<artifactId>newproject</artifactId>\n<groupId>com.initech</groupId>\n"
    )
    assert (pkg / "OldprojectApp.java").read_text() == "package initech.newproject;\n\nclass App {}\n"
    assert (pkg / "newproject.properties").read_bytes() == b"name=newproject\r\nversion=1\r\n"


def test_copy_excludes_ignore_set(maven_project: Path, tmp_path: Path) -> None:
    dst = tmp_path / "newproject"
    assert copy(maven_project, dst, {"oldproject": "newproject"})

    for name in (".git", ".idea", ".gitignore", "target"):
        assert not (dst / name).exists()
    assert not list(dst.rglob("HEAD"))


def test_empty_table_is_identity(maven_project: Path, tmp_path: Path) -> None:
    (maven_project / "logo.png").write_bytes(b"\x89PNG\r\n\x1a\n\xff\xfe")
    dst = tmp_path / "copy"
    assert copy(maven_project, dst, {})

    expected = {
        rel: data for rel, data in _files(maven_project).items()
        if rel.split("/")[0] not in (".git", ".idea", ".gitignore", "target")
    }
    assert _files(dst) == expected


def test_copy_swaps_symbols(tmp_path: Path, make_tree) -> None:
    src = make_tree(tmp_path / "src", {"A": {"B.txt": "A B\nFooBar A\n"}})
    dst = tmp_path / "dst"
    assert copy(src, dst, {"A": "B", "B": "A"})
    assert (dst / "B" / "A.txt").read_text() == "B A\nFooBar B\n"


@pytest.mark.parametrize(
    "content",
    [b"old\nold", b"old\n", b"old\r\nold\r\n", b"", b"old\rold\r", b"\n\nold\n\n"],
)
def test_newlines_preserved(tmp_path: Path, content: bytes) -> None:
    src = tmp_path / "in.txt"
    dst = tmp_path / "out.txt"
    src.write_bytes(content)
    copy_file_sed(src, dst, RenameTable({"old": "new"}))
    assert dst.read_bytes() == content.replace(b"old", b"new")


def test_copy_file_refuses_existing_target(tmp_path: Path) -> None:
    src = tmp_path / "in.txt"
    dst = tmp_path / "out.txt"
    src.write_text("old")
    dst.write_text("keep")
    with pytest.raises(FileExistsError):
        copy_file_sed(src, dst, RenameTable({"old": "new"}))
    assert dst.read_text() == "keep"


def test_collision_with_existing_destination(maven_project: Path, tmp_path: Path) -> None:
    dst = tmp_path / "newproject"
    dst.mkdir()
    (dst / "pom.xml").write_text("mine")

    assert not copy(maven_project, dst, {"oldproject": "newproject"})
    assert (dst / "pom.xml").read_text() == "mine"


def test_collision_between_sources(tmp_path: Path, make_tree) -> None:
    src = make_tree(tmp_path / "src", {"alpha.txt": "1", "beta.txt": "2"})
    assert not copy(src, tmp_path / "dst", {"alpha": "beta"})


def test_collision_during_execution_aborts(maven_project: Path, tmp_path: Path) -> None:
    dst = tmp_path / "newproject"
    plan = plan_copy(maven_project, dst, {"oldproject": "newproject"})

    # Something appears after planning
    dst.mkdir()
    (dst / "mvnw").write_text("racer")

    result = execute_copy(plan)
    assert not result.ok
    assert result.failed.dst == dst
    assert result.completed == []
    assert "DestinationCollisionError" in result.summary()


def test_invalid_source_and_destination(tmp_path: Path, maven_project: Path) -> None:
    assert not copy(tmp_path / "missing", tmp_path / "dst", {})
    assert not copy(maven_project, maven_project / "src" / "fork", {})
    assert not copy(maven_project, tmp_path / "no" / "parent", {})
    assert not (maven_project / "src" / "fork").exists()


def test_undecodable_file_aborts_and_keeps_partial_tree(tmp_path: Path, make_tree) -> None:
    src = make_tree(tmp_path / "src", {"a.txt": "old", "b.bin": b"\xff\xfe\xfa", "c.txt": "old"})
    dst = tmp_path / "dst"

    plan = plan_copy(src, dst, {"old": "new"})
    result = execute_copy(plan)

    assert not result.ok
    assert result.failed.src == src / "b.bin"
    assert "UnicodeDecodeError" in result.error
    assert (dst / "a.txt").read_text() == "new"
    assert not (dst / "c.txt").exists()


def test_permission_bits_preserved(maven_project: Path, tmp_path: Path) -> None:
    os.chmod(maven_project / "mvnw", 0o755)
    dst = tmp_path / "newproject"
    assert copy(maven_project, dst, {"oldproject": "newproject"})
    assert stat.S_IMODE(os.stat(dst / "mvnw").st_mode) == 0o755
    assert (dst / "mvnw").read_text() == "#!/bin/sh\necho newproject\n"


def test_dry_run_writes_nothing(maven_project: Path, tmp_path: Path) -> None:
    dst = tmp_path / "newproject"
    progress = []
    options = CopyOptions(dry_run=True)

    assert copy(maven_project, dst, {"oldproject": "newproject"}, options,
                progress_callback=lambda *args: progress.append(args))
    assert not dst.exists()
    assert len(progress) == 10
    assert progress[-1][0] == progress[-1][1] == 10
    assert progress[0][2].startswith("[Preview] directory: . -> .")


def test_symlinks_followed_copy_content(tmp_path: Path, make_tree) -> None:
    src = make_tree(tmp_path / "src", {"oldproject.txt": "oldproject"})
    os.symlink("oldproject.txt", src / "link.txt")
    dst = tmp_path / "dst"

    assert copy(src, dst, {"oldproject": "newproject"})
    assert not (dst / "link.txt").is_symlink()
    assert (dst / "link.txt").read_text() == "newproject"


def test_symlinks_recreated_when_not_following(tmp_path: Path, make_tree) -> None:
    src = make_tree(tmp_path / "src", {"oldproject.txt": "oldproject"})
    os.symlink("oldproject.txt", src / "link.txt")
    dst = tmp_path / "dst"

    assert copy(src, dst, {"oldproject": "newproject"}, CopyOptions(follow_links=False))
    assert (dst / "link.txt").is_symlink()
    assert os.readlink(dst / "link.txt") == "newproject.txt"
    assert (dst / "link.txt").read_text() == "newproject"


def test_symlink_loop_fails_copy(tmp_path: Path, make_tree) -> None:
    src = make_tree(tmp_path / "src", {"sub": {}})
    os.symlink("..", src / "sub" / "loop")
    assert not copy(src, tmp_path / "dst", {})
    assert not (tmp_path / "dst").exists()


def test_logs_written(maven_project: Path, tmp_path: Path) -> None:
    log_dir = tmp_path / "logs"
    plan = plan_copy(maven_project, tmp_path / "newproject", {"oldproject": "newproject"},
                     CopyOptions(log_dir=log_dir))
    result = execute_copy(plan)
    assert result.ok

    plan_log = json.loads(next(log_dir.glob("copy_plan_*.json")).read_text())
    result_log = json.loads(next(log_dir.glob("copy_result_*.json")).read_text())
    assert plan_log["map"] == {"oldproject": "newproject"}
    assert plan_log["total_ops"] == plan.total_count
    assert result_log["ok"] is True
    assert result_log["failed"] is None
    assert result_log["completed_count"] == plan.total_count
    assert [op["kind"] for op in result_log["completed"]][0] == NodeKind.DIRECTORY.value


def test_copy_reports_io_failure_mid_copy(tmp_path: Path, make_tree, caplog) -> None:
    src = make_tree(tmp_path / "src", {"a.txt": "old", "b.bin": b"\xff\xfe\xfa", "c.txt": "old"})
    dst = tmp_path / "dst"
    caplog.set_level(logging.INFO, logger="core")

    assert not copy(src, dst, {"old": "new"})

    assert (dst / "a.txt").read_text() == "new"
    assert not (dst / "c.txt").exists()
    errors = [r for r in caplog.records if r.levelno == logging.ERROR]
    assert len(errors) == 1
    assert str(src / "b.bin") in errors[0].getMessage()


def test_copy_returns_false_when_log_dir_unusable(maven_project: Path, tmp_path: Path, caplog) -> None:
    log_dir = tmp_path / "logs"
    log_dir.write_text("not a directory")
    caplog.set_level(logging.ERROR, logger="core")

    assert not copy(maven_project, tmp_path / "newproject", {"oldproject": "newproject"},
                    CopyOptions(log_dir=log_dir))
    assert any(r.levelno == logging.ERROR for r in caplog.records)


def test_copy_returns_false_when_progress_callback_raises(maven_project: Path, tmp_path: Path, caplog) -> None:
    def progress(current, total, message):
        raise RuntimeError("boom")

    caplog.set_level(logging.ERROR, logger="core")
    assert not copy(maven_project, tmp_path / "newproject", {}, progress_callback=progress)
    assert any(r.exc_info and "boom" in str(r.exc_info[1]) for r in caplog.records)
