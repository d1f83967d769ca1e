from pathlib import Path

import pytest

from atip_lint.infrastructure.gateways.filesystem_gateway import FileSystemGateway


@pytest.fixture
def tree(tmp_path: Path) -> Path:
    (tmp_path / "tools" / "nested").mkdir(parents=True)
    (tmp_path / "tools" / "b.json").write_text("{}", encoding="utf-8")
    (tmp_path / "tools" / "a.json").write_text("{}", encoding="utf-8")
    (tmp_path / "tools" / "nested" / "c.json").write_text("{}", encoding="utf-8")
    (tmp_path / "tools" / "notes.txt").write_text("", encoding="utf-8")
    return tmp_path


def test_directory_expands_to_sorted_json_files(tree: Path) -> None:
    files = FileSystemGateway().expand([str(tree / "tools")])

    assert files == [str(tree / "tools" / name) for name in ("a.json", "b.json", "nested/c.json")]


def test_glob_pattern(tree: Path) -> None:
    files = FileSystemGateway().expand([str(tree / "tools" / "*.json")])

    assert [Path(f).name for f in files] == ["a.json", "b.json"]


def test_recursive_glob(tree: Path) -> None:
    files = FileSystemGateway().expand([str(tree / "**" / "c.json")])

    assert files == [str(tree / "tools" / "nested" / "c.json")]


def test_missing_literal_path_is_kept(tree: Path) -> None:
    missing = str(tree / "missing.json")

    assert FileSystemGateway().expand([missing]) == [missing]


def test_duplicates_dropped_and_pattern_order_kept(tree: Path) -> None:
    b = str(tree / "tools" / "b.json")

    files = FileSystemGateway().expand([b, str(tree / "tools")])

    assert files[0] == b
    assert files.count(b) == 1
    assert len(files) == 3


def test_ignore_patterns(tree: Path) -> None:
    files = FileSystemGateway().expand([str(tree / "tools")], ignore=["**/nested/**"])

    assert [Path(f).name for f in files] == ["a.json", "b.json"]


def test_read_and_write_utf8(tmp_path: Path) -> None:
    gateway = FileSystemGateway()
    target = str(tmp_path / "out.json")

    gateway.write_text(target, '{"name": "café"}')

    assert gateway.read_text(target) == '{"name": "café"}'


def test_read_missing_file_raises(tmp_path: Path) -> None:
    with pytest.raises(OSError):
        FileSystemGateway().read_text(str(tmp_path / "missing.json"))
