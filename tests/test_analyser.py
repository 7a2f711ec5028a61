from pathlib import Path

from cpdetect.analyser import Analyser
from cpdetect.config import ScanConfig

from conftest import code_block


def write(root: Path, relative: str, lines: list) -> Path:
    path = root / relative
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text("\n".join(lines) + "\n")
    return path


def spans(cluster: dict) -> list:
    return [(o["file"], o["start_line"], o["end_line"]) for o in cluster["occurrences"]]


def make_tree(root: Path):
    shared = code_block("shared", 10)
    write(root, "a.py", ["# module a"] + code_block("a", 3) + shared[:5]
          + ["# explanatory comment"] + shared[5:] + code_block("a2", 2))
    write(root, "pkg/b.py", code_block("b", 5) + shared)
    write(root, "test/c.py", shared)


def test_detects_clone_across_comment_differences(tmp_path):
    make_tree(tmp_path)

    result = Analyser(ScanConfig(root=str(tmp_path), source_type="python")).analyse()

    assert len(result["clusters"]) == 1
    cluster = result["clusters"][0]
    assert cluster["line_count"] == 10
    assert spans(cluster) == [("a.py", 5, 15), ("pkg/b.py", 6, 15)]


def test_metrics(tmp_path):
    make_tree(tmp_path)

    result = Analyser(ScanConfig(root=str(tmp_path), source_type="python")).analyse()

    metrics = result["metrics"]
    assert metrics["total_files"] == 2
    assert metrics["skipped_files"] == 0
    assert metrics["total_lines"] == 15 + 15
    assert metrics["cluster_count"] == 1
    assert metrics["duplicated_lines"] == 20
    assert result["size_distribution"] == {"min": 10, "max": 10, "mean": 10.0, "median": 10.0}
    assert result["source_type"] == "python"
    assert result["config"]["ignore_folders"] == ["thirdparty", "test", "node_modules"]


def test_ignore_list_is_configurable(tmp_path):
    make_tree(tmp_path)

    config = ScanConfig(root=str(tmp_path), source_type="python", ignore_folders=())
    result = Analyser(config).analyse()

    assert spans(result["clusters"][0]) == [
        ("a.py", 5, 15), ("pkg/b.py", 6, 15), ("test/c.py", 1, 10),
    ]


def test_unreadable_file_is_skipped(tmp_path, caplog):
    make_tree(tmp_path)
    analyser = Analyser(ScanConfig(root=str(tmp_path), source_type="python"))

    index = analyser.build_index([tmp_path / "a.py", tmp_path / "missing.py"])

    assert list(index.files) == ["a.py"]
    assert analyser.skipped == ["missing.py"]
    assert "Skipping missing.py" in caplog.text


def test_parallel_workers_match_sequential(tmp_path):
    make_tree(tmp_path)
    write(tmp_path, "pkg/d.py", code_block("b", 5) + code_block("a", 3))

    sequential = Analyser(ScanConfig(root=str(tmp_path), source_type="python")).analyse()
    parallel = Analyser(ScanConfig(root=str(tmp_path), source_type="python", workers=2)).analyse()

    assert parallel["clusters"] == sequential["clusters"]
    assert parallel["metrics"] == sequential["metrics"]


def test_repeated_scans_are_identical(tmp_path):
    make_tree(tmp_path)
    config = ScanConfig(root=str(tmp_path), source_type="python", ignore_folders=())

    first = Analyser(config).analyse()
    second = Analyser(config).analyse()

    assert first["clusters"] == second["clusters"]


def test_top_result_limits_clusters_but_not_metrics(tmp_path):
    write(tmp_path, "a.py", code_block("x", 12) + code_block("a", 1) + code_block("y", 8))
    write(tmp_path, "b.py", code_block("y", 8) + code_block("b", 1) + code_block("x", 12))

    config = ScanConfig(root=str(tmp_path), source_type="python", list_top_result=1)
    result = Analyser(config).analyse()

    assert len(result["clusters"]) == 1
    assert result["clusters"][0]["line_count"] == 12
    assert result["metrics"]["cluster_count"] == 2


def test_empty_tree(tmp_path):
    result = Analyser(ScanConfig(root=str(tmp_path), source_type="java")).analyse()

    assert result["clusters"] == []
    assert result["metrics"]["total_files"] == 0
    assert result["size_distribution"] == {}
