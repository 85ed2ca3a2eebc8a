"""Unit tests for artifact output."""

from k8s_pipeline_gen.helpers.output_writer import write_artifacts


def test_writes_nested_paths(tmp_path):
    root = tmp_path / "pipeline"
    written = write_artifacts(
        root, {"Jenkinsfile": "pipeline {}\n", "k8s/dev/service.yaml": "kind: Service\n"}
    )

    assert written == [root / "Jenkinsfile", root / "k8s" / "dev" / "service.yaml"]
    assert (root / "Jenkinsfile").read_text() == "pipeline {}\n"
    assert (root / "k8s" / "dev" / "service.yaml").read_text() == "kind: Service\n"


def test_overwrites_existing_files(tmp_path):
    (tmp_path / "Jenkinsfile").write_text("old")

    write_artifacts(str(tmp_path), {"Jenkinsfile": "new"})

    assert (tmp_path / "Jenkinsfile").read_text() == "new"


def test_leaves_unrelated_files(tmp_path):
    (tmp_path / "README.md").write_text("keep")

    write_artifacts(tmp_path, {"buildspec.yml": "version: '0.2'\n"})

    assert (tmp_path / "README.md").read_text() == "keep"


def test_empty_mapping_creates_root(tmp_path):
    root = tmp_path / "empty"
    assert write_artifacts(root, {}) == []
    assert root.is_dir()
