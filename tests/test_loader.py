from __future__ import annotations

from pathlib import Path

import pytest

from stepgraph.loader import build_context, configure_registry, load_pipeline, locate_pipeline
from stepgraph.errors import PipelineFileError


PIPELINE = """
PROJECT = {"artifact": "Acme.Lib", "version": "2.0.0"}

def configure(steps, context):
    steps["publish"].depends_on("pack")
"""


def _write(tmp_path: Path, text: str, name: str = "stepgraph_pipeline.py") -> Path:
    path = tmp_path / name
    path.write_text(text, encoding="utf-8")
    return path


def test_load_pipeline_reads_configure_and_project(tmp_path: Path) -> None:
    loaded = load_pipeline(_write(tmp_path, PIPELINE))
    assert loaded.project == {"artifact": "Acme.Lib", "version": "2.0.0"}
    assert callable(loaded.configure)


def test_pipeline_function_name_is_accepted(tmp_path: Path) -> None:
    path = _write(tmp_path, "def pipeline(steps, context):\n    steps['x']\n")
    loaded = load_pipeline(path)
    ctx = build_context(loaded)
    assert configure_registry(loaded, ctx).names() == ["x"]
    assert ctx.version is None


def test_load_pipeline_missing_file(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError):
        load_pipeline(tmp_path / "nope.py")


def test_load_pipeline_rejects_non_python(tmp_path: Path) -> None:
    with pytest.raises(ValueError):
        load_pipeline(_write(tmp_path, "x", name="pipeline.txt"))


def test_load_pipeline_requires_configure(tmp_path: Path) -> None:
    with pytest.raises(TypeError, match="configure"):
        load_pipeline(_write(tmp_path, "PROJECT = {}\n"))


def test_load_pipeline_rejects_bad_project(tmp_path: Path) -> None:
    with pytest.raises(TypeError, match="PROJECT"):
        load_pipeline(_write(tmp_path, "PROJECT = 3\ndef configure(s, c):\n    pass\n"))


def test_build_context_defaults_to_pipeline_dir(tmp_path: Path, monkeypatch) -> None:
    monkeypatch.setenv("NUGET_LOCAL_REPO", "/feed")
    ctx = build_context(load_pipeline(_write(tmp_path, PIPELINE)))
    assert ctx.project_dir == tmp_path.resolve()
    assert ctx.version.artifact == "Acme.Lib"
    assert ctx.version.version == "2.0.0"
    assert ctx.env["NUGET_LOCAL_REPO"] == "/feed"


def test_command_line_values_win(tmp_path: Path) -> None:
    loaded = load_pipeline(_write(tmp_path, PIPELINE))
    other = tmp_path / "other"
    other.mkdir()
    ctx = build_context(loaded, project_dir=other, version="3.0.0")
    assert ctx.project_dir == other.resolve()
    assert ctx.version.artifact == "Acme.Lib"
    assert ctx.version.version == "3.0.0"


def test_artifact_without_version_is_rejected(tmp_path: Path) -> None:
    loaded = load_pipeline(_write(tmp_path, "def configure(s, c):\n    pass\n"))
    with pytest.raises(ValueError, match="together"):
        build_context(loaded, artifact="Acme.Lib")


def test_locate_pipeline_single_candidate(tmp_path: Path) -> None:
    _write(tmp_path, PIPELINE, name="release_pipeline.py")
    assert locate_pipeline(directory=tmp_path).name == "release_pipeline.py"


def test_locate_pipeline_none(tmp_path: Path) -> None:
    with pytest.raises(PipelineFileError, match="No pipeline file found") as exc_info:
        locate_pipeline(directory=tmp_path)
    assert "--pipeline" in exc_info.value.hint


def test_locate_pipeline_ambiguous(tmp_path: Path) -> None:
    _write(tmp_path, PIPELINE)
    _write(tmp_path, PIPELINE, name="release_pipeline.py")
    with pytest.raises(PipelineFileError) as exc_info:
        locate_pipeline(directory=tmp_path)
    assert str(exc_info.value).startswith(
        "Multiple pipeline files found: release_pipeline.py, stepgraph_pipeline.py"
    )


def test_locate_pipeline_explicit(tmp_path: Path) -> None:
    _write(tmp_path, PIPELINE)
    _write(tmp_path, PIPELINE, name="release_pipeline.py")
    assert locate_pipeline("release_pipeline", directory=tmp_path).name == "release_pipeline.py"
    assert locate_pipeline("release_pipeline.py", directory=tmp_path).name == "release_pipeline.py"
    with pytest.raises(PipelineFileError, match="not found: nightly"):
        locate_pipeline("nightly", directory=tmp_path)
