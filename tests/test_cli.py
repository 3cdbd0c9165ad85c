import json

from sdm.__main__ import main

CYCLIC = """\
projects:
  - id: A
    dependencies: [B]
  - id: B
    dependencies: [A]
  - id: C
"""

ACYCLIC = """\
projects:
  - id: Utils
  - id: App
    kind: Exe
    dependencies: [Utils]
"""


def _manifest(tmp_path, text, name="solution.sdm.yaml"):
    path = tmp_path / name
    path.write_text(text, encoding="utf-8")
    return str(path)


def test_cli_writes_outputs(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    manifest = _manifest(tmp_path, ACYCLIC)
    out = tmp_path / "out"

    code = main([manifest, "--output", str(out), "--format", "json", "-q"])

    assert code == 0
    data = json.loads((out / "graph.json").read_text(encoding="utf-8"))
    assert data["layers"] == [
        {"layer": 0, "projects": ["Utils"]},
        {"layer": 1, "projects": ["App"]},
    ]
    assert not (out / "build.sh").exists()


def test_cli_fail_on_cycles(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    manifest = _manifest(tmp_path, CYCLIC)
    out = str(tmp_path / "out")

    assert main([manifest, "--output", out, "-q"]) == 0
    assert main([manifest, "--output", out, "--fail-on-cycles", "-q"]) == 2


def test_cli_missing_source(tmp_path, monkeypatch, capsys):
    monkeypatch.chdir(tmp_path)

    assert main([str(tmp_path / "nope.yaml"), "-q"]) == 1
    assert "source not found" in capsys.readouterr().err


def test_cli_strict_ids(tmp_path, monkeypatch, capsys):
    monkeypatch.chdir(tmp_path)
    manifest = _manifest(tmp_path, "- id: A\n- id: A\n")
    out = str(tmp_path / "out")

    assert main([manifest, "--output", out, "-q"]) == 0
    assert main([manifest, "--output", out, "--strict-ids", "-q"]) == 1
    assert "duplicate project ids: A" in capsys.readouterr().err


def test_cli_verbose_summary(tmp_path, monkeypatch, capsys):
    monkeypatch.chdir(tmp_path)
    manifest = _manifest(tmp_path, CYCLIC)

    code = main([manifest, "--output", str(tmp_path / "out"), "--canonical-cycles"])

    assert code == 0
    stdout = capsys.readouterr().out
    assert "Solution Dependency Mapper" in stdout
    assert "Circular dependencies: 1" in stdout
    assert "A -> B -> A" in stdout
    assert "Unscheduled projects: 2" in stdout


def test_cli_directory_source_uses_its_config(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    project_dir = tmp_path / "solution"
    project_dir.mkdir()
    _manifest(project_dir, ACYCLIC, name="apps.sdm.yaml")
    (project_dir / "sdm.yaml").write_text(
        "output:\n  directory: reports\n  formats: [dot]\n", encoding="utf-8")

    assert main([str(project_dir), "-q"]) == 0
    assert (project_dir / "reports" / "graph.dot").exists()
