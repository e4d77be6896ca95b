from __future__ import annotations

from pathlib import Path

import pytest

from embedkit.cli.main import main


@pytest.fixture(autouse=True)
def _isolated_cache(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.setenv("EMBEDKIT_CACHE_DIR", str(tmp_path / "cache"))
    monkeypatch.delenv("EMBEDKIT_DISABLE_DISK_CACHE", raising=False)


def _assets(tmp_path: Path) -> Path:
    src = tmp_path / "assets"
    (src / "css").mkdir(parents=True)
    (src / "index.html").write_text("<h1>hi</h1>", encoding="utf-8")
    (src / "css" / "site.css").write_text("body{}", encoding="utf-8")
    (src / "notes.tmp").write_text("scratch", encoding="utf-8")
    return src


def test_generate_then_extract(tmp_path: Path) -> None:
    src = _assets(tmp_path)
    out = tmp_path / "generated"

    code = main(["generate", str(src), "--namespace", "demo.assets", "--output", str(out), "--exclude", "*.tmp"])
    assert code == 0
    package_dir = out / "demo" / "assets"
    assert (package_dir / "resource_directory.py").exists()

    dest = tmp_path / "extracted" / "site.css"
    assert main(["extract", str(package_dir), "css/site.css", "-o", str(dest), "--strategy", "memory"]) == 0
    assert dest.read_text(encoding="utf-8") == "body{}"
    assert (tmp_path / "cache" / "demo_assets" / "css_site_css").exists()

    assert main(["inspect", str(package_dir)]) == 0
    assert main(["extract", str(package_dir), "notes.tmp", "-o", str(tmp_path / "x")]) == 1
    assert not (tmp_path / "x").exists()


def test_generate_without_namespace_fails(tmp_path: Path) -> None:
    src = _assets(tmp_path)
    out = tmp_path / "generated"

    assert main(["generate", str(src), "--output", str(out)]) == 1
    assert not out.exists()


def test_generate_without_roots_fails(tmp_path: Path) -> None:
    assert main(["generate", "--namespace", "demo.assets", "--output", str(tmp_path / "generated")]) == 1


def test_scan_lists_files(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    src = _assets(tmp_path)

    assert main(["scan", str(src), "--exclude", "*.tmp"]) == 0
    output = capsys.readouterr().out
    assert "index_html" in output
    assert "notes_tmp" not in output
