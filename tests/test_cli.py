from __future__ import annotations

import json

import pytest

from analyze import SnapshotError, load_snapshot, main
from pageperf.utils.storage import SettingsStore


@pytest.fixture
def snapshot_file(tmp_path, snapshot):
    path = tmp_path / "snapshot.json"
    path.write_text(json.dumps(snapshot), encoding="utf-8")
    return path


def test_load_snapshot(snapshot_file, snapshot) -> None:
    assert load_snapshot(snapshot_file) == snapshot


@pytest.mark.parametrize("content, message", [
    ("{oops", "not valid JSON"),
    ("[1, 2]", "expected a JSON object"),
    ('{"metrics": {}}', "needs both"),
    ('{"metrics": [], "resources": []}', "'metrics' must be an object"),
    ('{"metrics": {}, "resources": {}}', "'resources' must be a list"),
])
def test_load_snapshot_rejects_bad_files(tmp_path, content, message) -> None:
    path = tmp_path / "bad.json"
    path.write_text(content, encoding="utf-8")
    with pytest.raises(SnapshotError, match=message):
        load_snapshot(path)


def test_load_snapshot_missing_file(tmp_path) -> None:
    with pytest.raises(SnapshotError, match="cannot read"):
        load_snapshot(tmp_path / "absent.json")
    assert issubclass(SnapshotError, ValueError)


def test_json_output(store_home, snapshot_file, capsys) -> None:
    main([str(snapshot_file), "--json", "--level", "basic"])

    data = json.loads(capsys.readouterr().out)
    assert data["suggestionLevel"] == "basic"
    assert data["bottlenecks"][0]["severity"] == "high"


def test_output_file_and_session(store_home, snapshot_file, tmp_path, capsys) -> None:
    out = tmp_path / "report.json"
    result = main([str(snapshot_file), "--output", str(out), "--session", "nightly"])

    assert json.loads(out.read_text(encoding="utf-8"))["url"] == result.url
    assert (store_home / "sessions" / "nightly.json").exists()
    assert "Page Performance Report" in capsys.readouterr().out


def test_level_defaults_to_saved_setting(store_home, snapshot_file, capsys) -> None:
    SettingsStore().save({"suggestionLevel": "advanced"})
    result = main([str(snapshot_file), "--json"])
    assert result.suggestion_level == "advanced"


def test_bad_snapshot_exits_with_error(store_home, tmp_path, capsys) -> None:
    path = tmp_path / "bad.json"
    path.write_text("nope", encoding="utf-8")

    with pytest.raises(SystemExit) as exc:
        main([str(path)])

    assert exc.value.code == 1
    assert "Error" in capsys.readouterr().err


def test_snapshot_or_url_is_required(store_home) -> None:
    with pytest.raises(SystemExit) as exc:
        main([])
    assert exc.value.code == 2
