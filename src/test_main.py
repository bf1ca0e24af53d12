import json

from main import main

RECORDS = [
    {"id": 1, "name": "Taro", "birthDate": "1960-04-01", "spouseId": 2, "childrenIds": [3]},
    {"id": 2, "name": "Hanako", "birthDate": "1962-08-15", "spouseId": 1, "childrenIds": [3]},
    {"id": 3, "name": "Ichiro", "birthDate": "1990-11-30", "parentIds": [1, 2]},
]


def test_main_writes_graph_json(tmp_path, capsys):
    source = tmp_path / "family.json"
    source.write_text(json.dumps(RECORDS), encoding="utf-8")
    output = tmp_path / "graph.json"

    assert main([str(source), "-o", str(output), "--unit-spacing", "200"]) == 0

    data = json.loads(output.read_text(encoding="utf-8"))
    positions = {n["id"]: n["position"] for n in data["nodes"]}
    assert positions["person_2"] == {"x": 0.0, "y": 100.0}
    assert positions["person_1"] == {"x": -200.0, "y": 100.0}
    assert data["fully_resolved"] is True
    out = capsys.readouterr().out
    assert "No issues found" in out
    assert "Done!" in out


def test_main_reports_warnings(tmp_path, capsys):
    records = [dict(r) for r in RECORDS]
    records[1]["childrenIds"] = []
    source = tmp_path / "family.json"
    source.write_text(json.dumps(records), encoding="utf-8")

    assert main([str(source), "-o", str(tmp_path / "graph.json")]) == 0

    assert "Found 1 warnings" in capsys.readouterr().out


def test_main_rejects_bad_input(tmp_path, capsys):
    source = tmp_path / "family.json"
    source.write_text(json.dumps([{"id": 1, "name": "Nobody"}]), encoding="utf-8")

    assert main([str(source), "-o", str(tmp_path / "graph.json")]) == 1

    assert "Error:" in capsys.readouterr().err
    assert not (tmp_path / "graph.json").exists()


def test_main_reports_missing_file(tmp_path, capsys):
    assert main([str(tmp_path / "missing.json")]) == 1
    assert "Error:" in capsys.readouterr().err
