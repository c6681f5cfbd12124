"""Tests for the run_round entry point."""

import json
import textwrap

from src.settlement_engine.run_round import run_round

LOG = """
round,player,key,contribution
1,A,bid,6
1,B,bid,4
1,C,bid,10
1,D,bid,2
1,B,bid,4
2,A,bid,3
"""


def _write(tmp_path, name, content):
    path = tmp_path / name
    path.write_text(textwrap.dedent(content).lstrip(), encoding="utf-8")
    return path


class TestRunRound:
    def test_writes_outbox(self, tmp_path):
        log = _write(tmp_path, "log.csv", LOG)
        settings = _write(tmp_path, "settings.json", json.dumps({
            "subgroup_size": 2, "initial_coins": 10, "group_account_divider": 2,
        }))
        output = run_round(log, "1", settings, output_dir=tmp_path / "results")

        assert output == tmp_path / "results" / "outbox_1.json"
        with open(output, encoding="utf-8") as f:
            messages = json.load(f)
        assert {p: m["payoff"] for p, m in messages.items()} == {
            "A": 12, "B": 9, "C": 8, "D": 11,
        }
        assert messages["C"]["position"] == [0, 0]
        assert not (tmp_path / "results" / "round_1.json").exists()

    def test_persistence_enabled(self, tmp_path):
        log = _write(tmp_path, "log.csv", LOG)
        settings = _write(tmp_path, "settings.json", json.dumps({
            "subgroup_size": 2, "persistence_enabled": True,
        }))
        run_round(log, "1", settings, output_dir=tmp_path / "results")

        with open(tmp_path / "results" / "round_1.json", encoding="utf-8") as f:
            data = json.load(f)
        assert data["ranking"] == ["C", "A", "B", "D"]
        assert len(data["players"]) == 4

    def test_default_settings_empty_round(self, tmp_path):
        log = _write(tmp_path, "log.csv", LOG)
        output = run_round(log, "7", output_dir=tmp_path / "results")
        with open(output, encoding="utf-8") as f:
            assert json.load(f) == {}
