"""Integration test: raw CSV extracts in, CSV/JSON artifacts out."""
import json

import pandas as pd

from condexp.data.meps_processor import process_and_save

FYC = """DUPERSID,VARSTR,VARPSU,PERWT18F,TOTEXP18,OBVEXP18,OPTEXP18,ERTEXP18,IPTEXP18,IPNGTD18
P1,1,1,1000,2600,100,0,0,2000,3
P2,1,2,2000,300,50,0,0,0,0
P3,2,1,1500,5200,0,0,0,5000,2
"""

CONDITIONS = """DUPERSID,CONDIDX,CCSR1X,CCSR2X,CCSR3X
P1,C1,NVS010,,
P2,C2,NVS010,,
P2,C3,CIR007,NVS010,
P3,C4,CIR007,-1,-1
"""

CLNK = """DUPERSID,CONDIDX,EVNTIDX,EVENTYPE
P1,C1,E1,1
P2,C2,E1,1
P2,C3,E1,1
P1,C1,S1,4
P3,C4,S2,4
"""

OB = """DUPERSID,EVNTIDX,OBXP18X
P1,E1,100
P2,E2,50
"""

IP = """DUPERSID,EVNTIDX,IPXP18X,NUMNIGHX
P1,S1,2000,3
P3,S2,5000,2
"""


def _write_extracts(data_dir):
    for name, text in [
        ("h209.csv", FYC), ("h207.csv", CONDITIONS), ("h206if1.csv", CLNK),
        ("h206g.csv", OB), ("h206d.csv", IP),
    ]:
        (data_dir / name).write_text(text)


class TestProcessAndSave:
    """Tests for the full run."""

    def test_writes_artifacts(self, tmp_path):
        """Comprehensive CSV, per-category CSVs and the summary are written."""
        data_dir = tmp_path / "raw"
        out_dir = tmp_path / "out"
        data_dir.mkdir()
        _write_extracts(data_dir)

        process_and_save(data_dir=data_dir, output_dir=out_dir, target_code="NVS010", year=2018)

        for name in ("comprehensive_nvs010.csv", "ob_person_nvs010.csv",
                     "ip_person_nvs010.csv", "summary_nvs010.json"):
            assert (out_dir / name).exists(), name

    def test_comprehensive_values(self, tmp_path):
        """Output matches the hand-computed record."""
        data_dir = tmp_path / "raw"
        data_dir.mkdir()
        _write_extracts(data_dir)

        comprehensive, summary = process_and_save(
            data_dir=data_dir, output_dir=tmp_path / "out", target_code="NVS010", year=2018
        )
        comp = comprehensive.set_index("dupersid")
        assert len(comp) == 3
        assert comp.loc["P1", "ob_cond_exp"] == 100.0
        assert comp.loc["P1", "ip_cond_nights"] == 3.0
        assert comp.loc["P2", "ob_cond_exp"] == 0.0
        assert comp["cond_present"].to_dict() == {"P1": 1, "P2": 1, "P3": 0}
        assert summary["n_with_condition"] == 2

    def test_summary_json(self, tmp_path):
        """Summary JSON lists an estimate per column and subgroup."""
        data_dir = tmp_path / "raw"
        out_dir = tmp_path / "out"
        data_dir.mkdir()
        _write_extracts(data_dir)

        process_and_save(data_dir=data_dir, output_dir=out_dir, target_code="NVS010", year=2018)

        with open(out_dir / "summary_nvs010.json") as f:
            summary = json.load(f)
        assert summary["target_code"] == "NVS010"
        assert summary["n_persons"] == 3
        variables = {e["variable"] for e in summary["estimates"]}
        assert {"ob_cond_exp", "ip_cond_exp", "ip_cond_nights"} <= variables

        written = pd.read_csv(out_dir / "comprehensive_nvs010.csv")
        assert len(written) == 3
        assert not written.select_dtypes("number").isna().any().any()

    def test_summary_valid_json_without_matches(self, tmp_path):
        """A code nobody has writes null means, not a bare NaN token."""
        data_dir = tmp_path / "raw"
        out_dir = tmp_path / "out"
        data_dir.mkdir()
        _write_extracts(data_dir)

        process_and_save(data_dir=data_dir, output_dir=out_dir, target_code="XXX999", year=2018)

        text = (out_dir / "summary_xxx999.json").read_text()
        assert "NaN" not in text
        summary = json.loads(text)
        means = {(e["variable"], e["subgroup"]): e["mean"] for e in summary["estimates"]}
        assert means[("ob_cond_exp", "cond_present")] is None
        assert means[("ob_cond_exp", "all")] == 0.0
