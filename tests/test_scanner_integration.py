import csv
import json
from unittest.mock import patch

from x509fields.errors import DecodeError
from x509fields.scanner import main, run_parse


def _write_inputs(tmp_path, make_pem):
    certs = tmp_path / "certs"
    certs.mkdir()
    (certs / "a.pem").write_text(make_pem(serial=0x0ABB), encoding="utf-8")
    (certs / "b.crt").write_text(make_pem(), encoding="utf-8")
    (certs / "c.pem").write_text("garbage", encoding="utf-8")
    (certs / "notes.txt").write_text("ignored", encoding="utf-8")
    return certs


def test_run_parse_collects_records_and_errors(tmp_path, make_pem):
    certs = _write_inputs(tmp_path, make_pem)
    out_json = str(tmp_path / "out" / "out.json")
    out_csv = str(tmp_path / "out" / "out.csv")
    results = run_parse([str(certs)], out_json, out_csv)
    assert len(results) == 3
    assert results[0]["cert"]["serial"] == "0ABB"
    assert "error" in results[2]

    data = json.loads((tmp_path / "out" / "out.json").read_text(encoding="utf-8"))
    assert data[0]["cert"]["notBefore"].startswith("2020-01-01")
    with open(out_csv, encoding="utf-8", newline="") as fh:
        rows = list(csv.DictReader(fh))
    assert [r["subject_cn"] for r in rows] == ["example.test", "example.test", ""]


@patch("x509fields.scanner.parse_cert_file", side_effect=DecodeError("Unable to parse certificate."))
def test_run_parse_mocked_failure(parse_mock, tmp_path):
    p = tmp_path / "x.pem"
    p.write_text("whatever", encoding="utf-8")
    results = run_parse([str(p)])
    assert results == [{"file": str(p), "error": "Unable to parse certificate."}]
    parse_mock.assert_called_once_with(str(p))


def test_main_prints_and_returns_status(tmp_path, make_pem, capsys):
    good = tmp_path / "good.pem"
    good.write_text(make_pem(), encoding="utf-8")
    assert main([str(good)]) == 0
    out = capsys.readouterr().out
    assert "commonName: example.test" in out
    assert "Sig alg: sha256WithRSAEncryption" in out

    certs = _write_inputs(tmp_path, make_pem)
    assert main([str(certs), "--out-json", str(tmp_path / "r.json"), "--normalize-keys"]) == 1
