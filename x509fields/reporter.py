from typing import Any, Dict, List

from .utils import save_csv, save_json

SUMMARY_FIELDS = ["file", "subject_cn", "issuer_cn", "serial", "not_after", "signature_algorithm", "fingerprint", "error"]


def summary_row(entry: Dict[str, Any]) -> Dict[str, Any]:
    cert = entry.get("cert") or {}
    return {
        "file": entry.get("file"),
        "subject_cn": (cert.get("subject") or {}).get("commonName", ""),
        "issuer_cn": (cert.get("issuer") or {}).get("commonName", ""),
        "serial": cert.get("serial", ""),
        "not_after": cert.get("notAfter", ""),
        "signature_algorithm": cert.get("signatureAlgorithm", ""),
        "fingerprint": cert.get("fingerPrint", ""),
        "error": entry.get("error", ""),
    }


def produce_outputs(results: List[Dict[str, Any]], out_json: str = None, out_csv: str = None):
    if out_json:
        save_json(results, out_json)
    if out_csv:
        save_csv([summary_row(r) for r in results], out_csv, SUMMARY_FIELDS)
