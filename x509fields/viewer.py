from typing import Any, Dict


def _print_name(label: str, name: Dict[str, str]):
    print(f"  {label}:")
    for k, v in (name or {}).items():
        print(f"    {k}: {v}")


def print_record(entry: Dict[str, Any]):
    print("=" * 80)
    print(f"File: {entry.get('file')}")
    if entry.get("error"):
        print("ERROR:", entry["error"])
        return
    cert = entry.get("cert") or {}
    print("Certificate:")
    print("  Version:", cert.get("version"))
    _print_name("Subject", cert.get("subject"))
    _print_name("Issuer", cert.get("issuer"))
    print("  Serial:", cert.get("serial"))
    print("  Not before:", cert.get("notBefore"))
    print("  Not after:", cert.get("notAfter"))
    print("  Subject hash:", cert.get("subjectHash"))
    print("  Sig alg:", cert.get("signatureAlgorithm"))
    print("  SHA1 fingerprint:", cert.get("fingerPrint"))
    pub = cert.get("publicKey") or {}
    print("  Pubkey:", pub.get("algorithm"), pub.get("bitSize", ""))
    print("  SANs:", ", ".join(cert.get("altNames") or []))
    print("Extensions:")
    exts = cert.get("extensions") or {}
    if not exts:
        print("  None")
    for name, text in exts.items():
        lines = text.splitlines() or [""]
        print(f"  {name}: {lines[0]}")
        for line in lines[1:]:
            print(f"      {line}")
    print()
