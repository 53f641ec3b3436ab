import json
import logging
from pathlib import Path
from typing import Any, Iterable, List

LOG = logging.getLogger("x509fields")
if not LOG.handlers:
    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(message)s"))
    LOG.addHandler(handler)
LOG.setLevel(logging.INFO)


def set_verbose(verbose: bool = True):
    LOG.setLevel(logging.DEBUG if verbose else logging.INFO)


def collect_pem_paths(paths: Iterable[str]) -> List[Path]:
    """Expand directories to the *.pem / *.crt files inside them, sorted."""
    found: List[Path] = []
    for path in paths:
        p = Path(path)
        if not p.exists():
            raise FileNotFoundError(f"Input not found: {path}")
        if p.is_dir():
            found.extend(sorted(q for q in p.iterdir() if q.suffix.lower() in (".pem", ".crt")))
        else:
            found.append(p)
    return found


def save_json(obj: Any, path: str):
    p = Path(path)
    p.parent.mkdir(parents=True, exist_ok=True)
    with open(p, "w", encoding="utf-8") as fh:
        json.dump(obj, fh, indent=2, default=str)


def save_csv(rows: Iterable[dict], path: str, fieldnames: list):
    import csv
    p = Path(path)
    p.parent.mkdir(parents=True, exist_ok=True)
    with open(p, "w", encoding="utf-8", newline="") as fh:
        writer = csv.DictWriter(fh, fieldnames=fieldnames)
        writer.writeheader()
        for r in rows:
            writer.writerow(r)
