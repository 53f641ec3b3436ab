import argparse
import logging
from typing import Any, Dict, List, Sequence

from . import __version__
from .cert_parser import parse_cert_file
from .errors import CertificateError
from .reporter import produce_outputs
from .utils import collect_pem_paths, set_verbose
from .viewer import print_record

LOG = logging.getLogger("x509fields.scanner")


def run_parse(paths: Sequence[str], out_json: str = None, out_csv: str = None,
              normalize_keys: bool = False) -> List[Dict[str, Any]]:
    files = collect_pem_paths(paths)
    results = []
    for f in files:
        LOG.info(f"Parsing {f}")
        try:
            record = parse_cert_file(str(f))
            entry = {"file": str(f), "cert": record.to_dict(normalize_keys=normalize_keys)}
        except (CertificateError, OSError) as e:
            LOG.error(f"Error parsing {f}: {e}")
            entry = {"file": str(f), "error": str(e)}
        results.append(entry)
    produce_outputs(results, out_json, out_csv)
    return results


def main(argv: Sequence[str] = None) -> int:
    parser = argparse.ArgumentParser(prog="x509fields", description="Describe PEM encoded X.509 certificates")
    parser.add_argument("paths", nargs="+", help="PEM files or directories of *.pem / *.crt files")
    parser.add_argument("--out-json", default=None, help="Write all records to this JSON file")
    parser.add_argument("--out-csv", default=None, help="Write a one-line-per-file CSV summary")
    parser.add_argument("--normalize-keys", action="store_true", help="Camel-case extension names")
    parser.add_argument("--print", dest="print_records", action="store_true", help="Print each record to stdout")
    parser.add_argument("--verbose", "-v", action="store_true", help="Debug logging")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    args = parser.parse_args(argv)
    set_verbose(args.verbose)
    results = run_parse(args.paths, args.out_json, args.out_csv, normalize_keys=args.normalize_keys)
    if args.print_records or not (args.out_json or args.out_csv):
        for r in results:
            print_record(r)
    return 1 if any(r.get("error") for r in results) else 0


if __name__ == "__main__":
    raise SystemExit(main())
