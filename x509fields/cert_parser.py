import enum
import logging
from pathlib import Path
from typing import Any

from .altnames import extract_alt_names
from .decoder import load_certificate
from .errors import InvalidArgumentError
from .extensions import render_extensions
from .formatters import fingerprint, parse_asn1_time, serial_hex, signature_algorithm_name, subject_hash
from .models import CertificateRecord
from .names import extract_name
from .pubkey import extract_public_key

LOG = logging.getLogger("x509fields.cert_parser")


class ParseState(enum.Enum):
    START = "start"
    DECODED = "decoded"
    VERSION_OK = "version"
    NAMES_OK = "names"
    SERIAL_OK = "serial"
    DATES_OK = "dates"
    HASH_OK = "subject-hash"
    SIG_ALG_OK = "signature-algorithm"
    FINGERPRINT_OK = "fingerprint"
    PUBKEY_OK = "public-key"
    ALT_NAMES_OK = "alt-names"
    EXTENSIONS_OK = "extensions"
    DONE = "done"


def check_argument(pem: Any) -> str:
    if pem is None:
        raise InvalidArgumentError("Must provide a certificate string.")
    if not isinstance(pem, str):
        raise InvalidArgumentError("Certificate must be a string.")
    if len(pem) == 0:
        raise InvalidArgumentError("Certificate argument provided, but left blank.")
    return pem


def parse_cert(pem: str = None) -> CertificateRecord:
    '''
    Parse a PEM encoded certificate into a CertificateRecord.

    Fields are read in a fixed order and the first failure propagates as a
    CertificateError subclass; nothing partial is returned.
    '''
    pem = check_argument(pem)
    state = ParseState.START
    try:
        handle = load_certificate(pem)
        state = ParseState.DECODED

        version = handle.version
        state = ParseState.VERSION_OK

        subject = extract_name(handle.subject_entries)
        issuer = extract_name(handle.issuer_entries)
        state = ParseState.NAMES_OK

        serial = serial_hex(handle.serial_number)
        state = ParseState.SERIAL_OK

        (nb_kind, nb_text), (na_kind, na_text) = handle.validity_text()
        not_before = parse_asn1_time(nb_text, nb_kind)
        not_after = parse_asn1_time(na_text, na_kind)
        state = ParseState.DATES_OK

        name_hash = subject_hash(handle.subject_der)
        state = ParseState.HASH_OK

        sig_alg = signature_algorithm_name(handle.signature_algorithm_oid)
        state = ParseState.SIG_ALG_OK

        fp = fingerprint(handle.der)
        state = ParseState.FINGERPRINT_OK

        public_key = extract_public_key(handle)
        state = ParseState.PUBKEY_OK

        alt_names = extract_alt_names(handle.alt_name_entries())
        state = ParseState.ALT_NAMES_OK

        extensions = render_extensions(handle.extensions)
        state = ParseState.EXTENSIONS_OK
    except Exception as e:
        LOG.debug(f"Certificate parse failed after state {state.value}: {e}")
        raise

    record = CertificateRecord(
        version=version,
        subject=subject,
        issuer=issuer,
        serial=serial,
        not_before=not_before,
        not_after=not_after,
        subject_hash=name_hash,
        signature_algorithm=sig_alg,
        fingerprint=fp,
        public_key=public_key,
        alt_names=alt_names,
        extensions=extensions,
    )
    LOG.debug(f"Parsed certificate {fp} ({ParseState.DONE.value})")
    return record


def parse_cert_file(path: str) -> CertificateRecord:
    p = Path(path)
    if not p.exists():
        raise FileNotFoundError(f"Certificate file not found: {path}")
    return parse_cert(p.read_text(encoding="utf-8"))
