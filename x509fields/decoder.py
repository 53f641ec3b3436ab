from typing import List, Tuple

from asn1crypto import x509 as asn1_x509
from cryptography import x509
from cryptography.hazmat.primitives import serialization

from .altnames import AlternativeNameEntry, alt_name_entries
from .errors import DecodeError


class DecodedCertificate:
    '''
    Read-only accessors over one decoded certificate.

    Wraps the cryptography certificate object; the raw validity text comes
    from an asn1crypto view of the same DER bytes, built on first use.
    '''

    def __init__(self, cert: x509.Certificate):
        self._cert = cert
        self._der = cert.public_bytes(serialization.Encoding.DER)
        self._asn1 = None

    @property
    def der(self) -> bytes:
        return self._der

    @property
    def version(self) -> int:
        try:
            return self._cert.version.value
        except x509.InvalidVersion as e:
            raise DecodeError(f"Unsupported certificate version: {e}") from e

    @property
    def subject_entries(self) -> List[x509.NameAttribute]:
        return list(self._cert.subject)

    @property
    def issuer_entries(self) -> List[x509.NameAttribute]:
        return list(self._cert.issuer)

    @property
    def subject_der(self) -> bytes:
        return self._cert.subject.public_bytes()

    @property
    def serial_number(self) -> int:
        return self._cert.serial_number

    def validity_text(self) -> Tuple[Tuple[str, str], Tuple[str, str]]:
        """((kind, text), (kind, text)) for notBefore and notAfter, kind being utc_time or general_time."""
        if self._asn1 is None:
            self._asn1 = asn1_x509.Certificate.load(self._der)
        try:
            validity = self._asn1["tbs_certificate"]["validity"]
            out = []
            for field in ("not_before", "not_after"):
                t = validity[field]
                out.append((t.name, t.chosen.contents.decode("ascii", errors="replace")))
        except ValueError as e:
            raise DecodeError(f"Unable to read validity: {e}") from e
        return out[0], out[1]

    @property
    def signature_algorithm_oid(self) -> x509.ObjectIdentifier:
        return self._cert.signature_algorithm_oid

    @property
    def public_key_algorithm_oid(self) -> x509.ObjectIdentifier:
        return self._cert.public_key_algorithm_oid

    def public_key(self):
        try:
            return self._cert.public_key()
        except ValueError as e:
            raise DecodeError(f"Unable to load public key: {e}") from e

    @property
    def extensions(self) -> x509.Extensions:
        try:
            return self._cert.extensions
        except x509.DuplicateExtension as e:
            raise DecodeError(f"Duplicate extension {e.oid.dotted_string}.") from e
        except ValueError as e:
            raise DecodeError(f"Unable to parse extensions: {e}") from e

    def alt_name_entries(self) -> List[AlternativeNameEntry]:
        try:
            ext = self.extensions.get_extension_for_class(x509.SubjectAlternativeName)
        except x509.ExtensionNotFound:
            return []
        return alt_name_entries(ext.value)


def load_certificate(pem: str) -> DecodedCertificate:
    try:
        cert = x509.load_pem_x509_certificate(pem.encode("utf-8"))
    except x509.InvalidVersion as e:
        raise DecodeError(f"Unsupported certificate version: {e}") from e
    except ValueError as e:
        raise DecodeError("Unable to parse certificate.") from e
    return DecodedCertificate(cert)
