import re
from datetime import datetime, timezone

from asn1crypto import core
from cryptography.hazmat.primitives import hashes
from cryptography.x509 import ObjectIdentifier

from .errors import MalformedTimeError, UnknownAlgorithmError
from .oids import registry_name

_UTC_TIME = re.compile(r"(\d{2})(\d{2})(\d{2})(\d{2})(\d{2})(\d{2})?Z")
_GENERALIZED_TIME = re.compile(r"(\d{4})(\d{2})(\d{2})(\d{2})(\d{2})(\d{2})?(?:\.(\d{1,9}))?Z")

# universal string tags folded to UTF8String when hashing a name, with their codecs
_CANON_CODECS = {
    12: "utf-8",      # UTF8String
    19: "latin-1",    # PrintableString
    20: "latin-1",    # T61String
    22: "latin-1",    # IA5String
    26: "latin-1",    # VisibleString
    28: "utf-32-be",  # UniversalString
    30: "utf-16-be",  # BMPString
}
_SPACE = b" \t\n\v\f\r"


def serial_hex(value: int) -> str:
    """Uppercase hex in whole bytes with leading zero bytes dropped, e.g. 0x0ABB -> "0ABB"."""
    if value == 0:
        return "0"
    sign = "-" if value < 0 else ""
    value = abs(value)
    return sign + value.to_bytes((value.bit_length() + 7) // 8, "big").hex().upper()


def parse_asn1_time(text: str, kind: str = "utc_time") -> datetime:
    '''
    Parse the text of an ASN.1 UTCTime or GeneralizedTime into an aware UTC datetime.

    Two digit UTCTime years below 50 belong to the 2000s (RFC 5280).
    '''
    if not isinstance(text, str) or not text:
        raise MalformedTimeError(f"Empty or non-text time value: {text!r}", value=text)

    if kind == "utc_time":
        if len(text) not in (11, 13):
            raise MalformedTimeError(f"UTCTime has unexpected length {len(text)}: {text!r}", value=text)
        m = _UTC_TIME.fullmatch(text)
        if m is None:
            raise MalformedTimeError(f"Unparseable UTCTime: {text!r}", value=text)
        yy = int(m.group(1))
        year = 2000 + yy if yy < 50 else 1900 + yy
        fields = [int(g) for g in m.group(2, 3, 4, 5)]
        seconds = int(m.group(6) or 0)
        micros = 0
    elif kind == "general_time":
        if len(text) < 13:
            raise MalformedTimeError(f"GeneralizedTime too short: {text!r}", value=text)
        m = _GENERALIZED_TIME.fullmatch(text)
        if m is None:
            raise MalformedTimeError(f"Unparseable GeneralizedTime: {text!r}", value=text)
        year = int(m.group(1))
        fields = [int(g) for g in m.group(2, 3, 4, 5)]
        seconds = int(m.group(6) or 0)
        micros = int((m.group(7) or "0")[:6].ljust(6, "0"))
    else:
        raise MalformedTimeError(f"Unknown time encoding {kind!r}", value=text)

    month, day, hour, minute = fields
    try:
        return datetime(year, month, day, hour, minute, seconds, micros, tzinfo=timezone.utc)
    except ValueError as e:
        raise MalformedTimeError(f"Time out of range {text!r}: {e}", value=text) from e


def signature_algorithm_name(oid: ObjectIdentifier) -> str:
    name = registry_name(oid)
    if name is None:
        raise UnknownAlgorithmError(
            f"unable to find specified signature algorithm name ({oid.dotted_string}).",
            oid=oid.dotted_string)
    return name


def colon_hex(data: bytes) -> str:
    return ":".join(f"{b:02X}" for b in data)


def fingerprint(der_bytes: bytes, algorithm: hashes.HashAlgorithm = None) -> str:
    digest = hashes.Hash(algorithm or hashes.SHA1())
    digest.update(der_bytes)
    return colon_hex(digest.finalize())


class _AttributeTypeAndValue(core.Sequence):
    _fields = [
        ("type", core.ObjectIdentifier),
        ("value", core.Any),
    ]


class _RelativeName(core.SetOf):
    _child_spec = _AttributeTypeAndValue


class _RawName(core.SequenceOf):
    _child_spec = _RelativeName


def _canon_bytes(raw: bytes) -> bytes:
    raw = raw.strip(_SPACE)
    out = bytearray()
    i = 0
    while i < len(raw):
        b = raw[i]
        if b & 0x80:
            out.append(b)
            i += 1
        elif b in _SPACE:
            out.append(0x20)
            while i < len(raw) and raw[i] in _SPACE:
                i += 1
        else:
            out.append(ord(chr(b).lower()))
            i += 1
    return bytes(out)


def _canon_value(value_der: bytes) -> bytes:
    value = core.load(value_der, strict=False)
    codec = _CANON_CODECS.get(value.tag) if value.class_ == 0 else None
    if codec is None:
        return value_der
    text = value.contents.decode(codec, errors="replace")
    return core.UTF8String(_canon_bytes(text.encode("utf-8")).decode("utf-8")).dump()


def canonical_name_encoding(name_der: bytes) -> bytes:
    '''
    The canonical form OpenSSL hashes for X509_NAME_hash: every string value
    re-encoded as a lower-cased, space-collapsed UTF8String, each RDN a DER SET,
    and the RDNs concatenated without the outer SEQUENCE.
    '''
    sets = []
    for rdn in _RawName.load(name_der):
        entries = []
        for atv in rdn:
            oid = atv["type"].dump()
            entries.append(core.Sequence(contents=oid + _canon_value(atv["value"].dump())).dump())
        sets.append(core.SetOf(contents=b"".join(sorted(entries))).dump())
    return b"".join(sets)


def subject_hash(name_der: bytes) -> str:
    """Lowercase hex of the 32-bit OpenSSL name hash, without zero padding."""
    digest = hashes.Hash(hashes.SHA1())
    digest.update(canonical_name_encoding(name_der))
    value = int.from_bytes(digest.finalize()[:4], "little")
    return format(value, "x")
