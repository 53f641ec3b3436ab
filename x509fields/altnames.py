import enum
from dataclasses import dataclass
from typing import Iterable, List

from cryptography import x509

from .errors import MalformedAltNameError


class AltNameKind(enum.Enum):
    DNS = "dns"
    OTHER = "other"


@dataclass(frozen=True)
class AlternativeNameEntry:
    kind: AltNameKind
    value: bytes
    declared_length: int


def alt_name_entries(general_names: Iterable[x509.GeneralName]) -> List[AlternativeNameEntry]:
    entries = []
    for gn in general_names:
        if isinstance(gn, x509.DNSName):
            raw = gn.value.encode("utf-8", errors="surrogateescape")
            entries.append(AlternativeNameEntry(AltNameKind.DNS, raw, len(raw)))
        else:
            entries.append(AlternativeNameEntry(AltNameKind.OTHER, b"", 0))
    return entries


def extract_alt_names(entries: Iterable[AlternativeNameEntry]) -> List[str]:
    """DNS names in order. A DNS value whose content stops short of its declared length is rejected."""
    names: List[str] = []
    for idx, entry in enumerate(entries):
        if entry.kind is not AltNameKind.DNS:
            continue
        content = entry.value.split(b"\x00", 1)[0]
        if len(content) != entry.declared_length or len(entry.value) != entry.declared_length:
            raise MalformedAltNameError("Malformed alternative names field.", index=idx)
        try:
            names.append(content.decode("utf-8"))
        except UnicodeDecodeError as e:
            raise MalformedAltNameError("Malformed alternative names field.", index=idx) from e
    return names
