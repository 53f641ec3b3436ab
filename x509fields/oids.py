from types import MappingProxyType
from typing import Optional, Union

from cryptography.x509 import ObjectIdentifier

# Field names missing from the cryptography OID registry.
MISSING_NAMES = MappingProxyType({
    "1.2.840.113533.7.65.0": "entrustVersionInfo",
    "1.3.6.1.4.1.311.60.2.1.1": "jurisdictionOfIncorpationLocalityName",
    "1.3.6.1.4.1.311.60.2.1.2": "jurisdictionOfIncorporationStateOrProvinceName",
    "1.3.6.1.4.1.311.60.2.1.3": "jurisdictionOfIncorporationCountryName",
})

_UNKNOWN = "Unknown OID"


def real_name(oid: str) -> str:
    return MISSING_NAMES.get(oid, oid)


def registry_name(oid: ObjectIdentifier) -> Optional[str]:
    name = oid._name
    if not name or name == _UNKNOWN:
        return None
    return name


def display_name(oid: Union[ObjectIdentifier, str]) -> str:
    """Registry name for ``oid``, falling back to the override table, then the dotted string."""
    if isinstance(oid, str):
        oid = ObjectIdentifier(oid)
    name = registry_name(oid)
    if name is not None:
        return name
    return real_name(oid.dotted_string)
