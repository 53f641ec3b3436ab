from dataclasses import dataclass, field
from datetime import datetime
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional, Tuple

from .extensions import normalize_key
from .names import DistinguishedName


@dataclass(frozen=True)
class RSAParameters:
    modulus_hex: str
    exponent: str
    bit_length: int


@dataclass(frozen=True)
class PublicKeyInfo:
    algorithm: str
    rsa: Optional[RSAParameters] = None

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {"algorithm": self.algorithm}
        if self.rsa is not None:
            out["e"] = self.rsa.exponent
            out["n"] = self.rsa.modulus_hex
            out["bitSize"] = self.rsa.bit_length
        return out


@dataclass(frozen=True)
class CertificateRecord:
    """Everything read out of one certificate. Built once per parse and never mutated."""

    version: int
    subject: DistinguishedName
    issuer: DistinguishedName
    serial: str
    not_before: datetime
    not_after: datetime
    subject_hash: str
    signature_algorithm: str
    fingerprint: str
    public_key: PublicKeyInfo
    alt_names: Tuple[str, ...] = ()
    extensions: Mapping[str, str] = field(default_factory=dict)

    def __post_init__(self):
        object.__setattr__(self, "alt_names", tuple(self.alt_names))
        object.__setattr__(self, "extensions", MappingProxyType(dict(self.extensions)))

    def to_dict(self, normalize_keys: bool = False) -> Dict[str, Any]:
        exts = dict(self.extensions)
        if normalize_keys:
            exts = {normalize_key(k): v for k, v in exts.items()}
        return {
            "version": self.version,
            "subject": self.subject.to_dict(),
            "issuer": self.issuer.to_dict(),
            "serial": self.serial,
            "notBefore": self.not_before,
            "notAfter": self.not_after,
            "subjectHash": self.subject_hash,
            "signatureAlgorithm": self.signature_algorithm,
            "fingerPrint": self.fingerprint,
            "publicKey": self.public_key.to_dict(),
            "altNames": list(self.alt_names),
            "extensions": exts,
        }
