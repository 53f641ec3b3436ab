import enum
import logging
from dataclasses import dataclass
from typing import Callable, Dict, Iterable, List

from asn1crypto import core
from cryptography import x509
from cryptography.x509.oid import AuthorityInformationAccessOID, ExtendedKeyUsageOID, SubjectInformationAccessOID

from .formatters import colon_hex, serial_hex
from .oids import display_name

LOG = logging.getLogger("x509fields.extensions")

_LINE_BREAKS = ("\n", "\r")

_KEY_USAGE = (
    ("digital_signature", "Digital Signature"),
    ("content_commitment", "Non Repudiation"),
    ("key_encipherment", "Key Encipherment"),
    ("data_encipherment", "Data Encipherment"),
    ("key_agreement", "Key Agreement"),
    ("key_cert_sign", "Certificate Sign"),
    ("crl_sign", "CRL Sign"),
)

_EKU_NAMES = {
    ExtendedKeyUsageOID.SERVER_AUTH: "TLS Web Server Authentication",
    ExtendedKeyUsageOID.CLIENT_AUTH: "TLS Web Client Authentication",
    ExtendedKeyUsageOID.CODE_SIGNING: "Code Signing",
    ExtendedKeyUsageOID.EMAIL_PROTECTION: "E-mail Protection",
    ExtendedKeyUsageOID.TIME_STAMPING: "Time Stamping",
    ExtendedKeyUsageOID.OCSP_SIGNING: "OCSP Signing",
    ExtendedKeyUsageOID.ANY_EXTENDED_KEY_USAGE: "Any Extended Key Usage",
}

_ACCESS_METHODS = {
    AuthorityInformationAccessOID.OCSP: "OCSP",
    AuthorityInformationAccessOID.CA_ISSUERS: "CA Issuers",
    SubjectInformationAccessOID.CA_REPOSITORY: "CA Repository",
}


class RenderKind(enum.Enum):
    RENDERED = "rendered"
    RAW = "raw"


@dataclass(frozen=True)
class RenderedValue:
    kind: RenderKind
    text: str


def trim(text: str) -> str:
    """Strip every leading and trailing CR/LF; a trimmed string trims to itself."""
    start, end = 0, len(text)
    while start < end and text[start] in _LINE_BREAKS:
        start += 1
    while end > start and text[end - 1] in _LINE_BREAKS:
        end -= 1
    return text[start:end]


def normalize_key(name: str) -> str:
    """'X509v3 Basic Constraints' -> 'basicConstraints'."""
    key = name.replace("X509v3", "").replace(" ", "")
    return key[:1].lower() + key[1:]


def general_name_text(gn: x509.GeneralName) -> str:
    if isinstance(gn, x509.DNSName):
        return f"DNS:{gn.value}"
    if isinstance(gn, x509.RFC822Name):
        return f"email:{gn.value}"
    if isinstance(gn, x509.UniformResourceIdentifier):
        return f"URI:{gn.value}"
    if isinstance(gn, x509.IPAddress):
        return f"IP Address:{gn.value}"
    if isinstance(gn, x509.DirectoryName):
        return f"DirName:{gn.value.rfc4514_string()}"
    if isinstance(gn, x509.RegisteredID):
        return f"Registered ID:{display_name(gn.value)}"
    if isinstance(gn, x509.OtherName):
        return f"othername:{display_name(gn.type_id)}:<unsupported>"
    return str(gn)


def _general_names(names: Iterable[x509.GeneralName]) -> str:
    return ", ".join(general_name_text(gn) for gn in names)


def _basic_constraints(value: x509.BasicConstraints) -> str:
    text = "CA:TRUE" if value.ca else "CA:FALSE"
    if value.path_length is not None:
        text += f", pathlen:{value.path_length}"
    return text


def _key_usage(value: x509.KeyUsage) -> str:
    usages = [label for attr, label in _KEY_USAGE if getattr(value, attr)]
    if value.key_agreement:
        if value.encipher_only:
            usages.append("Encipher Only")
        if value.decipher_only:
            usages.append("Decipher Only")
    return ", ".join(usages)


def _extended_key_usage(value: x509.ExtendedKeyUsage) -> str:
    return ", ".join(_EKU_NAMES.get(oid, display_name(oid)) for oid in value)


def _subject_key_identifier(value: x509.SubjectKeyIdentifier) -> str:
    return colon_hex(value.digest)


def _authority_key_identifier(value: x509.AuthorityKeyIdentifier) -> str:
    lines = []
    if value.key_identifier is not None:
        lines.append(f"keyid:{colon_hex(value.key_identifier)}")
    if value.authority_cert_issuer:
        lines.extend(general_name_text(gn) for gn in value.authority_cert_issuer)
    if value.authority_cert_serial_number is not None:
        lines.append(f"serial:{serial_hex(value.authority_cert_serial_number)}")
    return "\n".join(lines)


def _alternative_names(value) -> str:
    return _general_names(value)


def _access_descriptions(value) -> str:
    lines = []
    for desc in value:
        method = _ACCESS_METHODS.get(desc.access_method, display_name(desc.access_method))
        lines.append(f"{method} - {general_name_text(desc.access_location)}")
    return "\n".join(lines)


def _distribution_points(value) -> str:
    blocks = []
    for dp in value:
        lines = []
        if dp.full_name:
            lines.append("Full Name:")
            lines.extend(f"  {general_name_text(gn)}" for gn in dp.full_name)
        if dp.relative_name:
            lines.append("Relative Name:")
            lines.append(f"  {dp.relative_name.rfc4514_string()}")
        if dp.reasons:
            lines.append("Reasons: " + ", ".join(sorted(r.value for r in dp.reasons)))
        if dp.crl_issuer:
            lines.append("CRL Issuer:")
            lines.extend(f"  {general_name_text(gn)}" for gn in dp.crl_issuer)
        blocks.append("\n".join(lines))
    return "\n\n".join(blocks)


def _certificate_policies(value: x509.CertificatePolicies) -> str:
    lines: List[str] = []
    for policy in value:
        lines.append(f"Policy: {display_name(policy.policy_identifier)}")
        for qualifier in policy.policy_qualifiers or ():
            if isinstance(qualifier, str):
                lines.append(f"  CPS: {qualifier}")
                continue
            lines.append("  User Notice:")
            ref = qualifier.notice_reference
            if ref is not None:
                if ref.organization:
                    lines.append(f"    Organization: {ref.organization}")
                if ref.notice_numbers:
                    lines.append("    Number: " + ", ".join(str(n) for n in ref.notice_numbers))
            if qualifier.explicit_text:
                lines.append(f"    Explicit Text: {qualifier.explicit_text}")
    return "\n".join(lines)


def _policy_constraints(value: x509.PolicyConstraints) -> str:
    parts = []
    if value.require_explicit_policy is not None:
        parts.append(f"Require Explicit Policy:{value.require_explicit_policy}")
    if value.inhibit_policy_mapping is not None:
        parts.append(f"Inhibit Policy Mapping:{value.inhibit_policy_mapping}")
    return ", ".join(parts)


def _inhibit_any_policy(value: x509.InhibitAnyPolicy) -> str:
    return str(value.skip_certs)


def _name_constraints(value: x509.NameConstraints) -> str:
    lines = []
    if value.permitted_subtrees:
        lines.append("Permitted:")
        lines.extend(f"  {general_name_text(gn)}" for gn in value.permitted_subtrees)
    if value.excluded_subtrees:
        lines.append("Excluded:")
        lines.extend(f"  {general_name_text(gn)}" for gn in value.excluded_subtrees)
    return "\n".join(lines)


def _tls_feature(value: x509.TLSFeature) -> str:
    return ", ".join(feature.name for feature in value)


def _ocsp_no_check(value) -> str:
    return ""


def _precert_poison(value) -> str:
    return "NULL"


def _signed_certificate_timestamps(value) -> str:
    lines = []
    for sct in value:
        lines.append("Signed Certificate Timestamp:")
        lines.append(f"    Version   : {sct.version.name} (0x{sct.version.value:x})")
        lines.append(f"    Log ID    : {colon_hex(sct.log_id)}")
        lines.append(f"    Timestamp : {sct.timestamp.isoformat()}")
    return "\n".join(lines)


_RENDERERS: Dict[type, Callable[..., str]] = {
    x509.BasicConstraints: _basic_constraints,
    x509.KeyUsage: _key_usage,
    x509.ExtendedKeyUsage: _extended_key_usage,
    x509.SubjectKeyIdentifier: _subject_key_identifier,
    x509.AuthorityKeyIdentifier: _authority_key_identifier,
    x509.SubjectAlternativeName: _alternative_names,
    x509.IssuerAlternativeName: _alternative_names,
    x509.AuthorityInformationAccess: _access_descriptions,
    x509.SubjectInformationAccess: _access_descriptions,
    x509.CRLDistributionPoints: _distribution_points,
    x509.FreshestCRL: _distribution_points,
    x509.CertificatePolicies: _certificate_policies,
    x509.PolicyConstraints: _policy_constraints,
    x509.InhibitAnyPolicy: _inhibit_any_policy,
    x509.NameConstraints: _name_constraints,
    x509.TLSFeature: _tls_feature,
    x509.OCSPNoCheck: _ocsp_no_check,
    x509.PrecertPoison: _precert_poison,
    x509.PrecertificateSignedCertificateTimestamps: _signed_certificate_timestamps,
}


def raw_value_text(raw: bytes) -> str:
    """Hex of the extnValue OCTET STRING as DER (tag, length and contents)."""
    return colon_hex(core.OctetString(raw).dump())


def render_value(ext: x509.Extension) -> RenderedValue:
    renderer = _RENDERERS.get(type(ext.value))
    if renderer is not None:
        return RenderedValue(RenderKind.RENDERED, renderer(ext.value))
    return RenderedValue(RenderKind.RAW, raw_value_text(ext.value.public_bytes()))


def extension_text(ext: x509.Extension) -> str:
    rendered = render_value(ext)
    if rendered.kind is RenderKind.RENDERED:
        return trim(rendered.text)
    if rendered.kind is RenderKind.RAW:
        LOG.debug(f"No text rendering for extension {ext.oid.dotted_string}, using raw value")
        return trim(rendered.text)
    raise ValueError(f"Unhandled render kind {rendered.kind!r}")


def render_extensions(extensions: Iterable[x509.Extension]) -> Dict[str, str]:
    '''
    Display name -> trimmed text for every extension, in declaration order.

    A display name already taken by an earlier extension is stored under
    "<name> (<dotted oid>)" instead of overwriting it.
    '''
    out: Dict[str, str] = {}
    for ext in extensions:
        key = display_name(ext.oid)
        if key in out:
            alt = f"{key} ({ext.oid.dotted_string})"
            LOG.warning(f"Extension name {key!r} already present, storing {ext.oid.dotted_string} as {alt!r}")
            key = alt
        out[key] = extension_text(ext)
    return out
