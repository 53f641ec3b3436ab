import pytest
from cryptography import x509
from cryptography.x509.oid import AuthorityInformationAccessOID, ExtendedKeyUsageOID

from x509fields import extensions as ext_mod
from x509fields.extensions import (
    RenderKind,
    normalize_key,
    render_extensions,
    render_value,
    trim,
)


def _ext(value, critical=False):
    return x509.Extension(value.oid, critical, value)


@pytest.mark.parametrize("text,expected", [
    ("abc", "abc"),
    ("\nabc", "abc"),
    ("abc\r\n", "abc"),
    ("\r\n\r\nabc\n\r", "abc"),
    ("a\nb", "a\nb"),
    ("\n", ""),
    ("\r\n\r", ""),
    ("", ""),
])
def test_trim(text, expected):
    assert trim(text) == expected
    assert trim(trim(text)) == trim(text)


@pytest.mark.parametrize("name,expected", [
    ("X509v3 Basic Constraints", "basicConstraints"),
    ("Authority Information Access", "authorityInformationAccess"),
    ("subjectAltName", "subjectAltName"),
    ("", ""),
])
def test_normalize_key(name, expected):
    assert normalize_key(name) == expected


def test_render_basic_constraints():
    rendered = render_value(_ext(x509.BasicConstraints(ca=False, path_length=None)))
    assert rendered.kind is RenderKind.RENDERED
    assert rendered.text == "CA:FALSE"


def test_render_extended_key_usage():
    eku = x509.ExtendedKeyUsage([
        ExtendedKeyUsageOID.SERVER_AUTH,
        ExtendedKeyUsageOID.CLIENT_AUTH,
        x509.ObjectIdentifier("1.2.3.4"),
    ])
    assert render_value(_ext(eku)).text == (
        "TLS Web Server Authentication, TLS Web Client Authentication, 1.2.3.4"
    )


def test_render_key_identifiers():
    ski = x509.SubjectKeyIdentifier(b"\x01\xab\xff")
    assert render_value(_ext(ski)).text == "01:AB:FF"
    aki = x509.AuthorityKeyIdentifier(b"\x01\xab", None, None)
    assert render_value(_ext(aki)).text == "keyid:01:AB"


def test_render_authority_information_access():
    aia = x509.AuthorityInformationAccess([
        x509.AccessDescription(AuthorityInformationAccessOID.OCSP,
                               x509.UniformResourceIdentifier(u"http://ocsp.example.test")),
        x509.AccessDescription(AuthorityInformationAccessOID.CA_ISSUERS,
                               x509.UniformResourceIdentifier(u"http://ca.example.test/ca.crt")),
    ])
    assert render_value(_ext(aia)).text == (
        "OCSP - URI:http://ocsp.example.test\nCA Issuers - URI:http://ca.example.test/ca.crt"
    )


def test_render_certificate_policies():
    policies = x509.CertificatePolicies([
        x509.PolicyInformation(x509.ObjectIdentifier("2.23.140.1.2.1"), [u"https://cps.example.test"]),
    ])
    assert render_value(_ext(policies)).text == "Policy: 2.23.140.1.2.1\n  CPS: https://cps.example.test"


def test_unrecognized_extension_falls_back_to_raw():
    value = x509.UnrecognizedExtension(x509.ObjectIdentifier("1.2.3.4.5"), b"\x30\x00")
    rendered = render_value(_ext(value))
    assert rendered.kind is RenderKind.RAW
    assert rendered.text == "04:02:30:00"


def test_render_extensions_keeps_order_and_trims(monkeypatch):
    monkeypatch.setattr(ext_mod, "_RENDERERS", {
        **ext_mod._RENDERERS,
        x509.BasicConstraints: lambda v: "\r\nCA:TRUE\n\n",
    })
    exts = [
        _ext(x509.UnrecognizedExtension(x509.ObjectIdentifier("1.2.3.4.5"), b"")),
        _ext(x509.BasicConstraints(ca=True, path_length=None)),
    ]
    out = render_extensions(exts)
    assert list(out) == ["1.2.3.4.5", "basicConstraints"]
    assert out["basicConstraints"] == "CA:TRUE"
    assert out["1.2.3.4.5"] == "04:00"


def test_render_extensions_namespaces_colliding_names(monkeypatch, caplog):
    monkeypatch.setattr(ext_mod, "display_name", lambda oid: "sameName")
    exts = [
        _ext(x509.UnrecognizedExtension(x509.ObjectIdentifier("1.2.3.4.5"), b"a")),
        _ext(x509.UnrecognizedExtension(x509.ObjectIdentifier("1.2.3.4.6"), b"b")),
    ]
    with caplog.at_level("WARNING", logger="x509fields.extensions"):
        out = render_extensions(exts)
    assert out == {"sameName": "04:01:61", "sameName (1.2.3.4.6)": "04:01:62"}
    assert "already present" in caplog.text
