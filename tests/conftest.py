import datetime
from datetime import timezone

import pytest
from cryptography import x509
from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import ec, rsa
from cryptography.x509.oid import NameOID

NOT_BEFORE = datetime.datetime(2020, 1, 1, tzinfo=timezone.utc)
NOT_AFTER = datetime.datetime(2030, 1, 1, tzinfo=timezone.utc)


@pytest.fixture(scope="session")
def rsa_key():
    return rsa.generate_private_key(public_exponent=65537, key_size=2048)


@pytest.fixture(scope="session")
def ec_key():
    return ec.generate_private_key(ec.SECP256R1())


def default_name(cn=u"example.test", org=u"Test Org"):
    return x509.Name([
        x509.NameAttribute(NameOID.COUNTRY_NAME, u"US"),
        x509.NameAttribute(NameOID.ORGANIZATION_NAME, org),
        x509.NameAttribute(NameOID.COMMON_NAME, cn),
    ])


def build_cert(key, subject=None, issuer=None, serial=None, extensions=(),
               not_before=NOT_BEFORE, not_after=NOT_AFTER):
    subject = subject or default_name()
    builder = x509.CertificateBuilder().subject_name(subject).issuer_name(
        issuer or subject
    ).public_key(
        key.public_key()
    ).serial_number(
        serial if serial is not None else x509.random_serial_number()
    ).not_valid_before(not_before).not_valid_after(not_after)
    for value, critical in extensions:
        builder = builder.add_extension(value, critical=critical)
    return builder.sign(key, hashes.SHA256())


def to_pem(cert) -> str:
    return cert.public_bytes(serialization.Encoding.PEM).decode("ascii")


@pytest.fixture
def make_pem(rsa_key):
    def _make(key=None, **kwargs):
        return to_pem(build_cert(key or rsa_key, **kwargs))
    return _make
