__version__ = "0.1.0"

from .cert_parser import parse_cert, parse_cert_file
from .errors import (
    CertificateError,
    DecodeError,
    InvalidArgumentError,
    MalformedAltNameError,
    MalformedNameError,
    MalformedTimeError,
    UnknownAlgorithmError,
)
from .models import CertificateRecord, PublicKeyInfo, RSAParameters
from .names import DistinguishedName
