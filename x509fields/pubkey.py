from typing import Optional

from cryptography.hazmat.primitives.asymmetric import rsa
from cryptography.x509.oid import PublicKeyAlgorithmOID

from .errors import UnknownAlgorithmError
from .formatters import serial_hex
from .models import PublicKeyInfo, RSAParameters
from .oids import registry_name

RSA_KEY_OIDS = frozenset({
    PublicKeyAlgorithmOID.RSAES_PKCS1_v1_5,
    PublicKeyAlgorithmOID.RSASSA_PSS,
})


def rsa_parameters(key: rsa.RSAPublicKey) -> RSAParameters:
    numbers = key.public_numbers()
    n_bytes = (numbers.n.bit_length() + 7) // 8
    return RSAParameters(
        modulus_hex=serial_hex(numbers.n),
        exponent=str(numbers.e),
        bit_length=n_bytes * 8,
    )


def extract_public_key(handle) -> PublicKeyInfo:
    '''
    Algorithm name from the SubjectPublicKeyInfo OID, plus modulus, exponent
    and size for RSA keys. Other key types carry the name only.
    '''
    oid = handle.public_key_algorithm_oid
    name = registry_name(oid)
    if name is None:
        raise UnknownAlgorithmError(
            f"unable to find specified public key algorithm name ({oid.dotted_string}).",
            oid=oid.dotted_string)

    rsa_info: Optional[RSAParameters] = None
    if oid in RSA_KEY_OIDS:
        key = handle.public_key()
        if isinstance(key, rsa.RSAPublicKey):
            rsa_info = rsa_parameters(key)
    return PublicKeyInfo(algorithm=name, rsa=rsa_info)
