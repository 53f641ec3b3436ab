"""
Exceptions raised while reading a certificate, all inheriting from CertificateError.
"""


class CertificateError(Exception):

    def __init__(self, message: str, **info):
        self.errinfo = info
        self.errname = self.__class__.__name__
        Exception.__init__(self, message)

    def get(self, name, defv=None):
        return self.errinfo.get(name, defv)


class InvalidArgumentError(CertificateError, TypeError):
    '''The certificate argument is missing, not a string, or blank.'''


class DecodeError(CertificateError):
    '''The input could not be decoded as a PEM/DER certificate.'''


class UnknownAlgorithmError(CertificateError):
    pass


class MalformedAltNameError(CertificateError):
    pass


class MalformedTimeError(CertificateError):
    pass


class MalformedNameError(CertificateError):
    pass
