"""
Vote Errors
Exception hierarchy shared by the protocol and crypto helpers
"""


class VoteError(Exception):
    """Base class for vote protocol errors"""


class ProtocolError(VoteError):
    """Server greeting did not have the expected structure"""


class ValidationError(VoteError):
    """A vote field is blank"""


class EncodingError(VoteError):
    """Serialized vote does not fit in one RSA block"""


class CryptoError(VoteError):
    """Key handling or encryption failed"""
