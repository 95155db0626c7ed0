
#=======================================================================
# Exceptions
#=======================================================================

class CASClientError(Exception):
    pass

class TransportError(CASClientError):
    pass

class InvalidContinuation(CASClientError, TypeError):
    pass
