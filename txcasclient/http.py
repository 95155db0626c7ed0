
# Application modules
from txcasclient.exceptions import TransportError
from txcasclient.interface import IHTTPTransport

# External modules
import requests
from zope.interface import implementer


def connect_timeout(timeout):
    """
    Translate a connect timeout in seconds into a `requests` timeout.
    Zero or None disables the bound.  Reads are not bounded.
    """
    if not timeout:
        return None
    return (timeout, None)


@implementer(IHTTPTransport)
class RequestsTransport(object):
    """
    Blocking HTTP transport backed by a `requests.Session`.
    """

    def __init__(self, session=None, verify=True):
        if session is None:
            session = requests.Session()
        self.session = session
        self.verify = verify

    def get(self, url, timeout=None):
        try:
            resp = self.session.get(
                url, timeout=connect_timeout(timeout), verify=self.verify)
        except requests.exceptions.Timeout as ex:
            raise TransportError("Request to %s timed out: %s" % (url, ex))
        except requests.exceptions.RequestException as ex:
            raise TransportError("Request to %s failed: %s" % (url, ex))
        return (resp.status_code, resp.text)
