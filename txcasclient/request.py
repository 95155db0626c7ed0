
# Standard library
from urllib.parse import parse_qs, urlsplit

# Application modules
from txcasclient.interface import IRequestContext
from txcasclient.urls import build_url

# External modules
from zope.interface import implementer


def to_text(value):
    if isinstance(value, bytes):
        return value.decode('utf-8')
    return value


@implementer(IRequestContext)
class TwistedRequestContext(object):
    """
    Request context for a `twisted.web` request.
    """

    def __init__(self, request):
        self.request = request

    def getQueryParam(self, name):
        args = self.request.args or {}
        values = args.get(name.encode('utf-8'))
        if values is None:
            values = args.get(name)
        if not values:
            return None
        return to_text(values[0])

    def getCurrentURL(self):
        request = self.request
        if request.isSecure():
            scheme = 'https'
        else:
            scheme = 'http'
        host = to_text(request.getRequestHostname())
        port = request.getHost().port
        return build_url(scheme, host, port, to_text(request.uri))


@implementer(IRequestContext)
class StaticRequestContext(object):
    """
    Request context for a known URL.  Query parameters are taken from the
    URL itself.
    """

    def __init__(self, url):
        parts = urlsplit(url)
        self.scheme = parts.scheme
        self.host = parts.hostname
        self.port = parts.port
        path = parts.path or '/'
        if parts.query:
            path = "%s?%s" % (path, parts.query)
        self.path = path
        self.params = parse_qs(parts.query, keep_blank_values=True)

    def getQueryParam(self, name):
        values = self.params.get(name)
        if not values:
            return None
        return values[0]

    def getCurrentURL(self):
        return build_url(self.scheme, self.host, self.port, self.path)
