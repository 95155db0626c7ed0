
# Standard library
from urllib.parse import (
    quote, urlsplit, urlunsplit)

# Application modules
from txcasclient.constants import (
    DEFAULT_SERVICE,
    PARAM_SERVICE,
    PARAM_TICKET,
    PARAM_URL)
from txcasclient.settings import CASSettings


def get_default_port(scheme):
    if scheme.lower() == 'https':
        return 443
    elif scheme.lower() == 'http':
        return 80
    else:
        return None

def build_url(scheme, host, port, path):
    """
    Rebuild a request URL.  The port is left out when it is the default
    for `scheme`.
    """
    url = [scheme, '://', host]
    if port is not None and int(port) != get_default_port(scheme):
        url.append(":%s" % port)
    if not path.startswith('/'):
        url.append('/')
    url.append(path)
    return ''.join(url)

def url_encode(value):
    """
    Percent-encode everything except unreserved characters (RFC 3986).
    """
    return quote(value, safe='-_.~')


class CASURLBuilder(object):
    """
    Builds the login, validation, and logout endpoints.
    """

    def __init__(self, redirect_url, service=DEFAULT_SERVICE, settings=None):
        """
        @param redirect_url: Callback URL of this application.  Must be the
            same during the login and validation steps.
        @param service: Service identifier registered with the provider.
        @param settings: A L{CASSettings}.
        """
        if settings is None:
            settings = CASSettings()
        self.redirect_url = redirect_url
        self.service = service
        self.settings = settings

    def _query(self):
        return "?%s=%s&%s=%s" % (
            PARAM_SERVICE, self.service,
            PARAM_URL, url_encode(self.redirect_url))

    def loginURL(self):
        return self.settings.loginURL() + self._query()

    def validationURL(self, ticket):
        # An empty ticket yields a well-formed URL that will not validate.
        return "%s%s&%s=%s" % (
            self.settings.validationURL(), self._query(), PARAM_TICKET, ticket)

    def logoutURL(self):
        return self.settings.logoutURL()


def strip_ticket(url):
    """
    Remove the `casticket` parameter from `url` so it can be used as the
    callback URL on both sides of the login round-trip.  The rest of the
    query is left exactly as it was sent.
    """
    parts = urlsplit(url)
    if not parts.query:
        return url
    segments = parts.query.split('&')
    kept = [s for s in segments if s.split('=', 1)[0] != PARAM_TICKET]
    if len(kept) == len(segments):
        return url
    return urlunsplit(parts._replace(query='&'.join(kept)))
