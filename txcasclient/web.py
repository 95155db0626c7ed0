
# Standard library
import functools
from textwrap import dedent

# Application modules
from txcasclient.client import CASClient
from txcasclient.constants import DEFAULT_SERVICE
from txcasclient.http import RequestsTransport
from txcasclient.request import TwistedRequestContext
from txcasclient.session import TwistedSessionStore
from txcasclient.settings import CASSettings
from txcasclient.signals import Redirect, Unauthorized

# External modules
from klein import Klein


def redirect303(request, url):
    """
    Redirect using 303
    """
    request.setResponseCode(303)
    request.setHeader(b"location", url.encode('utf-8'))

html_escape_table = {
    "&": "&amp;",
    '"': "&quot;",
    "'": "&apos;",
    ">": "&gt;",
    "<": "&lt;",
    }

def escape_html(text):
    """Produce entities within text."""
    return "".join(html_escape_table.get(c,c) for c in text)


#=======================================================================
# The client app
#=======================================================================

class CASClientApp(object):
    """
    CAS protection for Klein applications.

    Wrap routes with L{requireLogin}.  The `/logout` route of `app` ends
    the CAS session.
    """

    app = Klein()

    def __init__(self, service=DEFAULT_SERVICE, redirect_url=None,
                 config=None, transport=None, log_sink=None):
        """
        @param service: Service identifier registered with the provider.
        @param redirect_url: Callback URL.  Defaults to the URL of the
            protected resource.
        @param config: Provides L{IConfigProvider}.  Defaults to the process
            environment.
        @param transport: Provides L{IHTTPTransport}.
        @param log_sink: Object with a `critical(message)` method.
        """
        if transport is None:
            transport = RequestsTransport()
        self.service = service
        self.redirect_url = redirect_url
        self.settings = CASSettings(config)
        self.transport = transport
        self.log_sink = log_sink

    def clientForRequest(self, request):
        """
        Create a L{CASClient} for a single request.
        """
        return CASClient(
            TwistedRequestContext(request),
            TwistedSessionStore(request),
            redirect_url=self.redirect_url,
            service=self.service,
            settings=self.settings,
            transport=self.transport,
            log_sink=self.log_sink)

    def renderSignal(self, request, signal):
        """
        Apply a stopping signal to `request` and return the response body.
        """
        if isinstance(signal, Redirect):
            redirect303(request, signal.location)
            if signal.code != 303:
                request.setResponseCode(signal.code)
            return b""
        if isinstance(signal, Unauthorized):
            request.setResponseCode(401)
            return b"Unauthorized"
        return None

    def requireLogin(self, func):
        """
        Decorate a Klein route so it only runs for authenticated users.
        The username is available to the route as `request.casUser`.
        """
        @functools.wraps(func)
        def wrapper(request, *args, **kwds):
            client = self.clientForRequest(request)
            signal = client.authenticate()
            if isinstance(signal, Unauthorized) and not signal.stop:
                request.setResponseCode(401)
            elif signal is not None and signal.stop:
                return self.renderSignal(request, signal)
            request.casUser = client.getUserName()
            return func(request, *args, **kwds)
        return wrapper

    @app.route('/logout', methods=['GET'])
    def logout_GET(self, request):
        """
        End the local session and notify the provider.
        """
        client = self.clientForRequest(request)
        client.logout()
        request.setHeader(b"content-type", b"text/html; charset=utf-8")
        return dedent("""\
            <html>
                <body>
                    <p>You have been logged out.</p>
                    <p><a href="%(url)s">End your single sign-on session</a>.</p>
                </body>
            </html>
            """) % {'url': escape_html(client.getLogoutURL())}
