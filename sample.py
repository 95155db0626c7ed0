#! /usr/bin/env python

import argparse
import sys
from txcasclient.settings import default_config
from txcasclient.web import CASClientApp, escape_html
from klein import Klein
from twisted.python import log


def make_app(cas):
    app = Klein()

    @app.route('/')
    @cas.requireLogin
    def index(request):
        return '''<html>
        <body>
            Welcome to the app.
            <br />You are logged in as: %(user)s
            <ul>
                <li><a href="/cas/logout">Click here to logout.</a></li>
            </ul>
        </body>
        </html>''' % {'user': escape_html(request.casUser)}

    @app.route('/cas', branch=True)
    def cas_routes(request):
        return cas.app.resource()

    return app

def main(args):
    log.startLogging(sys.stdout)
    cas = CASClientApp(
        service=args.service,
        redirect_url=args.redirect_url,
        config=default_config())
    app = make_app(cas)
    app.run(args.host, args.port)

if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Sample CAS protected app.")
    parser.add_argument(
        "--service",
        action="store",
        default="IU",
        help="Service identifier registered with the CAS provider.")
    parser.add_argument(
        "--redirect-url",
        action="store",
        default=None,
        help="Callback URL.  Defaults to the URL of the protected page.")
    parser.add_argument(
        "--host",
        action="store",
        default="localhost",
        help="Interface to listen on.")
    parser.add_argument(
        "-p",
        "--port",
        action="store",
        type=int,
        default=9801,
        help="Port to listen on.")
    args = parser.parse_args()
    main(args)
