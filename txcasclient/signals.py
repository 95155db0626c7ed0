"""
Control signals returned by authentication continuations.

The web layer reads a signal and decides how to finish the request.  A
signal with `stop` set means the request must not reach the protected
resource.
"""


class Signal(object):

    stop = False
    code = None


class Proceed(Signal):
    """
    The caller is authenticated.  Continue handling the request.
    """

    def __init__(self, username):
        self.username = username

    def __repr__(self):
        return "<Proceed>"


class Redirect(Signal):
    """
    Send the browser to `location` and stop.
    """

    stop = True

    def __init__(self, location, code=303):
        self.location = location
        self.code = code

    def __repr__(self):
        return "<Redirect %d %s>" % (self.code, self.location)


class Unauthorized(Signal):
    """
    Respond with 401 Unauthorized.
    """

    code = 401

    def __init__(self, stop=True):
        self.stop = stop

    def __repr__(self):
        return "<Unauthorized stop=%r>" % (self.stop,)
