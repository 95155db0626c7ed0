"""
Stand-in identity provider for trying out `sample.py`.

    CAS_LOGIN_URL=http://localhost:9123/login \
    CAS_VALIDATION_URL=http://localhost:9123/validate \
    CAS_LOGOUT_URL=http://localhost:9123/logout \
    python sample.py
"""
import uuid
from urllib.parse import urlencode
from klein import Klein

app = Klein()
tickets = {}

def arg(request, name, default=""):
    values = request.args.get(name.encode('utf-8'), [])
    if len(values) == 0:
        return default
    return values[0].decode('utf-8')

@app.route('/login')
def login(request):
    callback = arg(request, 'casurl')
    ticket = "ST-%s" % uuid.uuid4().hex
    tickets[ticket] = 'foo'
    if '?' in callback:
        sep = '&'
    else:
        sep = '?'
    request.redirect((callback + sep + urlencode({'casticket': ticket})).encode('utf-8'))
    return b""

@app.route('/validate')
def validate(request):
    username = tickets.pop(arg(request, 'casticket'), None)
    if username is None:
        return "no\n\n"
    return "yes\n%s\n" % username

@app.route('/logout')
def logout(request):
    return "logged out\n"

app.run('localhost', 9123)
