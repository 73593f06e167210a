"""
HTTP method override for plain HTML forms.

Browsers only submit GET and POST, so forms post to ``...?_http_method=DELETE``
(or PATCH/PUT) and this middleware rewrites the request method before
Flask routes it.
"""

from urllib.parse import parse_qs

ALLOWED_METHODS = frozenset(['PATCH', 'PUT', 'DELETE'])


class MethodOverrideMiddleware:

    def __init__(self, app, param='_http_method'):
        self.app = app
        self.param = param

    def __call__(self, environ, start_response):
        if environ.get('REQUEST_METHOD') == 'POST':
            query = parse_qs(environ.get('QUERY_STRING', ''))
            method = (query.get(self.param) or [''])[0].upper()
            if method in ALLOWED_METHODS:
                environ['REQUEST_METHOD'] = method
        return self.app(environ, start_response)
