# Copyright (c) 2009-2010 Six Apart Ltd.
# All rights reserved.
#
# Redistribution and use in source and binary forms, with or without
# modification, are permitted provided that the following conditions are met:
#
# * Redistributions of source code must retain the above copyright notice,
#   this list of conditions and the following disclaimer.
#
# * Redistributions in binary form must reproduce the above copyright notice,
#   this list of conditions and the following disclaimer in the documentation
#   and/or other materials provided with the distribution.
#
# * Neither the name of Six Apart Ltd. nor the names of its contributors may
#   be used to endorse or promote products derived from this software without
#   specific prior written permission.
#
# THIS SOFTWARE IS PROVIDED BY THE COPYRIGHT HOLDERS AND CONTRIBUTORS "AS IS"
# AND ANY EXPRESS OR IMPLIED WARRANTIES, INCLUDING, BUT NOT LIMITED TO, THE
# IMPLIED WARRANTIES OF MERCHANTABILITY AND FITNESS FOR A PARTICULAR PURPOSE
# ARE DISCLAIMED. IN NO EVENT SHALL THE COPYRIGHT HOLDER OR CONTRIBUTORS BE
# LIABLE FOR ANY DIRECT, INDIRECT, INCIDENTAL, SPECIAL, EXEMPLARY, OR
# CONSEQUENTIAL DAMAGES (INCLUDING, BUT NOT LIMITED TO, PROCUREMENT OF
# SUBSTITUTE GOODS OR SERVICES; LOSS OF USE, DATA, OR PROFITS; OR BUSINESS
# INTERRUPTION) HOWEVER CAUSED AND ON ANY THEORY OF LIABILITY, WHETHER IN
# CONTRACT, STRICT LIABILITY, OR TORT (INCLUDING NEGLIGENCE OR OTHERWISE)
# ARISING IN ANY WAY OUT OF THE USE OF THIS SOFTWARE, EVEN IF ADVISED OF THE
# POSSIBILITY OF SUCH DAMAGE.

"""

A `Connection` is the configuration for one target API: where it lives, the
headers and query parameters every request carries, how failed responses
are reported, and the middleware layers each request passes through on its
way to the user agent.

Connections are registered by name with a `ConnectionManager`, and
`Resource` classes look up their connection there by their
``connection_name``:

>>> connections.add('default', Connection(base_uri='http://api.example.com/v1/'))
>>> post = Post.find(7)   # GET http://api.example.com/v1/post/7

"""

from datetime import date, datetime
import logging
import time
from urllib.parse import urlencode, urlparse

import httplib2
import simplejson as json

import remoteresources.http
from remoteresources.collection import Collection
from remoteresources.errors import ConnectionNotFound, ResponseException, TransportError
from remoteresources.http import Error, Request, Response


log = logging.getLogger('remoteresources.connection')

CONTENT_TYPE_JSON = 'application/json'
CONTENT_TYPE_FORM = 'application/x-www-form-urlencoded'

BODY_METHODS = ('POST', 'PUT', 'PATCH')


def encode_default(obj):
    """Encodes the values `simplejson` can't encode by itself: resources,
    collections and timestamps."""
    if hasattr(obj, 'to_dict'):
        return obj.to_dict()
    if isinstance(obj, Collection):
        return obj.to_list()
    if isinstance(obj, (datetime, date)):
        return obj.isoformat()
    raise TypeError('%r is not JSON serializable' % (obj,))


def is_empty(body):
    return body is None or (hasattr(body, '__len__') and len(body) == 0)


class Middleware(object):

    """A layer of a `Connection`'s request pipeline.

    Any callable taking ``(request, next)`` and returning a `Response` can be
    used as middleware; subclass `Middleware` and override `handle()` if you
    prefer a class. Call ``next(request)`` to pass the request on to the
    following layer (and eventually the user agent), or return a `Response`
    of your own without calling it to answer the request yourself.

    """

    def __call__(self, request, next):
        return self.handle(request, next)

    def handle(self, request, next):
        return next(request)


class LogEntry(object):

    """A request sent through a logging `Connection` and the response it
    received."""

    def __init__(self, request, response, elapsed):
        self.request = request
        self.response = response
        self.elapsed = elapsed

    @property
    def elapsed_ms(self):
        return self.elapsed * 1000.0

    def to_dict(self):
        return {
            'request':    self.request.to_dict(),
            'response':   self.response.to_dict(),
            'elapsed_ms': self.elapsed_ms,
        }

    def __repr__(self):
        return '<%s %s %s -> %d (%.1f ms)>' % (type(self).__name__,
            self.request.method, self.request.uri, self.response.status,
            self.elapsed_ms)


def wrap_layer(layer, next_handler):
    def handler(request):
        return layer(request, next_handler)
    return handler


class Connection(object):

    """The configuration of, and the means of talking to, one target API.

    Only a transport failure always raises (`TransportError`). Whether an
    unsuccessful response raises a `ResponseException` or is returned for
    inspection is controlled by `throw_on_4xx` (off by default) and
    `throw_on_5xx` (on by default).

    Setting `log` keeps every request and response in memory in an unbounded
    list, including any credentials in their headers. Don't enable it in
    production.

    A `Connection` may be shared by several threads only if its `http` user
    agent may; the compiled middleware pipeline holds no state of its own,
    but `last_request`, `last_response` and the log are per connection.

    """

    def __init__(self, base_uri='', default_headers=None, default_query=None,
                 default_content_type=CONTENT_TYPE_JSON, update_method='PUT',
                 update_diff=False, middleware=(), log=False,
                 response_class=Response, error_class=Error,
                 collection_class=Collection, http_version='1.1',
                 throw_on_4xx=False, throw_on_5xx=True, http=None):
        """Configures a new `Connection`.

        Parameter `base_uri` is joined to the front of every relative request
        path. `default_headers` and `default_query` are included in every
        request, under any headers and query parameters given for the
        request itself. `default_content_type` is the ``Content-Type`` of
        ``POST``, ``PUT`` and ``PATCH`` requests that don't specify one.

        `update_method` is the HTTP method used to save changes to existing
        resources; if `update_diff` is set, only the modified properties are
        sent.

        `middleware` is a sequence of layers to pass each request through,
        outermost first. `response_class`, `error_class` and
        `collection_class` are the types made from responses, from
        unsuccessful responses and from lists of resources respectively; a
        `collection_class` of `None` makes plain lists.

        Optional parameter `http` is the user agent object to use. It should
        be compatible with `httplib2.Http` instances. If not given, the
        module's shared `remoteresources.http.userAgent` is used.

        """
        self.base_uri = base_uri or ''
        self.default_headers = dict(default_headers or {})
        self.default_query = dict(default_query or {})
        self.default_content_type = default_content_type
        self.update_method = update_method.upper()
        self.update_diff = update_diff
        self.middleware = middleware
        self.log = log
        self.response_class = response_class
        self.error_class = error_class
        self.collection_class = collection_class
        self.http_version = http_version
        self.throw_on_4xx = throw_on_4xx
        self.throw_on_5xx = throw_on_5xx
        self.http = http

        self.last_request = None
        self.last_response = None
        self._log_entries = []

    def _get_middleware(self):
        return self._middleware

    def _set_middleware(self, value):
        self._middleware = tuple(value or ())
        # Recompile on the next send.
        self._pipeline = None

    middleware = property(_get_middleware, _set_middleware)

    def build_url(self, path):
        """Returns the full URL of `path` relative to the connection's base
        URI. Absolute URLs are returned unchanged."""
        path = path or ''
        if urlparse(path).scheme:
            return path
        base = self.base_uri.strip('/')
        path = path.strip('/')
        if not base:
            return path
        if not path:
            return base
        return '%s/%s' % (base, path)

    def build_request(self, method, path, query=None, body=None, headers=None):
        """Returns a new `Request` for the given method and path, with the
        connection's default query parameters, headers and content type.

        Building a request makes no HTTP request and changes nothing, so it
        can be called repeatedly. Bodies are sent only with ``POST``, ``PUT``
        and ``PATCH`` requests; string bodies are sent as is, and other
        bodies are encoded according to the request's content type (JSON
        unless it is form encoded).

        """
        method = method.upper()

        params = dict(self.default_query)
        params.update(query or {})

        request_headers = dict((k.lower(), v) for k, v in self.default_headers.items())
        request_headers.update((k.lower(), v) for k, v in (headers or {}).items())

        if method in BODY_METHODS:
            if 'content-type' not in request_headers and self.default_content_type:
                request_headers['content-type'] = self.default_content_type

        if method not in BODY_METHODS or is_empty(body):
            body = None
        else:
            body = self.encode_body(body, request_headers.get('content-type'))

        return Request(method, self.build_url(path), params, request_headers,
                       body, http_version=self.http_version)

    def encode_body(self, body, content_type=None):
        """Encodes a request body for the given content type.

        Override this method to support other encodings for your target
        API.

        """
        if isinstance(body, (str, bytes)):
            return body
        content_type = (content_type or '').split(';', 1)[0].strip().lower()
        if content_type == CONTENT_TYPE_FORM:
            return urlencode(body, doseq=True)
        return json.dumps(body, default=encode_default)

    @property
    def pipeline(self):
        """The connection's middleware layers composed around the user agent
        into one callable, compiled on first use."""
        if self._pipeline is None:
            handler = self.transmit
            for layer in reversed(self._middleware):
                handler = wrap_layer(layer, handler)
            self._pipeline = handler
        return self._pipeline

    def transmit(self, request):
        """Sends the request with the connection's user agent, returning a
        new instance of the connection's `response_class`."""
        http = self.http
        if http is None:
            http = remoteresources.http.userAgent

        try:
            response, content = http.request(uri=request.uri,
                method=request.method, body=request.body,
                headers=dict(request.headers))
        except (httplib2.HttpLib2Error, OSError) as exc:
            raise TransportError('Could not %s %s: %s'
                % (request.method, request.uri, exc)) from exc

        return self.response_class.from_httplib2(response, content)

    def send(self, request):
        """Passes the request through the middleware pipeline and returns
        the resulting response.

        Raises a `ResponseException` if the response's status is one the
        connection is configured to throw for, and `TransportError` if the
        request could not be made at all.

        """
        pipeline = self.pipeline
        self.last_request = request

        log.debug('Sending %s %s', request.method, request.uri)
        start = time.time()
        response = pipeline(request)
        elapsed = time.time() - start
        log.debug('Received %d %s for %s %s in %.1f ms', response.status,
                  response.reason or '', request.method, request.uri,
                  elapsed * 1000.0)

        self.last_response = response
        if self.log:
            self._log_entries.append(LogEntry(request, response, elapsed))

        if self.should_throw(response):
            raise ResponseException.for_response(request, response)
        return response

    def should_throw(self, response):
        if response.is_throwable():
            return True
        if 400 <= response.status < 500:
            return self.throw_on_4xx
        if response.status >= 500:
            return self.throw_on_5xx
        return False

    def get_log(self):
        """Returns the list of `LogEntry` instances for every request sent
        while `log` was enabled."""
        return self._log_entries

    def request(self, method, path, query=None, body=None, headers=None):
        return self.send(self.build_request(method, path, query, body, headers))

    def get(self, path, query=None, headers=None):
        return self.request('GET', path, query, headers=headers)

    def head(self, path, query=None, headers=None):
        return self.request('HEAD', path, query, headers=headers)

    def delete(self, path, query=None, headers=None):
        return self.request('DELETE', path, query, headers=headers)

    def post(self, path, query=None, body=None, headers=None):
        return self.request('POST', path, query, body, headers)

    def put(self, path, query=None, body=None, headers=None):
        return self.request('PUT', path, query, body, headers)

    def patch(self, path, query=None, body=None, headers=None):
        return self.request('PATCH', path, query, body, headers)

    def __repr__(self):
        return '<%s %s>' % (type(self).__name__, self.base_uri or '(no base URI)')


class ConnectionManager(object):

    """A named set of `Connection` instances.

    The module's `connections` manager is used by every `Resource` class
    that doesn't name another one as its ``manager``. Adding connections is
    not synchronized; register them before sharing the manager between
    threads.

    """

    def __init__(self):
        self._connections = {}

    def add(self, name, connection):
        """Registers `connection` under `name`, replacing any connection
        already registered there."""
        self._connections[name] = connection
        return connection

    def get(self, name):
        try:
            return self._connections[name]
        except KeyError:
            raise ConnectionNotFound('Connection %r not found' % (name,)) from None

    def remove(self, name):
        self._connections.pop(name, None)

    def names(self):
        return sorted(self._connections)

    def __contains__(self, name):
        return name in self._connections


connections = ConnectionManager()
