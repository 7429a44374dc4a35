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

The HTTP layer of `remoteresources`: the `Request` and `Response` value
objects passed through a `Connection`, the `Error` wrapper for unsuccessful
responses, and the `httplib2` user agent that actually talks to the API.

"""

from copy import deepcopy
import logging
from urllib.parse import urlencode

import httplib2
import simplejson as json


userAgent = httplib2.Http()

log = logging.getLogger('remoteresources.http')


class Request(object):

    """An outgoing HTTP request.

    `Request` instances are built by `Connection.build_request()` and handed
    through the connection's middleware layers to the user agent. Header
    names are stored lower-cased, as `httplib2` does, so header lookups are
    case-insensitive.

    """

    def __init__(self, method, url, query=None, headers=None, body=None,
                 http_version='1.1'):
        self.method = method.upper()
        self.url = url
        self.query = dict(query or {})
        self.headers = dict((k.lower(), v) for k, v in (headers or {}).items())
        self.body = body
        self.http_version = http_version

    @property
    def uri(self):
        """The full URL of the request, including the query string."""
        if not self.query:
            return self.url
        sep = '&' if '?' in self.url else '?'
        return self.url + sep + urlencode(self.query, doseq=True)

    def header(self, name, default=None):
        return self.headers.get(name.lower(), default)

    def copy(self, **changes):
        """Returns a new `Request` equal to this one except for the given
        attributes."""
        attrs = dict(method=self.method, url=self.url,
                     query=deepcopy(self.query), headers=dict(self.headers),
                     body=self.body, http_version=self.http_version)
        attrs.update(changes)
        return type(self)(**attrs)

    def to_dict(self):
        return {
            'method':  self.method,
            'url':     self.uri,
            'query':   dict(self.query),
            'headers': dict(self.headers),
            'body':    self.body,
        }

    def __eq__(self, other):
        if type(self) != type(other):
            return False
        return (self.to_dict() == other.to_dict()
                and self.query == other.query
                and self.http_version == other.http_version)

    def __ne__(self, other):
        return not self == other

    def __repr__(self):
        return '<%s %s %s>' % (type(self).__name__, self.method, self.uri)


class Response(object):

    """A response received from the API.

    The raw body is decoded into `payload` the first time it is asked for,
    and only once. Subclass `Response` and override `decode()` for APIs that
    don't speak JSON, or `is_successful()` for APIs that report failures in
    the body of ``200 OK`` responses.

    """

    throwable = frozenset()
    """Status codes that always make `Connection.send()` raise, regardless
    of the connection's ``throw_on_4xx`` and ``throw_on_5xx`` settings."""

    def __init__(self, status, reason=None, headers=None, body=b''):
        self.status = int(status)
        self.reason = reason
        self.headers = dict((k.lower(), v) for k, v in (headers or {}).items())
        self.body = body

    @classmethod
    def from_httplib2(cls, response, content):
        """Makes a new `Response` from the ``(response, content)`` pair an
        `httplib2.Http` user agent returns."""
        headers = dict((k, v) for k, v in response.items() if k != 'status')
        return cls(response.status, getattr(response, 'reason', None),
                   headers, content)

    @property
    def payload(self):
        try:
            return self.__dict__['_payload']
        except KeyError:
            payload = self.decode(self.body)
            self.__dict__['_payload'] = payload
            return payload

    def decode(self, body):
        """Decodes the raw response body into a generic structure.

        Bodies that aren't valid UTF-8 are decoded with the invalid bytes
        replaced by the Unicode replacement character. Bodies with a
        non-JSON content type are returned as text, and bodies that are not
        valid JSON decode to `None`.

        """
        if isinstance(body, bytes):
            body = body.decode('utf-8', 'replace')
        if not body or not body.strip():
            return None

        content_type = self.header('content-type', '').split(';', 1)[0].strip()
        if content_type and 'json' not in content_type:
            return body
        try:
            return json.loads(body)
        except json.JSONDecodeError as exc:
            log.debug('Ignoring undecodable %d response body: %s', self.status, exc)
            return None

    def header(self, name, default=None):
        """Returns the value of the named header, case-insensitively.

        Headers with exactly one value in a list are unwrapped.

        """
        value = self.headers.get(name.lower(), default)
        if isinstance(value, (list, tuple)) and len(value) == 1:
            return value[0]
        return value

    def is_successful(self):
        return self.status < 400

    def is_throwable(self):
        return self.status in self.throwable

    def to_dict(self):
        body = self.body
        if isinstance(body, bytes):
            body = body.decode('utf-8', 'replace')
        return {
            'status':  self.status,
            'reason':  self.reason,
            'headers': dict(self.headers),
            'body':    body,
        }

    def __repr__(self):
        return '<%s %d %s>' % (type(self).__name__, self.status,
                               self.reason or '')


class Error(object):

    """The error from an unsuccessful `Response`.

    Override `get_message()` in a subclass to pull your API's error message
    out of its error payloads, then name the subclass as the `error_class`
    of your `Connection`.

    """

    message_keys = ('message', 'error')

    def __init__(self, response):
        self.response = response

    @property
    def status(self):
        return self.response.status

    @property
    def message(self):
        return self.get_message()

    def get_message(self):
        payload = self.response.payload
        if isinstance(payload, dict):
            for key in self.message_keys:
                if isinstance(payload.get(key), str):
                    return payload[key]
        return ('%d %s' % (self.response.status, self.response.reason or '')).strip()

    def __str__(self):
        return self.message

    def __repr__(self):
        return '<%s %d: %s>' % (type(self).__name__, self.status, self.message)
