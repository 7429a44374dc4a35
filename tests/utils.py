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

import logging

import httplib2
import mock

from remoteresources import Connection, connections


BASE_URI = 'http://example.com/v1/'


def make_response(response, url):
    """Makes an `httplib2.Response` and content pair from either a content
    string or a dictionary of headers (with optional ``content``)."""
    default_response = {
        'status':           200,
        'content-type':     'application/json',
        'content-location': url,
    }

    if isinstance(response, dict):
        response = dict(response)
        content = response.pop('content', '')

        status = response.get('status', 200)
        if 200 <= status < 300:
            response_info = dict(default_response)
            response_info.update(response)
        else:
            # Homg all bets are off!! Use specified headers only.
            response_info = dict(response)
    else:
        response_info = dict(default_response)
        content = response

    return httplib2.Response(response_info), content


def request(uri, method='GET', body=None, headers=None):
    """Returns the keyword arguments a `Connection` passes to its user
    agent's `request()` method."""
    return dict(uri=uri, method=method, body=body, headers=headers or {})


def mock_http(req, *resps_or_contents):
    """Returns a mock `httplib2.Http` user agent answering with the given
    responses, in order."""
    mock_agent = mock.Mock(spec_set=httplib2.Http)

    if not isinstance(req, dict):
        req = request(req)

    responses = [make_response(r, req['uri']) for r in resps_or_contents]
    if len(responses) == 1:
        mock_agent.request.return_value = responses[0]
    else:
        mock_agent.request.side_effect = responses
    return mock_agent


def connect(http, name='default', **kwargs):
    """Registers a new `Connection` using user agent `http`."""
    kwargs.setdefault('base_uri', BASE_URI)
    return connections.add(name, Connection(http=http, **kwargs))


def log():
    import sys
    logging.basicConfig(level=logging.DEBUG, stream=sys.stderr, format="%(asctime)s %(levelname)s %(message)s")
