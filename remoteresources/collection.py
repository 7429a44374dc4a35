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

Collections of `Resource` instances, as returned by `Resource.all()` and
built for `fields.List` relations during hydration.

"""

import simplejson as json

from remoteresources.errors import InvalidPayloadFormat


class SequenceProxy(object):

    """An abstract class implementing the sequence protocol by proxying it to
    an instance attribute.

    `SequenceProxy` instances act like sequences by forwarding all sequence
    method calls to their `entries` attributes. The `entries` attribute should
    be a list or some other that implements the sequence protocol.

    """

    def make_sequence_method(methodname):
        """Makes a new function that proxies calls to `methodname` to the
        `entries` attribute of the instance on which the function is called as
        an instance method."""
        def seqmethod(self, *args, **kwargs):
            # Proxy these methods to self.entries.
            return getattr(self.entries, methodname)(*args, **kwargs)
        seqmethod.__name__ = methodname
        return seqmethod

    __len__      = make_sequence_method('__len__')
    __getitem__  = make_sequence_method('__getitem__')
    __setitem__  = make_sequence_method('__setitem__')
    __delitem__  = make_sequence_method('__delitem__')
    __iter__     = make_sequence_method('__iter__')
    __reversed__ = make_sequence_method('__reversed__')
    __contains__ = make_sequence_method('__contains__')
    append       = make_sequence_method('append')


class Collection(SequenceProxy):

    """A homogeneous sequence of `Resource` instances."""

    def __init__(self, entries=None):
        self.entries = list(entries or [])

    def first(self):
        """Returns the first instance in the collection, or `None` if the
        collection is empty."""
        if self.entries:
            return self.entries[0]
        return None

    def to_list(self):
        """Encodes the collection's instances to a list of dictionaries."""
        return [encode_value(entry) for entry in self.entries]

    def to_json(self):
        return json.dumps(self.to_list())

    def __bool__(self):
        return bool(self.entries)

    def __eq__(self, other):
        if not isinstance(other, Collection):
            return False
        return self.entries == other.entries

    def __ne__(self, other):
        return not self == other

    def __repr__(self):
        return '<%s %r>' % (type(self).__name__, self.entries)


def encode_value(value):
    """Encodes a property value (a `Resource`, a collection, or a plain
    value) into plain dictionaries and lists."""
    if hasattr(value, 'to_dict'):
        return value.to_dict()
    if isinstance(value, Collection):
        return value.to_list()
    if isinstance(value, dict):
        return dict((k, encode_value(v)) for k, v in value.items())
    if isinstance(value, (list, tuple)):
        return [encode_value(v) for v in value]
    return value


def build_collection(cls, data, collection_class=Collection, decode=None):
    """Builds a collection of hydrated `cls` instances from a list of decoded
    dictionaries.

    Empty or absent data yields an empty collection. If `collection_class` is
    `None`, a plain list is returned instead of a `Collection`. Optional
    parameter `decode` replaces `cls.from_dict` as the function used to make
    each element.

    """
    if collection_class is None:
        collection_class = list
    if not data:
        return collection_class([])
    if not isinstance(data, (list, tuple)):
        raise InvalidPayloadFormat('Cannot build a collection of %s from non-list data %r'
            % (getattr(cls, '__name__', cls), data))
    if decode is None:
        decode = cls.from_dict
    return collection_class([decode(item) for item in data])
