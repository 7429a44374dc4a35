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

from datetime import datetime, timezone
import unittest

from remoteresources import Collection, InvalidPayloadFormat, Resource, fields
from remoteresources import includes_many, includes_one
from remoteresources.resource import find_by_name


class Users(Resource):
    name = fields.Field()


class Comments(Resource):
    body   = fields.Field()
    author = fields.Object(Users)


class Blogs(Resource):
    title      = fields.Field()
    author     = fields.Object(Users)
    comments   = fields.List(fields.Object(Comments))
    created_at = fields.Datetime()
    read_only  = ('created_at',)


class TestResources(unittest.TestCase):

    cls = Resource

    def test_basic(self):

        class BasicMost(self.cls):
            name  = fields.Field()
            value = fields.Field()

        b = BasicMost.from_dict({'name': 'foo', 'value': '4'})
        self.assertTrue(b, 'from_dict() returned something True')
        self.assertEqual(b.name, 'foo', 'from_dict() result has correct name')
        self.assertEqual(b.value, '4', 'from_dict() result has correct value')
        self.assertFalse(b.is_dirty())

        b = BasicMost(name='bar', value='47').to_dict()
        self.assertEqual({'name': 'bar', 'value': '47'}, b, 'Basic dict has proper contents')

        self.assertEqual(BasicMost.__name__, 'BasicMost',
            "metaclass magic didn't break our class's name")

    def test_dirty_shadows_stable(self):
        b = Blogs.from_dict({'id': 1, 'title': 'A'})

        b.set('title', 'C')
        self.assertEqual(b.get('title'), 'C')
        self.assertEqual(b.title, 'C')
        self.assertEqual(b.original('title'), 'A')
        self.assertTrue(b.is_dirty())
        self.assertEqual(b.modified, {'title': 'C'})

        b.reset()
        self.assertEqual(b.get('title'), 'A')
        self.assertFalse(b.is_dirty())

        b.set('subtitle', 'never hydrated')
        self.assertEqual(b.get('subtitle'), 'never hydrated')
        b.reset()
        self.assertTrue(b.get('subtitle') is None)
        self.assertTrue(b.original('subtitle') is None)

    def test_descriptorwise(self):
        b = Blogs.from_dict({'title': 'hi'})
        b.title = 'ho'
        self.assertEqual(b.get('title'), 'ho')

        del b.title
        self.assertEqual(b.title, 'hi', 'Deleting the attribute discards the modification')

        empty = Blogs()
        self.assertTrue(empty.title is None)

    def test_field_default(self):

        class Defaulty(self.cls):
            name  = fields.Field(default='nobody')
            count = fields.Field(default=lambda obj: len(obj.name))

        d = Defaulty()
        self.assertEqual(d.name, 'nobody')
        self.assertEqual(d.count, 6)
        self.assertEqual(d.to_dict(), {}, 'Defaults are not properties')

    def test_api_name(self):

        class Document(self.cls):
            identifier = '_id'
            id         = fields.Field(api_name='_id')
            revision   = fields.Field(api_name='_rev')

        d = Document.from_dict({'_id': 'abc', '_rev': '3'})
        self.assertEqual(d.id, 'abc')
        self.assertEqual(d.revision, '3')
        self.assertEqual(d.resource_id, 'abc')

        d = Document(id='xyz')
        self.assertEqual(d.to_dict(), {'_id': 'xyz'})

    def test_read_only(self):
        b = Blogs.from_dict({'id': 1, 'created_at': '2017-01-28T03:45:00Z'})
        created = b.get('created_at')

        b.set('created_at', 'yesterday')
        self.assertEqual(b.get('created_at'), created)

        b.created_at = datetime(2000, 1, 1)
        self.assertEqual(b.created_at, created)

        b.fill({'created_at': 'tomorrow', 'title': 'T'})
        self.assertEqual(b.get('created_at'), created)
        self.assertEqual(b.get('title'), 'T')

        fresh = Blogs()
        fresh.set('created_at', 'now')
        self.assertTrue(fresh.get('created_at') is None)

    def test_fillable(self):

        class Guarded(self.cls):
            fillable = ('name',)

        g = Guarded()
        g.fill({'name': 'ok', 'admin': True})
        self.assertEqual(g.get('name'), 'ok')
        self.assertFalse(g.has('admin'))

        # Only mass assignment is guarded.
        g.set('admin', True)
        self.assertEqual(g.get('admin'), True)

    def test_hydrate_nested(self):
        b = Blogs.from_dict({
            'id': 7,
            'title': 'Blog Post',
            'author': {'id': 40, 'name': 'Brent'},
            'comments': [
                {'id': 1, 'body': 'Comment 1', 'author': {'id': 3, 'name': 'Joe'}},
                {'id': 2, 'body': 'Comment 2', 'author': {'id': 5, 'name': 'Jane'}},
            ],
        })

        self.assertTrue(isinstance(b.author, Users))
        self.assertEqual(b.author.get('id'), 40)
        self.assertEqual(b.author.name, 'Brent')

        self.assertTrue(isinstance(b.comments, Collection))
        self.assertEqual(len(b.comments), 2)
        first, second = b.comments
        self.assertTrue(isinstance(first, Comments))
        self.assertTrue(isinstance(first.author, Users))
        self.assertEqual(first.author.get('id'), 3)
        self.assertEqual(second.author.name, 'Jane')

    def test_hydrate_empty_relations(self):
        b = Blogs.from_dict({'id': 7, 'author': None, 'comments': None})
        self.assertTrue(b.author is None)
        self.assertTrue(isinstance(b.comments, Collection))
        self.assertEqual(len(b.comments), 0)

        b = Blogs.from_dict({'id': 7, 'author': 'brent', 'comments': []})
        self.assertEqual(b.author, 'brent', 'Non-dictionary relations pass through')
        self.assertEqual(len(b.comments), 0)

    def test_hydrate_formats(self):
        b = Blogs()
        b.hydrate(None)
        b.hydrate({})
        b.hydrate([])
        self.assertEqual(b.to_dict(), {})

        b.hydrate([('id', 3), ('title', 'pairs')])
        self.assertEqual(b.get('id'), 3)
        self.assertEqual(b.title, 'pairs')

        self.assertRaises(InvalidPayloadFormat, b.hydrate, 'nope')
        self.assertRaises(InvalidPayloadFormat, b.hydrate, 17)
        self.assertRaises(InvalidPayloadFormat, b.hydrate, [1, 2, 3])
        self.assertRaises(TypeError, b.hydrate, 'nope')

        self.assertRaises(InvalidPayloadFormat, Blogs.from_dict, {'comments': {'id': 1}})

    def test_includes(self):
        self.assertTrue(includes_one(Users, None) is None)
        self.assertEqual(includes_one(Users, {}), {})
        self.assertEqual(includes_one(Users, 5), 5)

        u = includes_one(Users, {'id': 9, 'name': 'X'})
        self.assertTrue(isinstance(u, Users))
        self.assertEqual(u.resource_id, 9)
        self.assertFalse(u.is_dirty())

        many = includes_many(Users, [{'id': 1}, {'id': 2}])
        self.assertTrue(isinstance(many, Collection))
        self.assertEqual([u.resource_id for u in many], [1, 2])

        self.assertEqual(len(includes_many(Users, None)), 0)
        self.assertEqual(includes_many(Users, [], collection_class=None), [])

    def test_forward_reference(self):

        class Parent(self.cls):
            kids = fields.List(fields.Object('Kid'))

        class Kid(self.cls):
            name = fields.Field()

        p = Parent.from_dict({'kids': [{'name': 'fredina'}, {'name': 'billzebub'}]})
        self.assertTrue(isinstance(p.kids[0], Kid))
        self.assertEqual(p.kids[1].name, 'billzebub')
        self.assertTrue(find_by_name('Kid') is Kid)

    def test_types(self):
        b = Blogs.from_dict({'created_at': '2008-12-31T04:00:01Z'})
        self.assertEqual(b.created_at, datetime(2008, 12, 31, 4, 0, 1,
            tzinfo=timezone.utc))

        b = Blogs.from_dict({'created_at': '2012-08-17T14:49:50-05:00'})
        self.assertEqual(b.created_at, datetime(2012, 8, 17, 19, 49, 50,
            tzinfo=timezone.utc), 'Non-UTC timezone was parsed and converted to UTC')

        self.assertRaises(TypeError, Blogs.from_dict,
            {'created_at': 'pack my bag with six dozen liquor jugs'})

        self.assertEqual(b.to_dict(), {'created_at': '2012-08-17T19:49:50Z'})

    def test_to_dict_nested(self):
        b = Blogs.from_dict({
            'id': 7,
            'author': {'id': 40},
            'comments': [{'id': 1, 'author': {'id': 3}}],
        })
        b.author.set('name', 'Brent')

        self.assertEqual(b.to_dict(), {
            'id': 7,
            'author': {'id': 40, 'name': 'Brent'},
            'comments': [{'id': 1, 'author': {'id': 3}}],
        })

    def test_spooky_action(self):
        """Tests that an instance's content can't be changed through the data
        structures it was created with, or a data structure pulled out of
        it."""

        initial = {
            'name': 'foo',
            'secret': {
                'code': 'uuddlrlrba'
            },
        }
        x = Users.from_dict(initial)

        initial['name'] = 'bar'
        initial['secret']['code'] = 'steak'
        self.assertEqual(x.name, 'foo')
        self.assertEqual(x.get('secret'), {'code': 'uuddlrlrba'})

        d = x.to_dict()
        d['secret']['code'] = 'walt sent me'
        self.assertEqual(x.to_dict()['secret']['code'], 'uuddlrlrba',
            "Changing deep exported data doesn't change instance's "
            "internal data retroactively")

    def test_resource_uri(self):
        self.assertEqual(Blogs().get_resource_uri(), 'blogs')
        self.assertEqual(Blogs.from_dict({'id': 1}).get_resource_uri(), 'blogs/1')
        self.assertEqual(Blogs(id='').get_resource_uri(), 'blogs')

        class Entry(self.cls):
            resource_name = 'entries'

        self.assertEqual(Entry.from_dict({'id': 'x'}).get_resource_uri(), 'entries/x')

    def test_through(self):
        blog = Blogs.from_dict({'id': 1})

        c = Comments()
        c.through('blogs/1')
        self.assertEqual(c.get_resource_uri(), 'blogs/1/comments')

        c = Comments().through(blog)
        self.assertEqual(c.get_resource_uri(), 'blogs/1/comments')

        c.through(blog).through('/blogs/1/')
        self.assertEqual(c.get_resource_uri(), 'blogs/1/comments',
            'Adding the same dependency again changes nothing')

        c = Comments.from_dict({'id': 5678}).through('users/3').through(blog)
        self.assertEqual(c.get_resource_uri(), 'users/3/blogs/1/comments/5678')

    def test_round_trip(self):
        b = Blogs.from_dict({'id': 1, 'title': 'A', 'author': {'id': 2}})
        before = b.to_dict()
        b.fill(b.to_dict())
        self.assertEqual(b.to_dict(), before)
        self.assertTrue(b.is_dirty())

    def test_equality(self):
        a = Users.from_dict({'id': 1, 'name': 'X'})
        b = Users(id=1, name='X')
        self.assertEqual(a, b)
        self.assertNotEqual(a, Comments.from_dict({'id': 1, 'name': 'X'}))
        b.set('name', 'Y')
        self.assertNotEqual(a, b)


if __name__ == '__main__':
    unittest.main()
