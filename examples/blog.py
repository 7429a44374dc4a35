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

An example client for a JSONPlaceholder style blog API, implemented using
remoteresources.

"""

__version__ = '1.0'
__date__ = '18 October 2026'


from optparse import OptionParser
import sys

from remoteresources import Connection, Middleware, Resource, connections, fields


class UserAgentHeader(Middleware):

    def handle(self, request, next):
        headers = dict(request.headers)
        headers['user-agent'] = 'remoteresources-blog/%s' % __version__
        return next(request.copy(headers=headers))


class Users(Resource):

    name = fields.Field()
    username = fields.Field()
    email = fields.Field()


class Comments(Resource):

    post_id = fields.Field(api_name='postId')
    name = fields.Field()
    email = fields.Field()
    body = fields.Field()


class Posts(Resource):

    user_id = fields.Field(api_name='userId')
    title = fields.Field()
    body = fields.Field()
    comments = fields.List(fields.Object(Comments))

    excluded = ('comments',)

    def author(self):
        return Users.find(self.user_id)


def show_post(post_id):
    post = Posts.find(post_id)
    if post is None:
        print("No post %s" % post_id, file=sys.stderr)
        return 1

    author = post.author()
    print("## %s ##" % post.title)
    print("by %s" % (author.name if author is not None else 'nobody'))
    print()
    print(post.body)
    print()

    for comment in Comments.all_through(post) or ():
        print("- %s <%s>" % (comment.name, comment.email))

    return 0


def retitle_post(post_id, title):
    post = Posts.find(post_id)
    if post is None:
        print("No post %s" % post_id, file=sys.stderr)
        return 1

    post.title = title
    if not post.save():
        print("Could not save post %s: %s" % (post_id, post.error), file=sys.stderr)
        return 1

    print("Saved %r" % post)
    return 0


def main(argv=None):
    if argv is None:
        argv = sys.argv

    parser = OptionParser(usage="%prog [options] POST_ID")
    parser.add_option("-b", "--base", dest="base",
        default="https://jsonplaceholder.typicode.com/",
        help="the base URI of the API")
    parser.add_option("-t", "--title", dest="title",
        help="retitle the post instead of showing it")
    parser.add_option("--patch", dest="patch", action="store_true", default=False,
        help="save changes with PATCH requests of only the changed fields")
    parser.add_option("-v", "--verbose", dest="verbose", action="store_true",
        default=False, help="list the requests made")
    opts, args = parser.parse_args(argv[1:])

    if len(args) != 1:
        parser.error("a post ID is required")

    conn = Connection(base_uri=opts.base, middleware=[UserAgentHeader()],
        update_method='PATCH' if opts.patch else 'PUT', update_diff=opts.patch,
        log=opts.verbose)
    connections.add('default', conn)

    if opts.title is not None:
        ret = retitle_post(args[0], opts.title)
    else:
        ret = show_post(args[0])

    if opts.verbose:
        for entry in conn.get_log():
            print(entry, file=sys.stderr)

    return ret


if __name__ == '__main__':
    sys.exit(main(sys.argv))
