"""Version 2 API resources, resolved under ``api/v2``."""

from resourcery import Attribute, Resource, ToMany, ToOne


def book_comments_relation(context=None):
    current_user = context.get("current_user") if context else None
    if current_user is not None and current_user.book_admin:
        return "book_comments"
    return "approved_book_comments"


class BookResource(Resource):
    title = Attribute()
    isbn = Attribute()
    banned = Attribute()

    book_comments = ToMany(relation_name=book_comments_relation)
    aliased_comments = ToMany(class_name="BookComments", relation_name="approved_book_comments")

    class Meta:
        namespace = "api/v2"


class BookCommentResource(Resource):
    body = Attribute()
    approved = Attribute()

    book = ToOne()
    author = ToOne(class_name="Person")

    class Meta:
        namespace = "api/v2"
