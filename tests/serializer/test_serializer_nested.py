"""Tests for nested resources and collections: polymorphism, option forwarding, nulls."""

import pytest

from lightserial import Serializer, attribute, nested, collection, group, UnsupportedTypeError
from tests.helpers import User, Admin, Catalog


class Comment:
    def __init__(self, body, author=None, replies=()):
        self.body = body
        self.author = author
        self.replies = list(replies)


class AuthorSerializer(Serializer):
    name = attribute(type="string")
    email = attribute(type="string", condition="with_email")


class CommentSerializer(Serializer):
    body = attribute(type="string")
    author = nested(serializer=AuthorSerializer, nullable=True)


class ThreadSerializer(Serializer):
    body = attribute(type="string")
    replies = collection(serializer=CommentSerializer)


class TestNested:

    def test_nested_object_has_no_root(self, user):
        result = CommentSerializer(Comment("hi", author=user)).as_json()
        assert result == {"data": {"body": "hi", "author": {"name": "Ada"}}}

    def test_nested_none(self):
        result = CommentSerializer(Comment("hi"), skip_root=True).as_json()
        assert result == {"body": "hi", "author": None}

    def test_allowed_options_are_forwarded(self, user):
        result = CommentSerializer(Comment("hi", author=user), with_email=True).as_json()
        assert result["data"]["author"] == {"name": "Ada", "email": "ada@example.com"}

    def test_other_options_are_not_forwarded(self, user):
        seen = []

        class SpySerializer(Serializer):
            @attribute()
            def name(self, user):
                seen.append(dict(self.options))
                return user.name

        class HolderSerializer(Serializer, no_root=True):
            owner = nested(serializer=SpySerializer, extractor=lambda s, obj: obj)

        HolderSerializer(user, meta={"page": 2}, unrelated=True).as_json()
        assert seen == [{"skip_root": True}]

    def test_explicitly_allowed_options_are_forwarded(self, user):
        seen = []

        class LocaleSerializer(Serializer, allow_options=("locale",)):
            @attribute()
            def name(self, user):
                seen.append(self.options.get("locale"))
                return user.name

        class LocaleHolderSerializer(Serializer, no_root=True):
            owner = nested(serializer=LocaleSerializer, extractor=lambda s, obj: obj)

        LocaleHolderSerializer(user, locale="fr").as_json()
        assert seen == ["fr"]

    def test_nested_condition(self, user):
        class ConditionalCommentSerializer(Serializer, no_root=True):
            body = attribute()
            author = nested(serializer=AuthorSerializer, condition="with_author")

        comment = Comment("hi", author=user)
        assert ConditionalCommentSerializer(comment).as_json() == {"body": "hi"}
        assert ConditionalCommentSerializer(comment, with_author=True).as_json() == {
            "body": "hi",
            "author": {"name": "Ada"},
        }

    def test_nested_in_group(self, user):
        class GroupedCommentSerializer(Serializer, no_root=True):
            body = attribute()
            meta = group(
                length=attribute(extractor=lambda s, comment: len(comment.body)),
                author=nested(serializer=AuthorSerializer),
            )

        result = GroupedCommentSerializer(Comment("hello", author=user)).as_json()
        assert result == {"body": "hello", "meta": {"length": 5, "author": {"name": "Ada"}}}


class TestCollections:

    def test_collection(self, user):
        thread = Comment("root", replies=[Comment("a", author=user), Comment("b")])
        result = ThreadSerializer(thread, skip_root=True).as_json()
        assert result == {
            "body": "root",
            "replies": [
                {"body": "a", "author": {"name": "Ada"}},
                {"body": "b", "author": None},
            ],
        }

    def test_collection_keeps_none_items(self):
        thread = Comment("root", replies=[None, Comment("b")])
        result = ThreadSerializer(thread, skip_root=True).as_json()
        assert result["replies"] == [None, {"body": "b", "author": None}]

    def test_collection_none(self):
        thread = Comment("root")
        thread.replies = None
        assert ThreadSerializer(thread, skip_root=True).as_json()["replies"] is None

    def test_collection_requires_iterable(self):
        thread = Comment("root")
        thread.replies = 42
        with pytest.raises(TypeError, match="is a collection"):
            ThreadSerializer(thread).as_json()

    def test_options_reach_collection_items(self, user):
        thread = Comment("root", replies=[Comment("a", author=user)])
        result = ThreadSerializer(thread, with_email=True, skip_root=True).as_json()
        assert result["replies"][0]["author"]["email"] == "ada@example.com"
        assert "with_email" in ThreadSerializer.get_allowed_options()


class TestPolymorphic:

    def test_resolution_by_type(self, user, admin):
        class Audit:
            users = [user, admin, None]
            who_did_it = admin

        result = Catalog.SerializerWithMultipleSubs(Audit(), skip_root=True).as_json()
        assert result == {
            "users": [
                {"name": "Ada", "email": "ada@example.com"},
                {"name": "Grace", "email": None, "access_level": "all_access"},
                None,
            ],
            "who_did_it": {"name": "Grace", "email": None, "access_level": "all_access"},
        }

    def test_subclass_falls_back_to_parent_entry(self):
        class Guest(User):
            pass

        class VisitSerializer(Serializer, no_root=True):
            visitor = nested(serializer={User: Catalog.SerializerForUser})

        class Visit:
            visitor = Guest(name="Bob")

        assert VisitSerializer(Visit()).as_json() == {"visitor": {"name": "Bob", "email": None}}

    def test_unsupported_type(self, caplog):
        class OnlyAdminsSerializer(Serializer, no_root=True):
            owner = nested(serializer={Admin: Catalog.SerializerForAdmin})

        class Thing:
            owner = User(name="Ada")

        with pytest.raises(UnsupportedTypeError, match="No serializer registered in `owner`") as info:
            OnlyAdminsSerializer(Thing()).as_json()
        assert isinstance(info.value, LookupError)
        assert info.value.value_type is User
        assert "No serializer for User" in caplog.text

    def test_allowed_options_union(self):
        class FirstSerializer(Serializer, allow_options=("first",)):
            pass

        class SecondSerializer(Serializer):
            x = attribute(condition="second")

        class EitherSerializer(Serializer):
            thing = nested(serializer={User: FirstSerializer, Admin: SecondSerializer})

        assert EitherSerializer.get_allowed_options() == {"first", "second"}


def test_nested_instances_without_root_override(user):
    class RootlessAuthorSerializer(AuthorSerializer, no_root=True):
        pass

    class BookSerializer(Serializer, no_root=True):
        author = nested(serializer=RootlessAuthorSerializer, extractor=lambda s, book: book)

    assert BookSerializer(user).as_json() == {"author": {"name": "Ada"}}


class TestAllowedOptionsCache:

    def test_allowed_options_are_cached(self):
        assert ThreadSerializer.get_allowed_options() is ThreadSerializer.get_allowed_options()

    def test_declarations_invalidate_the_cache(self):
        class LateLeafSerializer(Serializer):
            name = attribute()

        class LateHolderSerializer(Serializer):
            leaf = nested(serializer=LateLeafSerializer)

        assert LateHolderSerializer.get_allowed_options() == frozenset()
        LateLeafSerializer.allow_options("late")
        assert LateHolderSerializer.get_allowed_options() == {"late"}
        LateLeafSerializer.add_attribute("email", condition="with_email")
        assert LateHolderSerializer.get_allowed_options() == {"late", "with_email"}

    def test_collection_items_do_not_recompute_options(self, monkeypatch, user):
        class CountedLeafSerializer(Serializer):
            name = attribute(condition="with_name")

        class CountedListSerializer(Serializer, no_root=True):
            people = collection(serializer=CountedLeafSerializer)

        calls = []
        collect = Serializer._collect_allowed_options.__func__

        def counting_collect(cls, _path=()):
            calls.append(cls)
            return collect(cls, _path)

        monkeypatch.setattr(Serializer, "_collect_allowed_options", classmethod(counting_collect))
        Serializer.get_allowed_options.cache_clear()

        result = CountedListSerializer({"people": [user] * 200}, with_name=True).as_json()
        assert result == {"people": [{"name": "Ada"}] * 200}
        assert calls.count(CountedLeafSerializer) <= 2
