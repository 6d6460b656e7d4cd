"""Shared models and serializers for the test suite."""

from typing import Optional

from pydantic import BaseModel

from lightserial import Serializer, attribute, nested, collection, group


class User(BaseModel):
    name: str
    email: Optional[str] = None


class Admin(User):
    access_level: str = "read_only"


class Catalog:
    """Namespace: serializers nested here get `catalog--` identifiers."""

    class SerializerForUser(Serializer, serializes_model=User):
        name = attribute(description="Name of the user", nullable=False, type="string")
        email = attribute(description="Email of the user", nullable=True, type="string")

    class SerializerForAdmin(Serializer, serializes_model=Admin):
        name = attribute(description="Name of the admin", nullable=False, type="string")
        email = attribute(description="Email of the admin", nullable=True, type="string")
        access_level = attribute(
            descriotion="Access level of the admin",
            nullable=False,
            enum=["read_only", "some_access", "more_access", "all_access"],
            type="string",
        )

    class SerializerWithoutType(Serializer, no_type_field=True):
        unnested_attribute = attribute(type="string")
        details = group(
            attr1=attribute(type="string"),
            attr2=attribute(type="integer"),
            user=nested(serializer="Catalog.SerializerForUser", description="Some User", minimum=2),
        )

    class SerializerWithMultipleSubs(Serializer, serializes_type="something_cool"):
        users = collection(
            type="some weird type",
            illegal_documentation_key="this should not be in the docs",
            serializer={User: "Catalog.SerializerForUser", Admin: "Catalog.SerializerForAdmin"},
            description="List of users",
            minimum=2,
        )
        who_did_it = nested(
            serializer={User: "Catalog.SerializerForUser", Admin: "Catalog.SerializerForAdmin"},
            nullable=True,
        )


class WidgetSerializerWithType(Serializer, serializes_type="my_cool_type"):
    attr = attribute(description="Test description", type="string", enum=["foo", "bar", "baz"])
    other_attr = attribute(illegal_documentation_key="this should not be in the docs")
    nullable_string = attribute(type="string", nullable=True)
    date = attribute(type="string", format="date-time")
    attr_without_documentation = attribute()
    users = collection(
        type="some weird type",
        illegal_documentation_key="this should not be in the docs",
        serializer=Catalog.SerializerForUser,
        description="List of users",
        minimum=2,
    )
    nested_nullable = nested(
        description="Some nested thing",
        serializer=Catalog.SerializerWithoutType,
        type="some weird type",
        illegal_documentation_key="this should not be in the docs",
        nullable=True,
    )
    nested_not_nullable = nested(
        description="Some nested thing",
        type="some weird type",
        illegal_documentation_key="this should not be in the docs",
        serializer=Catalog.SerializerWithoutType,
    )
    nested_with_overriden_ref = nested(
        description="Some more nested thing",
        serializer=Catalog.SerializerWithoutType,
        ref_override="my-own-reference",
    )
