"""
Resource metadata: model resolution, abstract types, attributes, fields,
inheritance isolation and resource lookup.
"""

from types import SimpleNamespace

import pytest

from resourcery import (
    AbstractResourceFault,
    Attribute,
    ModelNotFoundFault,
    Resource,
    ResourceNotFoundFault,
    ToOne,
)

from fixtures import api_v8, my_api, my_module
from fixtures.models import Person, Post
from fixtures.resources import (
    ArticleResource,
    BaseResource,
    CatResource,
    CommentResource,
    FirmResource,
    NoMatchAbstractResource,
    NoMatchResource,
    PersonResource,
    PostResource,
    PreferencesResource,
    SpecialBaseResource,
    SpecialPersonResource,
)


# ============================================================================
# Model resolution
# ============================================================================

class TestModelResolution:

    def test_model_name(self):
        assert PostResource._model_name == "Post"

    def test_model_name_of_subclassed_non_abstract_resource(self):
        assert FirmResource._model_name == "Firm"

    def test_model_class(self):
        assert PostResource._model_class is Post

    def test_model_alternate(self):
        assert ArticleResource._model_class is Post

    def test_missing_model_class_logs_warning(self, log_warnings):
        assert NoMatchResource._model_class is None
        assert (
            "[MODEL NOT FOUND] Model could not be found for NoMatchResource. "
            "If this a base Resource declare it as abstract."
        ) in log_warnings.text

    def test_abstract_model_class_is_silent(self, log_warnings):
        assert NoMatchAbstractResource._model_class is None
        assert log_warnings.text == ""

    def test_warning_names_locally_defined_resource(self, log_warnings):
        class NoModelResource(Resource):
            pass

        assert NoModelResource._model_class is None
        assert "NoModelResource. If this a base Resource declare it as abstract." in log_warnings.text

    def test_primary_key_defaults_to_record_primary_key(self):
        assert CommentResource._primary_key == "id"

    def test_primary_key_override(self):
        class KeyedResource(Resource):
            class Meta:
                model_name = "Post"
                primary_key = "title"

        resource = KeyedResource(Post(title="Keyed"))
        assert resource.id == "Keyed"


# ============================================================================
# Abstract resources
# ============================================================================

class TestAbstract:

    def test_base_resource_abstract(self):
        assert BaseResource._abstract

    def test_derived_not_abstract(self):
        assert issubclass(PersonResource, BaseResource)
        assert not PersonResource._abstract

    def test_abstract_model_name_is_empty(self):
        assert BaseResource._model_name == ""

    def test_abstract_cannot_wrap_record(self):
        with pytest.raises(AbstractResourceFault) as exc_info:
            BaseResource(Person(name="Nobody"))
        assert exc_info.value.code == "ABSTRACT_RESOURCE"

    def test_create_without_model_class(self):
        with pytest.raises(ModelNotFoundFault):
            NoMatchResource.create()

    def test_immutable_flag(self):
        class FrozenResource(Resource):
            class Meta:
                model_name = "Post"
                immutable = True

        assert not FrozenResource.mutable()
        assert PostResource.mutable()


# ============================================================================
# Attributes & fields
# ============================================================================

class TestAttributes:

    def test_class_attributes(self):
        attrs = CatResource._attributes
        assert isinstance(attrs, dict)
        assert len(attrs) == 3

    def test_class_relationships(self):
        relationships = CatResource._relationships
        assert isinstance(relationships, dict)
        assert len(relationships) == 2

    def test_id_always_present(self):
        assert CatResource._attributes["id"] == {"format": "id"}

    def test_attribute_options(self):
        assert PersonResource._attributes["date_joined"] == {"format": "date_with_timezone"}
        assert PersonResource._attribute_options("name") == {"format": "default"}
        assert PersonResource._attribute_options("date_joined") == {"format": "date_with_timezone"}

    def test_attributes_classmethod(self):
        class WidgetResource(Resource):
            pass

        WidgetResource.attributes("color", "size", format="plain")

        assert WidgetResource._attributes["color"] == {"format": "plain"}
        widget = WidgetResource(SimpleNamespace(id=1, color="red", size=3))
        assert widget.color == "red"
        widget.size = 4
        assert widget.model.size == 4

    def test_id_without_format_warns(self, log_warnings):
        class LegacyResource(Resource):
            pass

        LegacyResource.attribute("id")
        assert "Id without format is no longer supported" in log_warnings.text

    def test_custom_getter(self):
        post = PostResource(Post(title="Hello"))
        assert post.subject == "Hello"

    def test_updatable_fields_does_not_include_id(self):
        assert "id" not in CatResource.updatable_fields()

    def test_fields(self):
        assert CatResource.fields() == ["mother", "father", "id", "name", "breed"]

    def test_creatable_fields_include_id(self):
        assert "id" in CatResource.creatable_fields()

    def test_sortable_fields(self):
        assert CatResource.sortable_fields() == ["id", "name", "breed"]

    def test_overridden_field_lists(self):
        assert "author" not in PostResource.updatable_fields()
        assert "subject" not in PostResource.updatable_fields()
        assert "subject" not in PostResource.creatable_fields()
        assert "author" in PostResource.creatable_fields()
        assert "id" not in PostResource.sortable_fields()

    def test_fetchable_fields(self):
        post = PostResource(Post(title="Hello"))
        assert post.fetchable_fields() == PostResource.fields()


# ============================================================================
# Inheritance
# ============================================================================

class TestInheritance:

    def test_subclass_relationships_are_distinct(self):
        class ParentResource(Resource):
            title = Attribute()
            owner = ToOne(class_name="Person")

            class Meta:
                abstract = True

        class ChildResource(ParentResource):
            class Meta:
                model_name = "Post"

        ChildResource.has_many("tags")
        ChildResource.attribute("extra")

        assert "tags" not in ParentResource._relationships
        assert "extra" not in ParentResource._attributes
        assert not hasattr(ParentResource, "tags")
        assert ChildResource._relationships["owner"] is not ParentResource._relationships["owner"]
        assert ChildResource._relationships["owner"].parent_resource is ChildResource
        assert ParentResource._relationships["owner"].parent_resource is ParentResource

    def test_inherited_attributes_are_copies(self):
        assert FirmResource._attributes == {
            "id": {"format": "id"},
            "name": {},
            "address": {},
        }
        assert FirmResource._attributes is not FirmResource.__mro__[1]._attributes

    def test_model_hints_copied_not_shared(self):
        assert SpecialBaseResource._model_hints == {"person": "special_person"}
        assert SpecialPersonResource._model_hints == {"person": "special_people"}

    def test_meta_options_not_inherited(self):
        assert BaseResource._abstract
        assert not PersonResource._abstract
        assert my_api.MyNamespacedResource.module_path() == "my_api/"

    def test_derived_relationship_parent(self):
        relationship = my_api.MyNamespacedResource._relationships["related"]
        assert relationship.parent_resource is my_api.MyNamespacedResource
        assert relationship.options["parent_resource"] is my_api.MyNamespacedResource

    def test_relationship_parent(self):
        relationship = my_module.MyNamespacedResource._relationships["related"]
        assert relationship.parent_resource is my_module.MyNamespacedResource
        assert relationship.options["parent_resource"] is my_module.MyNamespacedResource


# ============================================================================
# Types & reserved names
# ============================================================================

class TestTypes:

    def test_type_derived_from_class_name(self):
        assert PersonResource._type == "people"
        assert CommentResource._type == "comments"

    def test_uncountable_type(self):
        assert PreferencesResource._type == "preferences"

    def test_irregular_type(self):
        assert api_v8.NumeroTelefoneResource._type == "numeros_telefone"

    def test_explicit_type(self):
        class LabelResource(Resource):
            class Meta:
                type = "stickers"
                model_name = "Tag"

        assert LabelResource._type == "stickers"

    def test_links_resource_warning(self, log_warnings):
        class LinksResource(Resource):
            pass

        assert "LinksResource` is a reserved resource name" in log_warnings.text
        assert LinksResource._type == "links"

    def test_reserved_key_warning(self, log_warnings):
        class BadlyNamedAttributesResource(Resource):
            pass

        BadlyNamedAttributesResource.attributes("type")
        assert "`type` is a reserved key in " in log_warnings.text

    def test_reserved_names_warning_can_be_disabled(self, log_warnings):
        from resourcery import ResourceConfig, configure

        configure(ResourceConfig(warn_on_reserved_names=False))

        class HrefsResource(Resource):
            pass

        assert log_warnings.text == ""


# ============================================================================
# Resource lookup
# ============================================================================

class TestResourceFor:

    def test_module_path(self):
        assert my_module.MyNamespacedResource.module_path() == "my_module/"
        assert PostResource.module_path() == ""

    def test_resource_for_root_resource(self):
        with pytest.raises(ResourceNotFoundFault) as exc_info:
            Resource.resource_for("related")
        assert "RelatedResource not registered" in exc_info.value.message

    def test_resource_for_with_namespaced_paths(self):
        assert Resource.resource_for("my_module/related") is my_module.RelatedResource
        assert PostResource.resource_for("my_module/related") is my_module.RelatedResource
        assert my_module.MyNamespacedResource.resource_for("my_module/related") is my_module.RelatedResource

    def test_resource_for_resource_does_not_exist_at_root(self):
        with pytest.raises(ResourceNotFoundFault):
            ArticleResource.resource_for("related")

    def test_resource_for_namespaced_resource(self):
        assert my_module.MyNamespacedResource.resource_for("related") is my_module.RelatedResource
        assert my_api.MyNamespacedResource.resource_for("related") is my_api.RelatedResource

    def test_resource_for_plural_and_class_name(self):
        assert Resource.resource_for("people") is PersonResource
        assert Resource.resource_for("Person") is PersonResource
        assert Resource.resource_for("preferences") is PreferencesResource

    def test_resource_for_irregular_namespaced(self):
        assert Resource.resource_for("api/v8/numeros_telefone") is api_v8.NumeroTelefoneResource

    def test_resource_for_model(self):
        assert PostResource.resource_for_model(Post(title="x")) is PostResource

    def test_resource_for_model_uses_hints(self):
        assert ArticleResource.resource_for_model(Post(title="x")) is ArticleResource
        assert SpecialPersonResource.resource_for_model(Person(name="x")) is SpecialPersonResource

    def test_resource_type_for(self):
        assert PostResource.resource_type_for(Post()) == "post"
        assert ArticleResource.resource_type_for(Post()) == "articles"

    def test_model_hint_with_resource_class(self):
        class HintedResource(Resource):
            class Meta:
                model_name = "Comment"
                add_model_hint = False

        assert HintedResource._model_hints == {}
        HintedResource.model_hint(model=Person, resource=PersonResource)
        assert HintedResource._model_hints == {"person": "people"}

    def test_model_hint_defaults(self):
        class DefaultHintResource(Resource):
            class Meta:
                model_name = "Comment"
                add_model_hint = False

        DefaultHintResource.model_hint()
        assert DefaultHintResource._model_hints == {"comment": "default_hints"}

    def test_as_parent_key(self):
        assert PostResource._as_parent_key() == "post_id"
        assert PersonResource._as_parent_key() == "person_id"
