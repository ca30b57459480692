import pytest
from consonant.errors import MalformedSchemaError
from consonant.model import *
import helpers_model as helpers

def test_defaults_for_simple_types():
    for type_name in ['boolean', 'integer', 'float', 'timestamp']:
        definition = property_definition_from_json({'type': type_name}, 'p')
        assert definition.name == 'p'
        assert definition.type == type_name
        assert definition.optional == False
        assert definition.elements is None
        assert definition.content_type_regex is None
        assert definition.klass is None
        assert definition.schema is None
        assert definition.bidirectional is None
        assert definition.regex is None

def test_optional():
    definition = property_definition_from_json({'type': 'integer', 'optional': True}, 'pages')
    assert definition.optional == True

def test_text():
    definition = property_definition_from_json({'type': 'text'}, 'name')
    assert definition.type == PropertyType.TEXT
    assert definition.regex == []

    definition = property_definition_from_json({'type': 'text', 'regex': ['^a', 'b$']}, 'name')
    assert definition.regex == ['^a', 'b$']

def test_raw_maps_hyphenated_content_type_regex():
    definition = property_definition_from_json({'type': 'raw'}, 'cover')
    assert definition.content_type_regex == []

    definition = property_definition_from_json({'type': 'raw', 'content-type-regex': ['image/.*']}, 'cover')
    assert definition.content_type_regex == ['image/.*']
    assert definition.regex is None

def test_reference():
    definition = property_definition_from_json({'type': 'reference', 'class': 'author'}, 'author')
    assert definition.klass == 'author'
    assert definition.schema is None
    assert definition.bidirectional is None

    definition = property_definition_from_json(
        {'type': 'reference', 'class': 'author', 'schema': 'other', 'bidirectional': 'books'}, 'author')
    assert definition.klass == 'author'
    assert definition.schema == 'other'
    assert definition.bidirectional == 'books'

def test_list_elements_share_the_name():
    definition = property_definition_from_json({'type': 'list', 'elements': {'type': 'integer'}}, 'numbers')
    assert definition.type == PropertyType.LIST
    assert definition.elements.type == PropertyType.INTEGER
    assert definition.elements.name == 'numbers'

def test_deeply_nested_lists():
    data = {'type': 'list', 'elements':
               {'type': 'list', 'elements':
                   {'type': 'list', 'elements':
                       {'type': 'reference', 'class': 'book', 'optional': True}}}}
    definition = property_definition_from_json(data, 'shelves')
    assert definition.type == 'list'
    assert definition.elements.type == 'list'
    assert definition.elements.elements.type == 'list'
    leaf = definition.elements.elements.elements
    assert leaf.type == 'reference'
    assert leaf.klass == 'book'
    assert leaf.optional == True
    assert leaf.elements is None

def test_list_without_elements_fails():
    with pytest.raises(MalformedSchemaError):
        property_definition_from_json({'type': 'list'}, 'numbers')
    with pytest.raises(MalformedSchemaError):
        property_definition_from_json({'type': 'list', 'elements': {'type': 'list'}}, 'numbers')

def test_missing_type_fails():
    with pytest.raises(MalformedSchemaError):
        property_definition_from_json({'optional': True}, 'p')
    with pytest.raises(MalformedSchemaError):
        property_definition_from_json("text", 'p')

def test_unknown_type_gives_minimal_definition():
    data = {'type': 'geolocation', 'optional': True, 'regex': ['x'], 'class': 'y', 'elements': {'type': 'text'}}
    definition = property_definition_from_json(data, 'location')
    assert definition == PropertyDefinition('location', 'geolocation', True)
    assert not definition.is_known_type

def test_fields_of_other_types_are_ignored():
    definition = property_definition_from_json({'type': 'integer', 'regex': ['\\d+'], 'class': 'x'}, 'p')
    assert definition.regex is None
    assert definition.klass is None

def test_reencoding_preserves_definitions():
    for class_data in helpers.FULL_SCHEMA['classes'].values():
        for name, data in class_data['properties'].items():
            definition = property_definition_from_json(data, name)
            encoded = property_definition_to_json(definition)
            assert property_definition_from_json(encoded, name) == definition

def test_reencoding_uses_wire_names():
    definition = property_definition_from_json({'type': 'raw', 'content-type-regex': ['text/plain']}, 'p')
    assert property_definition_to_json(definition) == {'type': 'raw', 'optional': False, 'content-type-regex': ['text/plain']}
    definition = property_definition_from_json({'type': 'reference', 'class': 'author'}, 'p')
    assert property_definition_to_json(definition) == {'type': 'reference', 'optional': False, 'class': 'author'}
