import logging
from typing import Any
from consonant.errors import MalformedSchemaError
from . object_model import *

logger = logging.getLogger(__name__)

# Converts between the JSON wire format of a Consonant service and the object model.
# The wire format uses hyphenated field names ('content-type-regex', 'author-date', ...), the object model
# does not. That is the only normalization done here. Unknown extra fields are ignored.

JSON = dict[str, Any]

def _as_string_list(value:Any) -> list[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    return list(value)

def _enforce_mapping(data:Any, what:str) -> JSON:
    if not isinstance(data, dict):
        raise MalformedSchemaError(f"Expected {what} to be a mapping but got {type(data).__name__}")
    return data

#===================================================================================================
# Property definitions, class definitions, and schemas
#===================================================================================================
def property_definition_from_json(data:JSON, name:str) -> PropertyDefinition:
    data = _enforce_mapping(data, f"definition of property '{name}'")
    if 'type' not in data:
        raise MalformedSchemaError(f"Definition of property '{name}' has no type")
    property_type = data['type']
    definition = PropertyDefinition(name, property_type, bool(data.get('optional', False)))

    if property_type == PropertyType.LIST:
        if data.get('elements') is None:
            raise MalformedSchemaError(f"List property '{name}' does not define its elements")
        # the elements are described under the name of the list property itself
        definition.elements = property_definition_from_json(data['elements'], name)
    elif property_type == PropertyType.RAW:
        definition.content_type_regex = _as_string_list(data.get('content-type-regex'))
    elif property_type == PropertyType.REFERENCE:
        definition.klass = data.get('class', None)
        definition.schema = data.get('schema') or None
        definition.bidirectional = data.get('bidirectional') or None
    elif property_type == PropertyType.TEXT:
        definition.regex = _as_string_list(data.get('regex'))
    elif property_type in (PropertyType.BOOLEAN, PropertyType.INTEGER, PropertyType.FLOAT, PropertyType.TIMESTAMP):
        pass
    else:
        logger.debug(f"Property '{name}' has unknown type '{property_type}', keeping a minimal definition.")
    return definition

def property_definition_to_json(definition:PropertyDefinition) -> JSON:
    data = {'type': definition.type, 'optional': definition.optional}
    if definition.elements is not None:
        data['elements'] = property_definition_to_json(definition.elements)
    if definition.content_type_regex is not None:
        data['content-type-regex'] = list(definition.content_type_regex)
    if definition.klass is not None:
        data['class'] = definition.klass
    if definition.schema is not None:
        data['schema'] = definition.schema
    if definition.bidirectional is not None:
        data['bidirectional'] = definition.bidirectional
    if definition.regex is not None:
        data['regex'] = list(definition.regex)
    return data

def class_definition_from_json(data:JSON, name:str) -> ClassDefinition:
    data = _enforce_mapping(data, f"class '{name}'")
    properties = {}
    for property_name, property_data in (data.get('properties') or {}).items():
        properties[property_name] = property_definition_from_json(property_data, property_name)
    return ClassDefinition(name, properties)

def class_definition_to_json(class_definition:ClassDefinition) -> JSON:
    return {'properties': {name: property_definition_to_json(definition)
                           for name, definition in class_definition.properties.items()}}

def schema_from_json(data:JSON) -> Schema:
    data = _enforce_mapping(data, "schema")
    classes = {}
    # the wire format does not repeat the class name inside the class body
    for class_name, class_data in (data.get('classes') or {}).items():
        classes[class_name] = class_definition_from_json(class_data, class_name)
    return Schema(data.get('name'), classes)

def schema_to_json(schema:Schema) -> JSON:
    return {
        'name': schema.name,
        'classes': {name: class_definition_to_json(class_definition)
                    for name, class_definition in schema.classes.items()},
        }

#===================================================================================================
# Objects and properties
#===================================================================================================
def property_from_json(data:Any, name:str) -> Property:
    return Property(name, data)

def object_from_json(data:JSON, klass:str|None=None) -> TypedObject:
    '''Parses a single object. If no class name is given, the 'class' field of the object is used.'''
    if klass is None:
        klass = data.get('class', None)
    properties = {}
    for property_name, property_data in (data.get('properties') or {}).items():
        properties[property_name] = property_from_json(property_data, property_name)
    return TypedObject(data['uuid'], klass, properties)

def object_to_json(obj:TypedObject) -> JSON:
    return {
        'uuid': obj.uuid,
        'class': obj.klass,
        'properties': {name: prop.value for name, prop in obj.properties.items()},
        }

def objects_from_json(data:JSON|list, klass:str|None=None) -> dict[str, list[TypedObject]] | list[TypedObject]:
    '''Parses either objects grouped by class name, or a flat list of objects (of class 'klass', if given).'''
    if isinstance(data, list):
        return [object_from_json(object_data, klass) for object_data in data]
    objects = {}
    for class_name, class_objects in data.items():
        objects[class_name] = [object_from_json(object_data, class_name) for object_data in class_objects]
    return objects

#===================================================================================================
# Commits and refs
#===================================================================================================
def commit_from_json(data:JSON, service_url:str|None=None) -> Commit:
    return Commit(
        data['sha1'],
        data.get('author'),
        data.get('author-date'),
        data.get('committer'),
        data.get('committer-date'),
        list(data.get('parents') or []),
        data.get('subject'),
        service_url)

def commit_to_json(commit:Commit) -> JSON:
    return {
        'sha1': commit.sha1,
        'author': commit.author,
        'author-date': commit.author_date,
        'committer': commit.committer,
        'committer-date': commit.committer_date,
        'parents': list(commit.parents),
        'subject': commit.subject,
        }

def ref_from_json(data:JSON, service_url:str|None=None) -> Ref:
    return Ref(
        data.get('type'),
        list(data.get('url-aliases') or []),
        commit_from_json(data['head'], service_url))

def ref_to_json(ref:Ref) -> JSON:
    return {
        'type': ref.type,
        'url-aliases': list(ref.url_aliases),
        'head': commit_to_json(ref.head),
        }

def refs_from_json(data:JSON, service_url:str|None=None) -> dict[str, Ref]:
    return {name: ref_from_json(ref_data, service_url) for name, ref_data in data.items()}
