from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, NamedTuple

# Types that define the client-side data model of a Consonant service.
# Commits and refs anchor everything to a point in history and are immutable (named tuples),
# schemas and objects are plain data classes produced by the parsers in 'object_serialization.py'.

Sha1 = str
Uuid = str

class PropertyType(str, Enum):
    BOOLEAN = "boolean"
    INTEGER = "integer"
    FLOAT = "float"
    TEXT = "text"
    RAW = "raw"
    REFERENCE = "reference"
    TIMESTAMP = "timestamp"
    LIST = "list"

    @classmethod
    def is_known(cls, type_name:str) -> bool:
        return type_name in {t.value for t in cls}

#===================================================================================================
# Schema
#===================================================================================================
@dataclass
class PropertyDefinition:
    """Describes the type and the constraints of a single property in a class.

    `type` is kept as the plain string from the wire, so that definitions of types this client
    does not know about can still be represented. Compare it against `PropertyType` members.
    Only the fields that belong to the type are set, all others stay None:
    - list: `elements`, the definition of the list elements (shares the name of the list property)
    - raw: `content_type_regex`, an empty list means any content type is accepted
    - reference: `klass`, `schema` (None means the defining schema), `bidirectional`
    - text: `regex`, an empty list means no constraint
    """
    name:str
    type:str
    optional:bool = False
    elements:PropertyDefinition|None = None
    content_type_regex:list[str]|None = None
    klass:str|None = None
    schema:str|None = None
    bidirectional:str|None = None
    regex:list[str]|None = None

    @property
    def is_known_type(self) -> bool:
        return PropertyType.is_known(self.type)

@dataclass
class ClassDefinition:
    name:str
    properties:dict[str, PropertyDefinition] = field(default_factory=dict)

    def get(self, property_name:str) -> PropertyDefinition|None:
        return self.properties.get(property_name, None)

@dataclass
class Schema:
    name:str
    classes:dict[str, ClassDefinition] = field(default_factory=dict)

    def get(self, class_name:str) -> ClassDefinition|None:
        return self.classes.get(class_name, None)

    def reference_schema(self, definition:PropertyDefinition) -> str:
        '''Name of the schema the target class of a reference property is defined in.'''
        if(definition.schema):
            return definition.schema
        return self.name

#===================================================================================================
# Objects
#===================================================================================================
class _Absent:
    """Marker for a property that an object does not have."""
    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "ABSENT"

ABSENT = _Absent()

Property = NamedTuple("Property",
    [('name', str),
     ('value', Any)])

@dataclass
class TypedObject:
    uuid:Uuid
    klass:str
    properties:dict[str, Property] = field(default_factory=dict)

    def get(self, name:str) -> Any:
        prop = self.properties.get(name, None)
        if prop is None:
            return ABSENT
        return prop.value

    def has(self, name:str) -> bool:
        return name in self.properties

    def values(self) -> dict[str, Any]:
        return {name: prop.value for name, prop in self.properties.items()}

    def sorted_properties(self) -> list[Property]:
        return [self.properties[name] for name in sorted(self.properties)]

#===================================================================================================
# Version control
#===================================================================================================
class Commit(NamedTuple):
    sha1:Sha1
    author:str
    author_date:str
    committer:str
    committer_date:str
    parents:list[Sha1]
    subject:str
    service_url:str|None = None #url of the service the commit was loaded from, lookup only

Ref = NamedTuple("Ref",
    [('type', str), #usually "branch" or "tag"
     ('url_aliases', list[str]),
     ('head', Commit)])
