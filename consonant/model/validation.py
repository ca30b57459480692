from __future__ import annotations
import re
from typing import Any, NamedTuple
from consonant.errors import ObjectValidationError
from . object_model import *

# Checks property values against the constraints of a class definition.
# Parsing never enforces these constraints, callers opt into validation with the functions here.

_TIMESTAMP_RE = re.compile(r"-?\d+ [+-]\d{4}")

ValidationIssue = NamedTuple("ValidationIssue",
    [('property', str),
     ('message', str)])

def _match_issue(patterns:list[str]|None, value:str, path:str, what:str) -> list[ValidationIssue]:
    '''Returns an issue unless the value fully matches one of the patterns. No patterns means anything goes.'''
    if not patterns:
        return []
    for pattern in patterns:
        try:
            if re.fullmatch(pattern, value) is not None:
                return []
        except re.error as e:
            return [ValidationIssue(path, f"invalid pattern '{pattern}' in schema: {e}")]
    return [ValidationIssue(path, f"{what} '{value}' does not match any of {patterns}")]

def validate_value(definition:PropertyDefinition, value:Any, path:str|None=None) -> list[ValidationIssue]:
    path = path or definition.name
    property_type = definition.type
    if property_type == PropertyType.BOOLEAN:
        if not isinstance(value, bool):
            return [ValidationIssue(path, f"expected a boolean but got {type(value).__name__}")]
    elif property_type == PropertyType.INTEGER:
        if isinstance(value, bool) or not isinstance(value, int):
            return [ValidationIssue(path, f"expected an integer but got {type(value).__name__}")]
    elif property_type == PropertyType.FLOAT:
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            return [ValidationIssue(path, f"expected a number but got {type(value).__name__}")]
    elif property_type == PropertyType.TIMESTAMP:
        if isinstance(value, bool) or not (isinstance(value, int) or (isinstance(value, str) and _TIMESTAMP_RE.fullmatch(value))):
            return [ValidationIssue(path, f"expected a timestamp but got '{value}'")]
    elif property_type == PropertyType.TEXT:
        if not isinstance(value, str):
            return [ValidationIssue(path, f"expected text but got {type(value).__name__}")]
        return _match_issue(definition.regex, value, path, "text")
    elif property_type == PropertyType.RAW:
        if not isinstance(value, dict) or not isinstance(value.get('content-type'), str):
            return [ValidationIssue(path, "expected raw data with a 'content-type'")]
        return _match_issue(definition.content_type_regex, value['content-type'], path, "content type")
    elif property_type == PropertyType.REFERENCE:
        if not isinstance(value, dict) or ('uuid' not in value and 'action' not in value):
            return [ValidationIssue(path, "expected a reference with a 'uuid' or an 'action'")]
    elif property_type == PropertyType.LIST:
        if not isinstance(value, list):
            return [ValidationIssue(path, f"expected a list but got {type(value).__name__}")]
        issues = []
        for index, element in enumerate(value):
            issues.extend(validate_value(definition.elements, element, f"{path}[{index}]"))
        return issues
    #unknown types are accepted as they are
    return []

def validate_properties(class_definition:ClassDefinition, properties:dict[str, Any], partial:bool=False) -> list[ValidationIssue]:
    '''Validates raw property values. With 'partial', missing properties are not reported (used for updates).'''
    issues = []
    for name, value in properties.items():
        definition = class_definition.get(name)
        if definition is None:
            issues.append(ValidationIssue(name, f"class '{class_definition.name}' has no such property"))
            continue
        if value is None and definition.optional:
            continue
        issues.extend(validate_value(definition, value))
    if not partial:
        for name, definition in class_definition.properties.items():
            if not definition.optional and name not in properties:
                issues.append(ValidationIssue(name, "required property is missing"))
    return issues

def validate_object(class_definition:ClassDefinition, obj:TypedObject) -> list[ValidationIssue]:
    if obj.klass != class_definition.name:
        return [ValidationIssue('', f"object is of class '{obj.klass}', not '{class_definition.name}'")]
    return validate_properties(class_definition, obj.values())

def ensure_valid(class_definition:ClassDefinition, properties:dict[str, Any]|TypedObject, partial:bool=False) -> None:
    if isinstance(properties, TypedObject):
        issues = validate_object(class_definition, properties)
    else:
        issues = validate_properties(class_definition, properties, partial)
    if issues:
        details = "; ".join(f"{issue.property}: {issue.message}" for issue in issues)
        raise ObjectValidationError(f"Invalid '{class_definition.name}' properties: {details}", issues)
