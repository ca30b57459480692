from . object_model import *
from . object_serialization import (property_definition_from_json, property_definition_to_json,
                                    class_definition_from_json, class_definition_to_json, schema_from_json, schema_to_json,
                                    property_from_json, object_from_json, object_to_json, objects_from_json,
                                    commit_from_json, commit_to_json, ref_from_json, ref_to_json, refs_from_json)
from . validation import ValidationIssue, validate_value, validate_properties, validate_object, ensure_valid
