from typing import Any, Literal
from pydantic import BaseModel, ConfigDict, Field

# The JSON bodies of the parts of a transaction payload.
# Field order is the order in which the fields are written to the wire.

class BeginAction(BaseModel):
    action:Literal["begin"] = "begin"
    source:str

class CreateAction(BaseModel):
    model_config = ConfigDict(populate_by_name=True)
    action:Literal["create"] = "create"
    id:int
    klass:str = Field(alias="class")
    properties:dict[str, Any] = Field(default_factory=dict)

class UpdateAction(BaseModel):
    action:Literal["update"] = "update"
    id:int
    object:dict[str, Any] # {"uuid": ...} or {"action": <id of a create in the same transaction>}
    properties:dict[str, Any] = Field(default_factory=dict)

class CommitAction(BaseModel):
    model_config = ConfigDict(populate_by_name=True)
    action:Literal["commit"] = "commit"
    target:str
    author:str
    author_date:str = Field(alias="author-date")
    committer:str
    committer_date:str = Field(alias="committer-date")
    message:str

Action = CreateAction | UpdateAction

def action_reference(action_id:int) -> dict[str, Any]:
    '''Reference property value pointing at an object created earlier in the same transaction.'''
    return {"action": action_id}

def object_reference(uuid:str, schema:str|None=None, service:str|None=None) -> dict[str, Any]:
    '''Reference property value pointing at an existing object.'''
    reference = {"uuid": uuid}
    if schema is not None:
        reference["schema"] = schema
    if service is not None:
        reference["service"] = service
    return reference
