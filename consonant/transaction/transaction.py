from __future__ import annotations
import copy
import logging
from enum import Enum
from typing import TYPE_CHECKING, Any
from consonant.errors import InvalidTransactionStateError
from consonant.model import Commit, ClassDefinition, ensure_valid
from . actions import *
from . transaction_encoding import CONTENT_TYPE, encode_transaction

if TYPE_CHECKING:
    from consonant.service import Service

logger = logging.getLogger(__name__)

class TransactionState(str, Enum):
    BUILDING = "building"
    COMMITTING = "committing"
    DONE = "done"
    FAILED = "failed"

class Transaction:
    """Collects create and update actions against a source commit and commits them atomically.

    Each appended action gets the id of its position in the action log. Ids never change, so they can be
    used to refer to objects created earlier in the same transaction (see `update` and `action_reference`).
    A transaction is committed exactly once. After that, successful or not, it cannot be used anymore.
    Not safe for concurrent use.
    """
    __source:str|None
    __actions:list[Action]
    __state:TransactionState
    __result:Any

    def __init__(self, source:Commit|str|None=None):
        self.__source = None
        self.__actions = []
        self.__state = TransactionState.BUILDING
        self.__result = None
        if(source is not None):
            self.begin(source)

    @property
    def source(self) -> str|None:
        return self.__source
    @property
    def state(self) -> TransactionState:
        return self.__state
    @property
    def actions(self) -> tuple[Action, ...]:
        return tuple(self.__actions)
    @property
    def result(self) -> Any:
        return self.__result

    def __len__(self) -> int:
        return len(self.__actions)

    def _enforce_building(self, operation:str):
        if(self.__state != TransactionState.BUILDING):
            raise InvalidTransactionStateError(f"Cannot {operation}, transaction is {self.__state.value}.")

    def _enforce_begun(self, operation:str):
        self._enforce_building(operation)
        if(self.__source is None):
            raise InvalidTransactionStateError(f"Cannot {operation}, transaction has no source commit, call begin() first.")

    def begin(self, source:Commit|str) -> Transaction:
        '''Sets the commit the transaction applies to. Can be called again until the transaction is committed.'''
        self._enforce_building("begin")
        if(isinstance(source, Commit)):
            source = source.sha1
        if(not source):
            raise ValueError("source must be a commit or a non-empty sha1.")
        self.__source = source
        return self

    def create(self, klass:str, properties:dict[str, Any]|None=None, class_definition:ClassDefinition|None=None) -> int:
        '''Appends the creation of an object of class 'klass' and returns the id of the action.'''
        self._enforce_begun("create")
        properties = copy.deepcopy(properties) if properties is not None else {}
        if(class_definition is not None):
            ensure_valid(class_definition, properties)
        action_id = len(self.__actions)
        self.__actions.append(CreateAction(id=action_id, klass=klass, properties=properties))
        return action_id

    def update(self, target:str|int, properties:dict[str, Any]|None=None, class_definition:ClassDefinition|None=None) -> int:
        '''Appends an update of an existing object (by uuid), or of an object created earlier in this
        transaction (by the id of its create action). Returns the id of the action.'''
        self._enforce_begun("update")
        if(isinstance(target, bool)):
            raise TypeError("target must be a uuid or an action id.")
        if(isinstance(target, int)):
            if(target < 0 or target >= len(self.__actions) or not isinstance(self.__actions[target], CreateAction)):
                raise ValueError(f"Action {target} is not a create action of this transaction.")
            obj = action_reference(target)
        elif(isinstance(target, str) and target):
            obj = {"uuid": target}
        else:
            raise TypeError("target must be a uuid or an action id.")
        properties = copy.deepcopy(properties) if properties is not None else {}
        if(class_definition is not None):
            ensure_valid(class_definition, properties, partial=True)
        action_id = len(self.__actions)
        self.__actions.append(UpdateAction(id=action_id, object=obj, properties=properties))
        return action_id

    def encode(self, target:str, author:str, message:str, timestamp:float|None=None) -> str:
        '''Encodes the transaction as it is now, without committing it.'''
        if(self.__source is None):
            raise InvalidTransactionStateError("Cannot encode, transaction has no source commit, call begin() first.")
        return encode_transaction(self.__source, self.__actions, target, author, message, timestamp)

    async def commit(self, target:str, author:str, message:str, service:Service, timestamp:float|None=None) -> Any:
        '''Encodes the transaction and submits it. Returns whatever the service responds with.

        Transport errors are raised as they are. There are no retries, start a new transaction instead.
        '''
        self._enforce_begun("commit")
        self.__state = TransactionState.COMMITTING
        logger.debug(f"Committing transaction on '{self.__source}' with {len(self.__actions)} actions to '{target}'.")
        try:
            payload = self.encode(target, author, message, timestamp)
            self.__result = await service.submit_transaction(payload, CONTENT_TYPE)
        except Exception as e:
            self.__state = TransactionState.FAILED
            logger.error(f"Transaction on '{self.__source}' to '{target}' failed: {e}")
            raise
        self.__state = TransactionState.DONE
        return self.__result
