from . errors import *
from . model import *
from . transaction import (Transaction, TransactionState, CreateAction, UpdateAction,
                           action_reference, object_reference, encode_transaction)
from . service import Service, Transport, HttpTransport, urljoin

__version__ = "0.1.0"
