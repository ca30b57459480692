from . actions import (BeginAction, CreateAction, UpdateAction, CommitAction, Action,
                       action_reference, object_reference)
from . transaction_encoding import BOUNDARY, CONTENT_TYPE, PART_CONTENT_TYPE, format_timestamp, encode_part, encode_transaction
from . transaction import Transaction, TransactionState
