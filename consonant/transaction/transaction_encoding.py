import time
from pydantic import BaseModel
from . actions import *

# Encodes a transaction into a single multipart/mixed payload:
#
#   Content-Type: multipart/mixed; boundary=CONSONANT
#
#   --CONSONANT
#   Content-Type: application/json
#
#   {"action":"begin","source":"<sha1>"}
#   --CONSONANT
#   Content-Type: application/json
#
#   {"action":"create","id":0,"class":"...","properties":{...}}
#   --CONSONANT
#   ...
#   --CONSONANT
#   Content-Type: application/json
#
#   {"action":"commit","target":"...","author":"...","author-date":"<seconds> +0000",...}
#   --CONSONANT--
#
# Actions are written in the order they were appended, the server applies them in that order.

BOUNDARY = "CONSONANT"
CONTENT_TYPE = "multipart/mixed"
PART_CONTENT_TYPE = "application/json"

def format_timestamp(seconds:float|None=None) -> str:
    if seconds is None:
        seconds = time.time()
    return f"{int(seconds)} +0000"

def encode_part(part:BaseModel, content_type:str=PART_CONTENT_TYPE) -> str:
    return f"Content-Type: {content_type}\n\n{part.model_dump_json(by_alias=True)}"

def encode_transaction(
        source:str,
        actions:list[Action],
        target:str,
        author:str,
        message:str,
        timestamp:float|None=None,
        ) -> str:
    date = format_timestamp(timestamp)
    commit = CommitAction(
        target=target,
        author=author,
        author_date=date,
        committer=author,
        committer_date=date,
        message=message)
    parts = [BeginAction(source=source), *actions, commit]
    delimiter = f"\n--{BOUNDARY}\n"
    preamble = f"Content-Type: {CONTENT_TYPE}; boundary={BOUNDARY}\n"
    return preamble + delimiter + delimiter.join(encode_part(part) for part in parts) + f"\n--{BOUNDARY}--\n"
