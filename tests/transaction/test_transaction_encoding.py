import re
from consonant.transaction import *
import helpers_transaction as helpers

def test_person_scenario():
    t = Transaction()
    t.begin("abc123")
    t.create("Person", {"name": "Ada"})
    t.update("9a41a2e0-2f5c-4a47-a6f0-3f0c3a4e2b10", {"name": "Ada L."})
    parts = helpers.parse_payload(t.encode("refs/heads/master", "Ada", "add+rename", timestamp=1418205011))
    assert parts == [
        {"action": "begin", "source": "abc123"},
        {"action": "create", "id": 0, "class": "Person", "properties": {"name": "Ada"}},
        {"action": "update", "id": 1, "object": {"uuid": "9a41a2e0-2f5c-4a47-a6f0-3f0c3a4e2b10"}, "properties": {"name": "Ada L."}},
        {"action": "commit", "target": "refs/heads/master",
         "author": "Ada", "author-date": "1418205011 +0000",
         "committer": "Ada", "committer-date": "1418205011 +0000",
         "message": "add+rename"},
    ]

def test_part_count_and_order():
    for n in [0, 1, 5, 20]:
        t = Transaction(helpers.SOURCE)
        for i in range(n):
            if i % 3 == 2:
                t.update(i - 2, {'index': i})
            else:
                t.create('Thing', {'index': i})
        parts = helpers.parse_payload(t.encode('master', 'Ada', 'many'))
        assert len(parts) == n + 2
        assert parts[0]['action'] == 'begin'
        assert parts[-1]['action'] == 'commit'
        for position, part in enumerate(parts[1:-1]):
            assert part['id'] == position
            assert part['properties'] == {'index': position}

def test_exact_layout():
    t = Transaction('abc')
    payload = t.encode('master', 'Ada', 'nothing', timestamp=7)
    assert payload == (
        'Content-Type: multipart/mixed; boundary=CONSONANT\n'
        '\n'
        '--CONSONANT\n'
        'Content-Type: application/json\n'
        '\n'
        '{"action":"begin","source":"abc"}\n'
        '--CONSONANT\n'
        'Content-Type: application/json\n'
        '\n'
        '{"action":"commit","target":"master","author":"Ada","author-date":"7 +0000",'
        '"committer":"Ada","committer-date":"7 +0000","message":"nothing"}\n'
        '--CONSONANT--\n')

def test_timestamp_defaults_to_now():
    t = Transaction(helpers.SOURCE)
    commit = helpers.parse_payload(t.encode('master', 'Ada', 'now'))[-1]
    assert re.fullmatch(r"\d+ \+0000", commit['author-date'])
    assert commit['author-date'] == commit['committer-date']

def test_format_timestamp():
    assert format_timestamp(1418205011.987) == "1418205011 +0000"
    assert re.fullmatch(r"\d+ \+0000", format_timestamp())

def test_encoding_does_not_seal():
    t = Transaction(helpers.SOURCE)
    t.create('Thing')
    t.encode('master', 'Ada', 'first')
    t.create('Thing')
    assert t.state == TransactionState.BUILDING
    assert len(helpers.parse_payload(t.encode('master', 'Ada', 'second'))) == 4

def test_encode_transaction_with_reference_to_created_object():
    actions = [
        CreateAction(id=0, klass='author', properties={'name': 'Ada'}),
        CreateAction(id=1, klass='book', properties={'author': action_reference(0)}),
    ]
    parts = helpers.parse_payload(encode_transaction('abc', actions, 'master', 'Ada', 'books', 0))
    assert parts[2]['properties'] == {'author': {'action': 0}}
    assert parts[2]['class'] == 'book'
