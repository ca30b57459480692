import asyncio
import json
import logging
import os
from dataclasses import dataclass
import click
from dotenv import load_dotenv
from consonant.errors import ConsonantError
from consonant.model import *
from consonant.service import Service
from consonant.transaction import Transaction
from . import services_file as sf

#print logs to console
logging.basicConfig(level=logging.INFO)

# Command line tool to inspect a Consonant service and to apply transactions to it.
# It utilizes the 'click' library.

SERVICE_ENV_VAR = "CONSONANT_SERVICE"

@dataclass
class CliContext:
    verbose:bool
    service:str|None
    services_file_path:str

    def enforce_service_url(self) -> str:
        if self.service is None:
            raise click.ClickException(f"No service given, use --service or set {SERVICE_ENV_VAR}.")
        try:
            return sf.resolve_service_url(self.services_file_path, self.service)
        except ValueError as e:
            raise click.ClickException(str(e)) from e

def create_service(url:str) -> Service:
    return Service(url)

def _run(coro):
    try:
        return asyncio.run(coro)
    except ConsonantError as e:
        raise click.ClickException(str(e)) from e

def _print_json(data):
    print(json.dumps(data, indent=4))

async def _resolve_commit(service:Service, ref_or_sha:str) -> Commit:
    '''Resolves a ref name to its head, anything else is treated as a commit sha1.'''
    refs = await service.refs()
    if ref_or_sha in refs:
        return refs[ref_or_sha].head
    return await service.commit(ref_or_sha)

@click.group()
@click.pass_context
@click.option("--service", "-s", required=False, help=f"Service url or alias from the services file. Defaults to ${SERVICE_ENV_VAR}.")
@click.option("--services-file", required=False, help="Path of the services file. Defaults to ~/.consonant/services.toml.")
@click.option("--verbose", "-v", is_flag=True, help="Will print debug logs.")
def cli(ctx:click.Context, service:str|None, services_file:str|None, verbose:bool):
    load_dotenv()
    if(verbose):
        logging.getLogger().setLevel(logging.DEBUG)
    if(service is None):
        service = os.environ.get(SERVICE_ENV_VAR)
    if(services_file is None):
        services_file = sf.default_services_file_path()
    ctx.obj = CliContext(verbose=verbose, service=service, services_file_path=services_file)

#===========================================================
# read commands
#===========================================================
@cli.command()
@click.pass_context
def refs(ctx:click.Context):
    '''List the refs of the service.'''
    url = ctx.obj.enforce_service_url()

    async def ainit():
        async with create_service(url) as service:
            refs = await service.refs()
        print(f"{'name':<30} {'type':<10} {'head':<40}")
        for name, ref in refs.items():
            print(f"{name:<30} {ref.type:<10} {ref.head.sha1:<40}")

    _run(ainit())

@cli.command()
@click.pass_context
@click.argument("ref_or_sha")
def show(ctx:click.Context, ref_or_sha:str):
    '''Show a commit.'''
    url = ctx.obj.enforce_service_url()

    async def ainit():
        async with create_service(url) as service:
            commit = await _resolve_commit(service, ref_or_sha)
        _print_json(commit_to_json(commit))

    _run(ainit())

@cli.command()
@click.pass_context
@click.argument("ref_or_sha")
def schema(ctx:click.Context, ref_or_sha:str):
    '''Show the schema of a commit.'''
    url = ctx.obj.enforce_service_url()

    async def ainit():
        async with create_service(url) as service:
            commit = await _resolve_commit(service, ref_or_sha)
            schema = await service.schema(commit)
        _print_json(schema_to_json(schema))

    _run(ainit())

@cli.command()
@click.pass_context
@click.argument("ref_or_sha")
@click.option("--class", "klass", required=False, help="Only objects of this class.")
def objects(ctx:click.Context, ref_or_sha:str, klass:str|None):
    '''Show the objects of a commit.'''
    url = ctx.obj.enforce_service_url()

    async def ainit():
        async with create_service(url) as service:
            commit = await _resolve_commit(service, ref_or_sha)
            objects = await service.objects(commit, klass)
        if klass is None:
            _print_json({name: [object_to_json(o) for o in class_objects] for name, class_objects in objects.items()})
        else:
            _print_json([object_to_json(o) for o in objects])

    _run(ainit())

#===========================================================
# 'apply' command
#===========================================================
def _build_transaction(source:str, entries:list[dict], schema:Schema|None=None) -> Transaction:
    '''Builds a transaction from entries like {"create": "<class>", "properties": {...}} or {"update": <uuid or id>, "properties": {...}}.'''
    transaction = Transaction(source)
    created_classes:dict[int, str] = {}
    for index, entry in enumerate(entries):
        if not isinstance(entry, dict):
            raise click.ClickException(f"Entry {index} must be a JSON object but was: {entry}")
        properties = entry.get("properties", {})
        if not isinstance(properties, dict):
            raise click.ClickException(f"Entry {index}: 'properties' must be a JSON object.")
        try:
            _append_entry(transaction, entry, properties, created_classes, schema)
        except (ValueError, TypeError) as e:
            raise click.ClickException(f"Entry {index}: {e}") from e
    return transaction

def _append_entry(transaction:Transaction, entry:dict, properties:dict, created_classes:dict[int, str], schema:Schema|None):
    if "create" in entry:
        klass = entry["create"]
        class_definition = _get_class_definition(schema, klass)
        action_id = transaction.create(klass, properties, class_definition=class_definition)
        created_classes[action_id] = klass
    elif "update" in entry:
        target = entry["update"]
        class_definition = None
        if isinstance(target, int) and target in created_classes:
            class_definition = _get_class_definition(schema, created_classes[target])
        transaction.update(target, properties, class_definition=class_definition)
    else:
        raise click.ClickException(f"Entry must contain 'create' or 'update': {entry}")

def _get_class_definition(schema:Schema|None, klass:str) -> ClassDefinition|None:
    if schema is None:
        return None
    class_definition = schema.get(klass)
    if class_definition is None:
        raise click.ClickException(f"Class '{klass}' is not defined in schema '{schema.name}'.")
    return class_definition

@cli.command()
@click.pass_context
@click.argument("actions_file", type=click.Path(exists=True, dir_okay=False))
@click.option("--target", "-t", required=True, help="Ref to commit to.")
@click.option("--source", required=False, help="Commit sha1 the actions apply to. Defaults to the head of the target ref.")
@click.option("--author", "-a", required=True, help="Author of the commit.")
@click.option("--message", "-m", required=True, help="Commit message.")
@click.option("--validate", is_flag=True, help="Validate created objects against the schema of the source commit.")
def apply(ctx:click.Context, actions_file:str, target:str, source:str|None, author:str, message:str, validate:bool):
    '''Apply the actions from a JSON file in a single transaction.'''
    url = ctx.obj.enforce_service_url()
    with open(actions_file, 'r') as f:
        try:
            entries = json.load(f)
        except json.JSONDecodeError as e:
            raise click.ClickException(f"Actions file is not valid JSON: {e}") from e
    if not isinstance(entries, list):
        raise click.ClickException("Actions file must contain a JSON list.")

    async def ainit():
        async with create_service(url) as service:
            source_sha1 = source
            if source_sha1 is None:
                refs = await service.refs()
                if target not in refs:
                    raise click.ClickException(f"Unknown ref '{target}', use --source.")
                source_sha1 = refs[target].head.sha1
            schema = await service.schema(source_sha1) if validate else None
            transaction = _build_transaction(source_sha1, entries, schema)
            print(f"Committing {len(transaction)} actions on {source_sha1} to {target}...")
            result = await transaction.commit(target, author, message, service)
        _print_json(result)

    _run(ainit())

#===========================================================
# 'services' commands
#===========================================================
@cli.group()
def services():
    '''Manage service aliases.'''
    pass

@services.command("list")
@click.pass_context
def services_list(ctx:click.Context):
    for service in sf.load_services(ctx.obj.services_file_path):
        print(f"{service.alias:<20} {service.url}")

@services.command("add")
@click.pass_context
@click.argument("alias")
@click.argument("url")
def services_add(ctx:click.Context, alias:str, url:str):
    try:
        sf.add_service(ctx.obj.services_file_path, sf.ServiceAlias(alias, url))
    except ValueError as e:
        raise click.ClickException(str(e)) from e
    print(f"Added service '{alias}': {url}")

if __name__ == '__main__':
    cli(None)
