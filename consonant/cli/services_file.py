from dataclasses import dataclass
import os
import tomlkit
from tomlkit import TOMLDocument, aot, item

# Functions to work with a services.toml file, which maps short aliases to service urls.
# Utilizes https://github.com/sdispater/tomlkit to work with TOML data.
#
# The expected toml format is:
# --------------------------
# [[services]]
# alias = "local"
# url = "http://localhost:8989" #url of the consonant service
# --------------------------

@dataclass
class ServiceAlias:
    alias:str
    url:str

def default_services_file_path() -> str:
    return os.path.join(os.path.expanduser("~"), ".consonant", "services.toml")

def load_services(toml_file_path:str) -> list[ServiceAlias]:
    if not os.path.exists(toml_file_path):
        return []
    doc = _read_toml_file(toml_file_path)
    return loads_services(doc)

def loads_services(toml:str|TOMLDocument) -> list[ServiceAlias]:
    if(isinstance(toml, str)):
        doc = _read_toml_string(toml)
    else:
        doc = toml
    services = doc.get("services", None)
    if services is None:
        return []
    return [ServiceAlias(alias=s["alias"], url=s["url"]) for s in services]

def find_service(toml_file_path:str, alias:str) -> ServiceAlias|None:
    return next((s for s in load_services(toml_file_path) if s.alias == alias), None)

def add_service(toml_file_path:str, service:ServiceAlias):
    if os.path.exists(toml_file_path):
        doc = _read_toml_file(toml_file_path)
    else:
        os.makedirs(os.path.dirname(os.path.abspath(toml_file_path)), exist_ok=True)
        doc = tomlkit.document()
    services = doc.get("services", None)
    if services is None:
        services = aot()
        doc.append("services", services)
    else:
        for s in services:
            if s["alias"] == service.alias:
                raise ValueError(f"Service with alias '{service.alias}' already exists.")
    services.append(item({
        "alias": service.alias,
        "url": service.url,
    }))
    _write_toml_file(toml_file_path, doc)

def resolve_service_url(toml_file_path:str, alias_or_url:str) -> str:
    '''Returns the url for an alias from the services file. Anything that looks like a url is returned as is.'''
    if "://" in alias_or_url:
        return alias_or_url
    service = find_service(toml_file_path, alias_or_url)
    if service is None:
        raise ValueError(f"Unknown service alias '{alias_or_url}'.")
    return service.url

def _read_toml_file(file_path) -> TOMLDocument:
    with open(file_path, 'r') as f:
        return _read_toml_string(f.read())

def _read_toml_string(toml_string) -> TOMLDocument:
    return tomlkit.loads(toml_string)

def _write_toml_file(file_path, doc:TOMLDocument):
    with open(file_path, 'w') as f:
        f.write(doc.as_string())
