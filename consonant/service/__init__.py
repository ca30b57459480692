from . transport import Transport, HttpTransport
from . service import Service, urljoin
