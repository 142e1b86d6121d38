"""Common literal values used across docbookgen.

These constants keep namespace URIs, format identifiers, and metadata file
names centralized so the writer, the generator, and tests can import the same
values without drifting. Intended for internal use within the docbookgen
package.

Examples
--------
>>> from docbookgen import _constants
>>> _constants.MANIFEST_TEMPLATE.format(key="qtcore")
'.docbookgen-qtcore-manifest.json'
>>> _constants.DOCBOOK_VERSION
'5.2'
"""

DB_NAMESPACE = "http://docbook.org/ns/docbook"
XLINK_NAMESPACE = "http://www.w3.org/1999/xlink"
XML_NAMESPACE = "http://www.w3.org/XML/1998/namespace"

DOCBOOK_VERSION = "5.2"
FORMAT_NAME = "DocBook"
FILE_EXTENSION = "xml"

MANIFEST_TEMPLATE = ".docbookgen-{key}-manifest.json"
