"""Object file classification and identity extraction."""

from symstore.objects.inspector import inspect_file
from symstore.objects.magic import peek, sniff
from symstore.objects.parser import DefaultObjectParser, ObjectParser
from symstore.objects.types import ObjectFormat, ObjectIdentity, ParsedObject, ResourceType

__all__ = [
    "DefaultObjectParser",
    "ObjectFormat",
    "ObjectIdentity",
    "ObjectParser",
    "ParsedObject",
    "ResourceType",
    "inspect_file",
    "peek",
    "sniff",
]
