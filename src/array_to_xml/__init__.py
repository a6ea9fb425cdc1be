"""Array to XML.

Converts nested mappings and sequences into XML documents. Element names,
attributes, list item names, list flattening and CDATA sections are all
encoded in the mapping keys and values::

    to_string({"root": {"<thing@kind=a": [{"id": 1}, {"id": 2}]}})

Progressive API Disclosure:
- Level 1: Simple functions - to_string(), to_document()
- Level 2: Configured converter - ArrayToXML class
"""

__version__ = "0.1.0"
__author__ = "Array to XML Team"

# Progressive API disclosure - Level 1: Simple functions
# Progressive API disclosure - Level 2: Configured converter
from .api import ArrayToXML, serialize, to_document, to_string, to_xml

# Name mapper extension point
from .naming import FLATTEN, NameMapperRegistry, split_attributes, split_list_name

# Configuration and errors for advanced usage
from .shared.config import ConfigValidationError, ConverterConfig
from .shared.exceptions import (
    ConversionError,
    InvalidContentError,
    InvalidDocumentError,
    InvalidNameError,
    MaxDepthExceededError,
    RootMustBeAssociativeError,
)

__all__ = [
    # Version and metadata
    "__author__",
    "__version__",

    # Level 1: Simple conversion functions
    "to_string",
    "to_document",
    "to_xml",
    "serialize",

    # Level 2: Configured converter
    "ArrayToXML",

    # Key grammar and name mappers
    "FLATTEN",
    "NameMapperRegistry",
    "split_attributes",
    "split_list_name",

    # Configuration
    "ConverterConfig",
    "ConfigValidationError",

    # Errors
    "ConversionError",
    "InvalidContentError",
    "InvalidDocumentError",
    "InvalidNameError",
    "MaxDepthExceededError",
    "RootMustBeAssociativeError",
]
