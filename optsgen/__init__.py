"""optsgen - Generate Python API clients with aggregated options and builders.

optsgen reads an operation document (schemas plus operations with ordered,
typed parameters) and writes a client package: pydantic models, httpx-based
endpoint functions and a small runtime. Every operation that takes
parameters gets an options model with one optional field per parameter and
a fluent builder; the endpoint function takes that options value.

Quick Start:
    >>> from optsgen import Codegen, DocumentConfig
    >>>
    >>> config = DocumentConfig(source='./api.yaml', output='./client')
    >>> Codegen(config).generate()

    Generated code is then used as:

    >>> params = GetTimeSeriesParams.builder().symbol('AAPL').interval('1day').build()
    >>> getTimeSeries(Configuration(), params)

CLI Usage:
    $ optsgen generate --config optsgen.yaml
    $ optsgen inspect ./api.yaml
"""

from importlib.metadata import PackageNotFoundError
from importlib.metadata import version as _package_version

from optsgen.codegen.codegen import Codegen, GenerationResult
from optsgen.config import ClientVariant, CodegenConfig, DocumentConfig, get_config
from optsgen.exceptions import (
    CodeGenerationError,
    ConfigurationError,
    EndpointGenerationError,
    NameCollisionError,
    OptsgenError,
    OutputError,
    SchemaError,
    SchemaLoadError,
    SchemaValidationError,
    UnmappableTypeError,
)
from optsgen.loader import DocumentLoader
from optsgen.model import Operation, OperationDocument, Parameter, TypeRef

__all__ = [
    # Main classes
    'Codegen',
    'DocumentLoader',
    'GenerationResult',
    # Operation model
    'Operation',
    'OperationDocument',
    'Parameter',
    'TypeRef',
    # Configuration
    'ClientVariant',
    'CodegenConfig',
    'DocumentConfig',
    'get_config',
    # Exceptions
    'OptsgenError',
    'SchemaError',
    'SchemaLoadError',
    'SchemaValidationError',
    'CodeGenerationError',
    'UnmappableTypeError',
    'NameCollisionError',
    'EndpointGenerationError',
    'ConfigurationError',
    'OutputError',
]

try:
    __version__ = _package_version('optsgen')
except PackageNotFoundError:
    __version__ = 'unknown'
