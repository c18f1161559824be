"""Code generation for optsgen.

Main Components:
    - Codegen: Runs the generation for one configured document
    - TypeMapper: Maps declared types to Python annotations
    - ModelGenerator: Emits pydantic models for the document's schemas
    - OperationTransformer: Decides per operation between a flat signature
      and an aggregated options type with a builder

Example:
    >>> from optsgen.codegen import Codegen
    >>> from optsgen.config import DocumentConfig
    >>>
    >>> Codegen(DocumentConfig(source='./api.yaml', output='./client')).generate()
"""

from optsgen.codegen.aggregation import OperationTransformer, RenderContext
from optsgen.codegen.ast_utils import ImportCollector
from optsgen.codegen.codegen import Codegen, GenerationResult
from optsgen.codegen.models import ModelGenerator
from optsgen.codegen.types import MappedType, TypeMapper

__all__ = [
    'Codegen',
    'GenerationResult',
    'ImportCollector',
    'MappedType',
    'ModelGenerator',
    'OperationTransformer',
    'RenderContext',
    'TypeMapper',
]
