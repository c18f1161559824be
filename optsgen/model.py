"""Resolved operation model consumed by the generator.

The models are frozen: an operation document is read once, validated, and
then shared read-only by every stage of the generation run. Keys are
accepted in camelCase (``returnType``, ``collectionFormat``) as well as
snake_case.
"""

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

__all__ = [
    'CollectionFormat',
    'Operation',
    'OperationDocument',
    'Parameter',
    'ParameterLocation',
    'SchemaDefinition',
    'TypeRef',
]


class _Frozen(BaseModel):
    model_config = ConfigDict(
        frozen=True,
        populate_by_name=True,
        alias_generator=to_camel,
        extra='forbid',
    )


class ParameterLocation(str, Enum):
    PATH = 'path'
    QUERY = 'query'
    HEADER = 'header'
    BODY = 'body'
    FORM = 'form'


class CollectionFormat(str, Enum):
    """How an array parameter is serialised on the wire."""

    CSV = 'csv'
    SSV = 'ssv'
    TSV = 'tsv'
    PIPES = 'pipes'
    MULTI = 'multi'


class TypeRef(_Frozen):
    """A reference to a declared type.

    ``ref`` names an entry of ``OperationDocument.schemas``; everything else
    follows JSON schema vocabulary. An empty reference means "any value".
    """

    type: str | None = None
    format: str | None = None
    items: 'TypeRef | None' = None
    additional_properties: 'TypeRef | None' = None
    ref: str | None = Field(default=None, alias='$ref')
    enum: tuple[str | int, ...] | None = None
    nullable: bool = False

    def describe(self) -> str:
        if self.ref:
            return f"$ref '{self.ref}'"
        if self.type == 'array':
            inner = self.items.describe() if self.items else '?'
            return f'array<{inner}>'
        if self.type and self.format:
            return f'{self.type}({self.format})'
        return self.type or 'any'


class Parameter(_Frozen):
    name: str
    location: ParameterLocation = Field(alias='in')
    required: bool = False
    type: TypeRef = Field(default_factory=TypeRef)
    collection_format: CollectionFormat | None = None
    description: str | None = None


class Operation(_Frozen):
    name: str
    method: str = 'get'
    path: str = '/'
    parameters: tuple[Parameter, ...] = ()
    return_type: TypeRef | None = None
    error_type: TypeRef | None = None
    description: str | None = None


class SchemaDefinition(_Frozen):
    description: str | None = None
    properties: dict[str, TypeRef] = Field(default_factory=dict)
    required: tuple[str, ...] = ()


class OperationDocument(_Frozen):
    title: str = 'API'
    base_url: str | None = None
    schemas: dict[str, SchemaDefinition] = Field(default_factory=dict)
    operations: tuple[Operation, ...] = ()

    def operation(self, name: str) -> Operation:
        for operation in self.operations:
            if operation.name == name:
                return operation
        raise KeyError(name)

    @classmethod
    def from_content(cls, content: Any) -> 'OperationDocument':
        return cls.model_validate(content)
