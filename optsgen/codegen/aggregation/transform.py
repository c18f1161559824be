"""Per-operation transform from the operation model to a rendering context.

The transform is a pure function of one operation: it reads the shared,
read-only type mapper and naming resolver and never mutates the operation,
so operations can be transformed in any order or in parallel.
"""

import dataclasses
import logging
from collections.abc import Iterable

from optsgen.codegen.aggregation.builder import BuilderType, synthesize_builder
from optsgen.codegen.aggregation.call_site import (
    CallBinding,
    LocalBinding,
    SignaturePlan,
    adapt,
)
from optsgen.codegen.aggregation.classifier import classify
from optsgen.codegen.aggregation.naming import NamingResolver, ResolvedNames
from optsgen.codegen.aggregation.options import OptionsType, synthesize_options
from optsgen.codegen.types import MappedType, TypeMapper
from optsgen.config import ClientVariant
from optsgen.exceptions import (
    CodeGenerationError,
    NameCollisionError,
    UnmappableTypeError,
)
from optsgen.model import Operation, TypeRef

logger = logging.getLogger(__name__)

__all__ = [
    'OperationFailure',
    'OperationTransformer',
    'RenderContext',
    'TransformReport',
]


@dataclasses.dataclass(frozen=True)
class RenderContext:
    """Everything the emission stage needs for one operation."""

    operation: Operation
    uses_options: bool
    names: ResolvedNames
    signature: SignaturePlan
    local_bindings: tuple[LocalBinding, ...]
    options_type: OptionsType | None = None
    builder_type: BuilderType | None = None
    return_type: MappedType | None = None
    error_type: MappedType | None = None

    @property
    def mapped_types(self) -> tuple[MappedType, ...]:
        types = [b.type for b in self.local_bindings]
        types.extend(t for t in (self.return_type, self.error_type) if t is not None)
        return tuple(types)


@dataclasses.dataclass(frozen=True)
class OperationFailure:
    operation_name: str
    error: CodeGenerationError


@dataclasses.dataclass
class TransformReport:
    contexts: list[RenderContext] = dataclasses.field(default_factory=list)
    failures: list[OperationFailure] = dataclasses.field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.failures


class OperationTransformer:
    """Runs the aggregation transform for a generation run.

    Args:
        variant: The run's client variant; aggregation only happens under
            ``ClientVariant.OPTIONS``.
        type_mapper: Shared type-mapping rules.
        resolver: Naming resolver for the run.
    """

    def __init__(
        self,
        variant: ClientVariant,
        type_mapper: TypeMapper,
        resolver: NamingResolver,
    ):
        self.variant = variant
        self.type_mapper = type_mapper
        self.resolver = resolver

    def uses_options(self, operation: Operation) -> bool:
        if self.variant is not ClientVariant.OPTIONS:
            return False
        return classify(operation)

    def _map(self, operation: Operation, type_ref: TypeRef, label: str | None) -> MappedType:
        try:
            return self.type_mapper.map(type_ref)
        except UnmappableTypeError as e:
            raise e.for_parameter(operation.name, label) from e

    def transform(self, operation: Operation) -> RenderContext:
        """Transform one operation.

        Raises:
            UnmappableTypeError: If a parameter, return or error type cannot be mapped.
            NameCollisionError: If the operation's names cannot be made unique.
        """
        uses_options = self.uses_options(operation)
        names = self.resolver.resolve(operation, uses_options=uses_options)

        parameter_types = tuple(
            self._map(operation, p.type, p.name) for p in operation.parameters
        )
        return_type = (
            self._map(operation, operation.return_type, 'return type')
            if operation.return_type
            else None
        )
        error_type = (
            self._map(operation, operation.error_type, 'error type')
            if operation.error_type
            else None
        )

        options_type = builder_type = None
        if uses_options:
            options_type = synthesize_options(operation, names, parameter_types)
            builder_type = synthesize_builder(options_type)

        binding = CallBinding(
            operation=operation, uses_options=uses_options, options_type=options_type
        )
        plan = adapt(operation, binding, names, parameter_types)

        logger.debug(
            f'{operation.name}: '
            + (f'aggregated into {options_type.name}' if uses_options else 'flat signature')
        )
        return RenderContext(
            operation=operation,
            uses_options=uses_options,
            names=names,
            signature=plan.signature,
            local_bindings=plan.local_bindings,
            options_type=options_type,
            builder_type=builder_type,
            return_type=return_type,
            error_type=error_type,
        )

    def transform_operations(self, operations: Iterable[Operation]) -> TransformReport:
        """Transform every operation, collecting failures instead of stopping.

        Operations are independent; a failed one is reported and the rest
        are still transformed. When two operations end up defining the same
        module-level name, the later one is reported as failed.
        """
        report = TransformReport()
        owners: dict[str, str] = {}

        for operation in operations:
            try:
                context = self.transform(operation)
                for name in context.names.module_names:
                    if name in owners:
                        raise NameCollisionError(
                            operation.name, name, f"a name of operation '{owners[name]}'"
                        )
            except (UnmappableTypeError, NameCollisionError) as e:
                logger.error(f'Skipping operation {operation.name}: {e}')
                report.failures.append(OperationFailure(operation.name, e))
                continue

            for name in context.names.module_names:
                owners[name] = operation.name
            report.contexts.append(context)

        return report
