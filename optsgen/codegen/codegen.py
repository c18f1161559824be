"""Generation run for one configured document.

``Codegen`` loads the operation document, writes the models module,
transforms every operation and writes the endpoints module, the runtime
module and a package ``__init__`` re-exporting the public names.
"""

import ast
import dataclasses
import logging
import py_compile
from pathlib import PurePath

from upath import UPath

from optsgen.codegen.aggregation.naming import NamingResolver
from optsgen.codegen.aggregation.transform import (
    OperationFailure,
    OperationTransformer,
    RenderContext,
)
from optsgen.codegen.ast_utils import ImportCollector, ImportDict, _all
from optsgen.codegen.builders import (
    EndpointFunctionFactory,
    build_builder_class,
    build_options_class,
)
from optsgen.codegen.models import ModelGenerator
from optsgen.codegen.runtime import RUNTIME_MODULE, RUNTIME_NAMES, render_runtime
from optsgen.codegen.types import TYPE_IMPORT_NAMES, TypeMapper
from optsgen.codegen.utils import write_mod, write_text_mod
from optsgen.config import DocumentConfig
from optsgen.exceptions import (
    CodeGenerationError,
    ConfigurationError,
    EndpointGenerationError,
    OutputError,
)
from optsgen.loader import DocumentLoader
from optsgen.model import OperationDocument

logger = logging.getLogger(__name__)

__all__ = ['Codegen', 'GenerationResult', 'reserved_names']

# Names the endpoints module imports besides models and runtime helpers.
_ENDPOINT_IMPORT_NAMES = TYPE_IMPORT_NAMES | {'BaseModel', 'ConfigDict', 'Field'}

# Runtime names re-exported by the generated package.
_PUBLIC_RUNTIME_NAMES = (
    'ApiError',
    'BuilderConsumedError',
    'Configuration',
    'MissingParameterError',
)


def reserved_names(type_mapper: TypeMapper) -> frozenset[str]:
    """Module-level names of the endpoints module that operations cannot take."""
    return type_mapper.model_names | RUNTIME_NAMES | _ENDPOINT_IMPORT_NAMES


@dataclasses.dataclass
class GenerationResult:
    """Outcome of a generation run.

    Attributes:
        files: The files written, in write order.
        failures: Operations that were skipped, with the reason.
    """

    files: list[UPath] = dataclasses.field(default_factory=list)
    failures: list[OperationFailure] = dataclasses.field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.failures


class Codegen:
    """Generates a client package for one document.

    Example:
        >>> config = DocumentConfig(source='./api.yaml', output='./client')
        >>> result = Codegen(config).generate()
        >>> result.files
    """

    def __init__(self, config: DocumentConfig, loader: DocumentLoader | None = None):
        self.config = config
        self._loader = loader or DocumentLoader()

    @property
    def models_module(self) -> str:
        return PurePath(self.config.models_file).stem

    @property
    def endpoints_module(self) -> str:
        return PurePath(self.config.endpoints_file).stem

    def _resolve_base_url(self, document: OperationDocument) -> str:
        # Config base_url takes precedence
        base_url = self.config.base_url or document.base_url
        if not base_url:
            raise ConfigurationError(
                'No base URL: set base_url in the document or the configuration',
                field='base_url',
            )
        return base_url

    def _write(self, path: UPath, body: list[ast.stmt] | str) -> UPath:
        try:
            if isinstance(body, str):
                write_text_mod(body, path)
            else:
                write_mod(body, path)
        except py_compile.PyCompileError as e:
            raise CodeGenerationError(
                'Generated module is not valid Python', context=str(path), cause=e
            ) from e
        except OSError as e:
            raise OutputError(str(path), cause=e) from e
        logger.info(f'Wrote {path}')
        return path

    def _build_operation(
        self, context: RenderContext
    ) -> tuple[list[ast.stmt], ImportDict]:
        body: list[ast.stmt] = []
        imports: ImportDict = {}

        if context.uses_options:
            options_class, options_imports = build_options_class(
                context.options_type, context.builder_type
            )
            builder_class, builder_imports = build_builder_class(context.builder_type)
            body += [options_class, builder_class]
            for extra in (options_imports, builder_imports):
                for module, names in extra.items():
                    imports.setdefault(module, set()).update(names)

        functions, function_imports = EndpointFunctionFactory(
            context, models_module=f'.{self.models_module}'
        ).build()
        body += functions
        for module, names in function_imports.items():
            imports.setdefault(module, set()).update(names)
        return body, imports

    def _build_endpoints_module(
        self, contexts: list[RenderContext], failures: list[OperationFailure]
    ) -> tuple[list[ast.stmt], list[str]]:
        import_collector = ImportCollector()
        body: list[ast.stmt] = []
        names: list[str] = []

        for context in contexts:
            try:
                statements, imports = self._build_operation(context)
            except EndpointGenerationError as e:
                logger.error(f'Skipping operation {context.operation.name}: {e}')
                failures.append(OperationFailure(context.operation.name, e))
                continue

            body += statements
            import_collector.add_imports(imports)
            names.extend(context.names.module_names)

        return [*import_collector.to_ast(), _all(sorted(names)), *body], names

    def _build_init_module(
        self, document: OperationDocument, model_names: list[str], endpoint_names: list[str]
    ) -> list[ast.stmt]:
        import_collector = ImportCollector()
        for module, names in (
            (RUNTIME_MODULE, _PUBLIC_RUNTIME_NAMES),
            (self.models_module, model_names),
            (self.endpoints_module, endpoint_names),
        ):
            if names:
                import_collector.add_imports({f'.{module}': set(names)})
        exported = sorted({*_PUBLIC_RUNTIME_NAMES, *model_names, *endpoint_names})
        return [
            ast.Expr(value=ast.Constant(value=f'{document.title} client generated by optsgen.')),
            *import_collector.to_ast(),
            _all(exported),
        ]

    def generate(self) -> GenerationResult:
        """Run the generation.

        Operations that cannot be transformed or emitted are skipped and
        reported in the result; the rest of the client is still written.

        Raises:
            SchemaError: If the document cannot be loaded or is invalid.
            ConfigurationError: If no base URL is known.
            CodeGenerationError: If a schema property type cannot be mapped.
            OutputError: If a file cannot be written.
        """
        document = self._loader.load(self.config.source)
        base_url = self._resolve_base_url(document)

        directory = UPath(self.config.output)
        try:
            directory.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise OutputError(str(directory), cause=e) from e

        result = GenerationResult()
        type_mapper = TypeMapper(document.schemas)

        models_body, model_names = ModelGenerator(document.schemas, type_mapper).build_module()
        result.files.append(self._write(directory / self.config.models_file, models_body))

        transformer = OperationTransformer(
            self.config.client_variant,
            type_mapper,
            NamingResolver(reserved_names(type_mapper)),
        )
        report = transformer.transform_operations(document.operations)
        result.failures.extend(report.failures)

        endpoints_body, endpoint_names = self._build_endpoints_module(
            report.contexts, result.failures
        )
        result.files.append(
            self._write(directory / self.config.endpoints_file, endpoints_body)
        )
        result.files.append(
            self._write(directory / f'{RUNTIME_MODULE}.py', render_runtime(base_url))
        )
        result.files.append(
            self._write(
                directory / '__init__.py',
                self._build_init_module(document, model_names, endpoint_names),
            )
        )

        if result.failures:
            logger.warning(
                f'{len(result.failures)} of {len(document.operations)} operations '
                f'were skipped for {self.config.source}'
            )
        return result
