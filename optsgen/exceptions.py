"""Custom exceptions for optsgen.

This module defines a hierarchy of exceptions used throughout optsgen to
provide clear, actionable error messages for different failure scenarios.
"""


class OptsgenError(Exception):
    """Base exception for all optsgen errors.

    All exceptions raised by optsgen inherit from this class, making it easy
    to catch all optsgen-related errors with a single except clause.

    Example:
        try:
            codegen.generate()
        except OptsgenError as e:
            print(f"optsgen error: {e}")
    """

    def __init__(self, message: str, *args, **kwargs):
        self.message = message
        super().__init__(message, *args, **kwargs)


class SchemaError(OptsgenError):
    """Base exception for operation document errors."""

    pass


class SchemaLoadError(SchemaError):
    """Failed to load an operation document from a source.

    Attributes:
        source: The source path or URL that failed to load.
        cause: The underlying exception that caused the failure.
    """

    def __init__(self, source: str, cause: Exception | None = None):
        self.source = source
        self.cause = cause
        message = f"Failed to load document from '{source}'"
        if cause:
            message += f': {cause}'
        super().__init__(message)


class SchemaValidationError(SchemaError):
    """The loaded content is not a valid operation document.

    Attributes:
        source: The source path or URL of the invalid document.
        errors: List of validation error messages.
    """

    def __init__(self, source: str, errors: list[str] | None = None):
        self.source = source
        self.errors = errors or []
        message = f"Document validation failed for '{source}'"
        if errors:
            message += f': {"; ".join(errors)}'
        super().__init__(message)


class CodeGenerationError(OptsgenError):
    """Error during code generation.

    Attributes:
        context: Additional context about what was being generated.
        cause: The underlying exception that caused the failure.
    """

    def __init__(
        self, message: str, context: str | None = None, cause: Exception | None = None
    ):
        self.context = context
        self.cause = cause
        full_message = message
        if context:
            full_message = f'{message} (while generating {context})'
        if cause:
            full_message += f': {cause}'
        super().__init__(full_message)


class UnmappableTypeError(CodeGenerationError):
    """A declared type cannot be resolved by the type-mapping rules.

    Raised by the TypeMapper without operation context; the transform
    re-raises it through ``for_parameter`` so the report names the
    operation and parameter that carried the type.

    Attributes:
        type_ref: Human readable rendering of the offending type reference.
        reason: Why the type could not be mapped.
        operation_name: The operation being transformed, if known.
        parameter_name: The parameter carrying the type, if known.
    """

    def __init__(
        self,
        type_ref: str,
        reason: str,
        operation_name: str | None = None,
        parameter_name: str | None = None,
    ):
        self.type_ref = type_ref
        self.reason = reason
        self.operation_name = operation_name
        self.parameter_name = parameter_name
        message = f"Cannot map type {type_ref}: {reason}"
        if parameter_name:
            message += f" (parameter '{parameter_name}')"
        super().__init__(message, context=operation_name)

    def for_parameter(
        self, operation_name: str, parameter_name: str | None
    ) -> 'UnmappableTypeError':
        return UnmappableTypeError(
            self.type_ref,
            self.reason,
            operation_name=operation_name,
            parameter_name=parameter_name,
        )


class NameCollisionError(CodeGenerationError):
    """A derived name could not be made unique.

    Attributes:
        operation_name: The operation whose transform failed.
        identifier: The offending identifier.
        reason: What the identifier collided with.
    """

    def __init__(self, operation_name: str, identifier: str, reason: str):
        self.operation_name = operation_name
        self.identifier = identifier
        self.reason = reason
        super().__init__(
            f"Name '{identifier}' collides with {reason}", context=operation_name
        )


class EndpointGenerationError(CodeGenerationError):
    """Error generating an endpoint function.

    Attributes:
        operation_id: The name of the operation.
        method: The HTTP method of the endpoint.
        path: The URL path of the endpoint.
    """

    def __init__(
        self,
        operation_id: str,
        method: str | None = None,
        path: str | None = None,
        cause: Exception | None = None,
    ):
        self.operation_id = operation_id
        self.method = method
        self.path = path
        message = f"Failed to generate endpoint '{operation_id}'"
        if method and path:
            message += f' ({method.upper()} {path})'
        super().__init__(message, context=operation_id, cause=cause)


class ConfigurationError(OptsgenError):
    """Error in configuration.

    Attributes:
        config_path: The path to the configuration file, if applicable.
        field: The specific configuration field that is invalid.
    """

    def __init__(
        self, message: str, config_path: str | None = None, field: str | None = None
    ):
        self.config_path = config_path
        self.field = field
        full_message = message
        if config_path:
            full_message = f"{message} in '{config_path}'"
        if field:
            full_message += f' (field: {field})'
        super().__init__(full_message)


class OutputError(OptsgenError):
    """Error writing generated output.

    Attributes:
        output_path: The path where output was being written.
        cause: The underlying exception that caused the failure.
    """

    def __init__(self, output_path: str, cause: Exception | None = None):
        self.output_path = output_path
        self.cause = cause
        message = f"Failed to write output to '{output_path}'"
        if cause:
            message += f': {cause}'
        super().__init__(message)
