import ast
import keyword
import py_compile
import re
import tempfile
import unicodedata
from pathlib import Path

from pydantic import BaseModel
from upath import UPath

__all__ = (
    'sanitize_identifier',
    'sanitize_member_name',
    'sanitize_parameter_field_name',
    'write_mod',
    'write_text_mod',
)

# Public attributes of pydantic.BaseModel; a field with one of these names
# would shadow model behaviour.
BASE_MODEL_ATTRIBUTES = frozenset(
    name for name in dir(BaseModel) if not name.startswith('_')
)


def capitalize(input_string):
    if not input_string:
        return ''
    return input_string[0].upper() + input_string[1:]


def remove_accents(input_str):
    nfkd_form = unicodedata.normalize('NFKD', input_str)
    return ''.join(c for c in nfkd_form if not unicodedata.combining(c))


def sanitize_name_python_keywords(name: str) -> str:
    if keyword.iskeyword(name):
        return f'{name}_'
    return name


def sanitize_parameter_field_name(name: str) -> str:
    """Sanitize parameter or field names to be valid Python identifiers.

    - Replace spaces and hyphens with underscores
    - Remove other invalid characters
    - Ensure it doesn't start with a digit
    """
    if not name:
        raise ValueError('Name cannot be empty')

    sanitized = sanitize_name_python_keywords(name)
    sanitized = re.sub(r'[-\s.]+', '_', remove_accents(sanitized))
    sanitized = re.sub(r'[^A-Za-z0-9_]', '', sanitized)

    if sanitized and sanitized[0].isdigit():
        sanitized = '_' + sanitized
    return sanitized


def sanitize_member_name(name: str, reserved: frozenset[str] = frozenset()) -> str:
    """Sanitize a name used as a pydantic field, builder setter or local.

    On top of ``sanitize_parameter_field_name``:

    - names pydantic treats as private (leading underscore) get a ``field`` prefix
    - names of ``BaseModel`` attributes and ``reserved`` names get a ``_`` suffix
    """
    sanitized = sanitize_parameter_field_name(name)
    if not sanitized:
        sanitized = 'field'
    elif sanitized.startswith('_'):
        sanitized = 'field' + sanitized
    if sanitized in BASE_MODEL_ATTRIBUTES or sanitized in reserved:
        sanitized = f'{sanitized}_'
    return sanitized


def sanitize_identifier(name: str) -> str:
    """Convert a string into a valid PascalCase Python class name.

    - Replace spaces, hyphens and other separators with word breaks
    - Capitalize each word, keeping existing inner capitals (getTimeSeries -> GetTimeSeries)
    - Ensure it doesn't start with a digit
    """
    if not name:
        return 'UnnamedType'

    parts = re.sub(r'[^A-Za-z0-9]+', '_', remove_accents(name)).split('_')
    sanitized = ''.join(capitalize(part) for part in parts if part)

    if sanitized and sanitized[0].isdigit():
        sanitized = '_' + sanitized

    return sanitized or 'UnnamedType'


def validate_python_syntax(content: str) -> None:
    """Validate that the content is valid Python code.

    Raises:
        py_compile.PyCompileError: If the code is not valid Python.
    """
    with tempfile.NamedTemporaryFile(mode='w', suffix='.py', delete=False) as f:
        f.write(content)
        f.flush()
        temp_path = f.name

    try:
        py_compile.compile(temp_path, doraise=True)
    finally:
        Path(temp_path).unlink(missing_ok=True)


def write_text_mod(content: str, path: UPath | Path | str) -> None:
    """Validate and write Python source text to ``path``."""
    path = UPath(path)
    validate_python_syntax(content)

    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding='utf-8')


def write_mod(
    body: list[ast.stmt], path: UPath | Path | str, docstring: str | None = None
) -> str:
    """Write a list of AST statements to a Python file.

    This method:
    1. Creates an AST Module from the statements
    2. Fixes missing locations in the AST
    3. Unparses the AST to Python source code
    4. Validates the code by compiling it
    5. Writes the code to the specified file

    Returns:
        The written source code.

    Raises:
        py_compile.PyCompileError: If the generated code is not valid Python.
        OSError: If the file cannot be written.
    """
    if docstring:
        body = [ast.Expr(value=ast.Constant(value=docstring)), *body]

    mod = ast.Module(body=body, type_ignores=[])
    ast.fix_missing_locations(mod)

    file_content = ast.unparse(mod) + '\n'
    write_text_mod(file_content, path)
    return file_content
