import os
from enum import Enum
from pathlib import Path

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_FILENAMES = ['optsgen.yaml', 'optsgen.yml']


class ClientVariant(str, Enum):
    """Shape of the generated client functions.

    ``options`` aggregates the parameters of every operation that has any
    into one options value built through a fluent builder; ``flat`` keeps
    one function argument per parameter.
    """

    OPTIONS = 'options'
    FLAT = 'flat'


class DocumentConfig(BaseModel):
    """Represents a single document to be processed."""

    source: str = Field(..., description='Path or URL to the operation document.')

    base_url: str | None = Field(
        None,
        description='Base URL overriding the one declared in the document.',
    )

    output: str = Field(..., description='Output directory for the generated code.')

    models_file: str = Field(
        'models.py', description='File name for generated models.'
    )

    endpoints_file: str = Field(
        'endpoints.py', description='File name for generated endpoints.'
    )

    client_variant: ClientVariant = Field(
        ClientVariant.OPTIONS,
        description='Generate aggregated options with builders, or flat signatures.',
    )


class CodegenConfig(BaseSettings):
    model_config = SettingsConfigDict(env_prefix='OPTSGEN_')

    documents: list[DocumentConfig] = Field(
        ..., description='List of operation documents to process.'
    )


def load_yaml(path: str | Path) -> dict:
    import yaml

    return yaml.safe_load(Path(path).read_text())


def get_config(path: str | None = None) -> CodegenConfig:
    """Load configuration from a file or discover it in the working directory."""
    if path:
        return CodegenConfig.model_validate(load_yaml(path))

    cwd = os.getcwd()

    for filename in DEFAULT_FILENAMES:
        path = Path(cwd) / filename
        if path.exists():
            return CodegenConfig.model_validate(load_yaml(path))

    path = Path(os.getcwd()) / 'pyproject.toml'

    if path.exists():
        import tomllib

        pyproject = tomllib.loads(path.read_text())
        tools = pyproject.get('tool', {})

        if 'optsgen' in tools:
            return CodegenConfig.model_validate(tools['optsgen'])

    raise FileNotFoundError('config not found')
