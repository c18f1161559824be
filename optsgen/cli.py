import logging
import traceback
from typing import Annotated

import typer
from rich.console import Console
from rich.markup import escape
from rich.progress import Progress, SpinnerColumn, TextColumn
from rich.table import Table

from optsgen.codegen.aggregation import NamingResolver, OperationTransformer
from optsgen.codegen.codegen import Codegen, reserved_names
from optsgen.codegen.types import TypeMapper
from optsgen.config import ClientVariant, get_config
from optsgen.exceptions import OptsgenError
from optsgen.loader import DocumentLoader

console = Console()
app = typer.Typer(
    name='optsgen',
    help='Generate Python API clients with aggregated options and builders',
    no_args_is_help=True,
)


@app.callback()
def main(
    verbose: Annotated[
        bool, typer.Option('--verbose', '-v', help='Show debug logging.')
    ] = False,
) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format='%(levelname)s %(name)s: %(message)s',
    )


@app.command()
def generate(
    config: Annotated[
        str | None,
        typer.Option('--config', '-c', help='Path to configuration file (YAML)'),
    ] = None,
) -> None:
    """Generate client packages from configuration.

    If no config file is specified, optsgen.yaml / optsgen.yml or the
    [tool.optsgen] table of pyproject.toml in the current directory is used.

    Examples:
        optsgen generate
        optsgen generate --config my-config.yaml
    """
    try:
        codegen_config = get_config(config)
    except FileNotFoundError as e:
        console.print(f'[red]Error:[/red] {escape(str(e))}')
        raise typer.Exit(1)

    failed = False
    try:
        for document_config in codegen_config.documents:
            with Progress(
                SpinnerColumn(),
                TextColumn('[progress.description]{task.description}'),
                console=console,
            ) as progress:
                task = progress.add_task(
                    f'Generating code for {document_config.source} in {document_config.output}...',
                    total=None,
                )
                result = Codegen(document_config).generate()
                progress.update(
                    task,
                    description=f'Code generation completed for {document_config.source}!',
                )

            console.print('[dim]Generated files:[/dim]')
            for path in result.files:
                console.print(f'  - {path}')

            for failure in result.failures:
                failed = True
                console.print(
                    f'[yellow]Skipped[/yellow] {failure.operation_name}: {escape(str(failure.error))}'
                )

    except OptsgenError as e:
        console.print(f'[red]Error:[/red] {escape(str(e))}')
        traceback.print_exc()
        raise typer.Exit(1)

    if failed:
        raise typer.Exit(1)


@app.command()
def inspect(
    source: Annotated[str, typer.Argument(help='Path or URL of the operation document')],
    variant: Annotated[
        ClientVariant,
        typer.Option('--variant', help='Client variant to plan for'),
    ] = ClientVariant.OPTIONS,
) -> None:
    """Show, per operation, how its parameters would be generated."""
    try:
        document = DocumentLoader().load(source)
    except OptsgenError as e:
        console.print(f'[red]Error:[/red] {escape(str(e))}')
        raise typer.Exit(1)

    type_mapper = TypeMapper(document.schemas)
    transformer = OperationTransformer(
        variant, type_mapper, NamingResolver(reserved_names(type_mapper))
    )
    report = transformer.transform_operations(document.operations)

    table = Table(title=document.title)
    table.add_column('Operation')
    table.add_column('Parameters', justify='right')
    table.add_column('Signature')
    table.add_column('Options type')
    table.add_column('Builder')

    for context in report.contexts:
        table.add_row(
            context.operation.name,
            str(len(context.operation.parameters)),
            f'{context.names.function_name}({", ".join(context.signature.names)})',
            context.names.options_name or '-',
            context.names.builder_name or '-',
        )
    for failure in report.failures:
        table.add_row(failure.operation_name, '', f"[red]{escape(str(failure.error))}[/red]", '', '')

    console.print(table)


@app.command()
def version() -> None:
    """Show the version of optsgen."""
    from optsgen import __version__

    console.print(f'optsgen version: {__version__}')


if __name__ == '__main__':
    app()
