"""CLI for the formrelay submission normalizer."""

import json
import logging
from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console
from rich.progress import Progress, SpinnerColumn, TextColumn

from formrelay import __version__
from formrelay.config import AppConfig, ConfigError, load_config
from formrelay.core.collaborators import InMemoryFormDetailsProvider
from formrelay.diagnostics import DiagnosticsCollector, NormalizationStatus
from formrelay.input.request import CREATABLE, READABLE
from formrelay.io import load_json_mapping, load_request, parse_request
from formrelay.reference import FormDataReferenceBuilder
from formrelay.responses import ApiResponseBuilder, ResponseStatus
from formrelay.routing.params import ManifestValidationError, ParamRegistry, UnknownParamError

app = typer.Typer(
    name="formrelay",
    help="Normalize form submissions and build API responses.",
    no_args_is_help=True,
)
console = Console()

# Schemas live at the project root, next to the package.
DEFAULT_MANIFEST_SCHEMA = Path(__file__).resolve().parent.parent / "schemas" / "manifest.schema.json"

ConfigOption = Annotated[
    Path | None,
    typer.Option("--config", "-c", envvar="FORMRELAY_CONFIG", help="Path to config.yaml"),
]
FormsOption = Annotated[
    Path | None,
    typer.Option("--forms", "-f", help="JSON file mapping form ids to form details"),
]
KindOption = Annotated[
    str,
    typer.Option("--kind", "-k", help="Request kind: creatable or readable"),
]


def version_callback(value: bool) -> None:
    if value:
        console.print(f"formrelay version {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: Annotated[
        bool | None,
        typer.Option("--version", "-v", callback=version_callback, is_eager=True),
    ] = None,
) -> None:
    """formrelay: normalize form submissions and build API responses."""
    pass


def _load_config(config_path: Path | None) -> AppConfig:
    try:
        config = load_config(config_path)
    except ConfigError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)
    logging.basicConfig(
        level=config.log_level,
        format="%(asctime)s %(levelname)s %(name)s - %(message)s",
    )
    return config


def _make_builder(config: AppConfig, forms: Path | None) -> FormDataReferenceBuilder:
    form_details = InMemoryFormDetailsProvider()
    if forms is not None:
        if not forms.exists():
            console.print(f"[red]Error:[/red] Forms file not found: {forms}")
            raise typer.Exit(1)
        for form_id, details in load_json_mapping(forms).items():
            form_details.add(form_id, details)
    return FormDataReferenceBuilder.from_config(config, form_details=form_details)


def _check_kind(kind: str) -> str:
    if kind not in (CREATABLE, READABLE):
        console.print(f"[red]Error:[/red] Unknown request kind: {kind}")
        raise typer.Exit(1)
    return kind


@app.command()
def normalize(
    request_path: Annotated[
        Path,
        typer.Argument(help="JSON file holding one raw request"),
    ],
    config_path: ConfigOption = None,
    forms: FormsOption = None,
    kind: KindOption = CREATABLE,
    show_diagnostics: Annotated[
        bool,
        typer.Option("--diagnostics", "-d", help="Also print normalization diagnostics"),
    ] = False,
) -> None:
    """Print the normalized FormDataReference of a request."""
    config = _load_config(config_path)
    kind = _check_kind(kind)

    if not request_path.exists():
        console.print(f"[red]Error:[/red] Request file not found: {request_path}")
        raise typer.Exit(1)

    try:
        request = load_request(request_path)
    except ValueError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)

    builder = _make_builder(config, forms)
    collector = DiagnosticsCollector()
    reference = builder.build(request, kind=kind, diagnostics=collector)

    console.print_json(json.dumps(reference.to_dict(), ensure_ascii=False))
    if show_diagnostics:
        console.print_json(collector.finalize().model_dump_json())


@app.command()
def run(
    input_path: Annotated[
        Path,
        typer.Option("--in", "-i", help="Input JSONL file of raw requests"),
    ],
    output_path: Annotated[
        Path,
        typer.Option("--out", "-o", help="Output JSONL file of normalized references"),
    ],
    config_path: ConfigOption = None,
    forms: FormsOption = None,
    kind: KindOption = CREATABLE,
    diagnostics: Annotated[
        Path | None,
        typer.Option("--diagnostics", "-d", help="Diagnostics output JSONL path"),
    ] = None,
) -> None:
    """Normalize a JSONL file of raw requests."""
    config = _load_config(config_path)
    kind = _check_kind(kind)

    if not input_path.exists():
        console.print(f"[red]Error:[/red] Input file not found: {input_path}")
        raise typer.Exit(1)

    builder = _make_builder(config, forms)

    console.print(f"[bold]formrelay[/bold] v{__version__}")
    console.print(f"  Input: {input_path}")
    console.print(f"  Output: {output_path}")
    if diagnostics:
        console.print(f"  Diagnostics: {diagnostics}")

    clean_count = 0
    partial_count = 0
    skipped_count = 0

    with Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        console=console,
    ) as progress:
        task = progress.add_task("Normalizing requests...", total=None)

        with open(input_path) as f_in, open(output_path, "w") as f_out:
            f_diag = open(diagnostics, "w") if diagnostics else None

            try:
                for line_num, line in enumerate(f_in, 1):
                    line = line.strip()
                    if not line:
                        continue

                    try:
                        request = parse_request(json.loads(line), source=f"request on line {line_num}")
                    except ValueError as e:
                        console.print(f"\n[yellow]Warning:[/yellow] Skipping line {line_num}: {e}")
                        skipped_count += 1
                        continue

                    collector = DiagnosticsCollector()
                    reference = builder.build(request, kind=kind, diagnostics=collector)
                    report = collector.finalize()

                    f_out.write(json.dumps(reference.to_dict(), ensure_ascii=False) + "\n")
                    if f_diag:
                        f_diag.write(report.model_dump_json() + "\n")

                    if report.status == NormalizationStatus.CLEAN:
                        clean_count += 1
                    else:
                        partial_count += 1

                    progress.update(task, description=f"Normalized {line_num} requests...")
            finally:
                if f_diag:
                    f_diag.close()

    console.print("\n[bold]Summary:[/bold]")
    console.print(f"  Requests normalized: {clean_count + partial_count}")
    console.print(f"  [green]Clean:[/green] {clean_count}")
    if partial_count:
        console.print(f"  [yellow]Partial:[/yellow] {partial_count}")
    if skipped_count:
        console.print(f"  [red]Skipped:[/red] {skipped_count}")


@app.command()
def respond(
    status: Annotated[
        str,
        typer.Argument(help="Response status: success, warning or error"),
    ],
    message: Annotated[
        str,
        typer.Argument(help="Message for the user"),
    ],
    data: Annotated[
        str | None,
        typer.Option("--data", help="Additional data as a JSON object"),
    ] = None,
    debug: Annotated[
        str | None,
        typer.Option("--debug", help="Debug payload as a JSON object"),
    ] = None,
    developer_mode: Annotated[
        bool | None,
        typer.Option("--developer-mode/--no-developer-mode", help="Override developer mode"),
    ] = None,
    config_path: ConfigOption = None,
) -> None:
    """Print an API response envelope."""
    config = _load_config(config_path)
    if developer_mode is not None:
        config = config.model_copy(update={"developer_mode": developer_mode})

    try:
        response_status = ResponseStatus(status)
    except ValueError:
        console.print(f"[red]Error:[/red] Unknown status: {status}")
        raise typer.Exit(1)

    try:
        additional = json.loads(data) if data else None
        debug_payload = json.loads(debug) if debug else None
    except json.JSONDecodeError as e:
        console.print(f"[red]Error:[/red] Invalid JSON: {e}")
        raise typer.Exit(1)

    builder = ApiResponseBuilder.from_config(config)
    constructors = {
        ResponseStatus.SUCCESS: builder.success,
        ResponseStatus.WARNING: builder.warning,
        ResponseStatus.ERROR: builder.error,
    }
    response = constructors[response_status](message, additional, debug_payload)
    console.print_json(json.dumps(response.to_dict(), ensure_ascii=False))


@app.command()
def validate(
    manifest_path: Annotated[
        Path,
        typer.Argument(help="Path to the param manifest"),
    ],
    schema_path: Annotated[
        Path | None,
        typer.Option("--schema", "-s", help="Path to the manifest schema"),
    ] = None,
) -> None:
    """Validate a param manifest against its schema."""
    if not manifest_path.exists():
        console.print(f"[red]Error:[/red] Manifest not found: {manifest_path}")
        raise typer.Exit(1)

    if schema_path is None:
        schema_path = DEFAULT_MANIFEST_SCHEMA

    if not schema_path.exists():
        console.print(f"[red]Error:[/red] Schema file not found: {schema_path}")
        raise typer.Exit(1)

    try:
        registry = ParamRegistry.from_manifest(manifest_path, schema_path=schema_path)
    except (ManifestValidationError, UnknownParamError, ValueError) as e:
        console.print(f"[red]Invalid:[/red] {e}")
        raise typer.Exit(1)

    console.print(f"[green]Valid:[/green] {manifest_path} ({len(registry.params)} params)")


if __name__ == "__main__":
    app()
