import json
import logging

import click

from .pipeline import ConversionConfig, ConversionContext, build_type_model
from .summary import build_summary, render_summary


@click.command()
@click.option("--config", "-c", default=None, type=click.Path(exists=True, resolve_path=True))
@click.option("--format", "-f", "output_format", default="json", type=click.Choice(["json", "text"]))
@click.option(
    "--output-path",
    "-o",
    default=None,
    type=str,
    help="Output directory the documents are rendered to (enables cross-reference links)",
)
@click.option(
    "--examples",
    is_flag=True,
    default=False,
    help="Generate examples where the document does not provide any",
)
@click.option("--verbose", "-v", is_flag=True, default=False, help="Log resolution steps")
@click.argument("path", default=None, type=click.Path(exists=True, resolve_path=True))
def openapi_type_model(config, output_format, output_path, examples, verbose, path):
    logging.basicConfig(level=logging.DEBUG if verbose else logging.WARNING)

    with open(path) as f:
        document = json.load(f)

    if config is not None:
        with open(config) as f:
            config = json.load(f)
            config = ConversionConfig.from_dict(config)
    else:
        config = ConversionConfig()

    # Apply CLI flag for example generation (overrides config file if set)
    if examples:
        config.generated_examples_enabled = True

    builder = build_type_model(document, ConversionContext(config, output_path))
    summary = build_summary(document, builder)

    if output_format == "text":
        click.echo(render_summary(summary))
    else:
        click.echo(json.dumps(summary, indent=2))


if __name__ == "__main__":
    openapi_type_model()
