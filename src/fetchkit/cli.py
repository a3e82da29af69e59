# SPDX-FileCopyrightText: 2025 Lucas S
#
# SPDX-License-Identifier: GPL-3.0-or-later

import json
import logging
import shutil
import sys
from concurrent.futures import Future
from pathlib import Path
from typing import Any, Optional

import click

from fetchkit.client import Fetch
from fetchkit.models import Failure, HTTPMethod, ResponseMetadata, Result
from fetchkit.request_body import BodyEncoder


def parse_pairs(values: tuple[str, ...], separator: str) -> dict[str, Optional[str]]:
    pairs: dict[str, Optional[str]] = {}
    for value in values:
        name, sep, rest = value.partition(separator)
        pairs[name.strip()] = rest.strip() if sep else None
    return pairs


def parse_headers(values: tuple[str, ...]) -> dict[str, str]:
    headers: dict[str, str] = {}
    for name, value in parse_pairs(values, ":").items():
        if value is None:
            raise click.BadParameter(
                f"'{name}' is not a 'Name: value' header", param_hint="--header"
            )
        headers[name] = value
    return headers


def build_body(
    data: Optional[str], json_body: Optional[str], form: tuple[str, ...]
) -> Optional[BodyEncoder]:
    given = [option for option in (data, json_body, form or None) if option is not None]
    if len(given) > 1:
        raise click.UsageError("Only one of --data, --json or --form can be used")

    if data is not None:
        return BodyEncoder.text(data)

    if json_body is not None:
        try:
            value = json.loads(json_body)
        except ValueError as e:
            raise click.BadParameter(str(e), param_hint="--json") from e
        if not isinstance(value, dict):
            raise click.BadParameter("must be a JSON object", param_hint="--json")
        return BodyEncoder.json_object(value)

    if form:
        return BodyEncoder.url_encoded(parse_pairs(form, "="))

    return None


@click.group()
@click.option("--verbose", "-v", is_flag=True, help="Log request details.")
def cli(verbose: bool) -> None:
    if verbose:
        logging.basicConfig(level=logging.DEBUG)


@cli.command()
@click.argument("url", type=str)
@click.option(
    "--method",
    "-X",
    type=click.Choice([method.value for method in HTTPMethod], case_sensitive=False),
    default=HTTPMethod.GET.value,
    help="The request method",
)
@click.option(
    "--query",
    "-q",
    multiple=True,
    help="Query parameter as name=value, or a bare name. Can be repeated.",
)
@click.option(
    "--header",
    "-H",
    multiple=True,
    help="Header as 'Name: value'. Can be repeated.",
)
@click.option("--data", "-d", type=str, help="Send the text as the request body.")
@click.option("--json", "json_body", type=str, help="Send a JSON object.")
@click.option(
    "--form",
    "-F",
    multiple=True,
    help="Form field as name=value, or a bare name. Can be repeated.",
)
@click.option(
    "--output",
    "-o",
    type=click.Path(dir_okay=False, writable=True, path_type=Path),
    help="Download the response body into this file.",
)
@click.option(
    "--upload-file",
    "-T",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="Upload the file as the request body.",
)
def request(
    url: str,
    method: str,
    query: tuple[str, ...],
    header: tuple[str, ...],
    data: Optional[str],
    json_body: Optional[str],
    form: tuple[str, ...],
    output: Optional[Path],
    upload_file: Optional[Path],
) -> None:
    """Send a request and print the response body."""

    if output is not None and upload_file is not None:
        raise click.UsageError("--output and --upload-file cannot be combined")

    task = Fetch.default().request(
        url,
        method=method.upper(),
        query=parse_pairs(query, "=") if query else None,
        body=build_body(data, json_body, form),
        headers=parse_headers(header),
    )

    completed: Future[tuple[Result[Any], Optional[ResponseMetadata]]] = Future()

    def completion_handler(
        result: Result[Any], response: Optional[ResponseMetadata]
    ) -> None:
        completed.set_result((result, response))

    if output is not None:
        task.download(completion_handler)
    elif upload_file is not None:
        task.upload_file(upload_file, completion_handler)
    else:
        task.response(completion_handler)

    result, response = completed.result()

    if isinstance(result, Failure):
        click.echo(f"Error: {result.error}", err=True)
        sys.exit(1)

    if response is not None:
        click.echo(f"HTTP {response.status_code}", err=True)

    if output is not None:
        if result.value is not None:
            shutil.move(result.value, output)
            click.echo(f"Saved to {output}", err=True)
        return

    if result.value:
        click.echo(result.value, nl=False)


if __name__ == "__main__":
    cli()
