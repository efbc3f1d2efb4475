import json

import click

from cvportal.client import HRSession, PortalClient, PortalError, UploadSelection, UnsupportedFileError


def _echo_json(data):
    click.echo(json.dumps(data, indent=2, ensure_ascii=False))


@click.group()
@click.option("--url", envvar="CVPORTAL_URL", default="http://localhost:3000", show_default=True)
@click.option("--token", envvar="CVPORTAL_TOKEN", default=None, help="Bearer token from `login`.")
@click.pass_context
def cli(ctx, url, token):
    """Command line client for the CV fit portal API."""
    ctx.obj = PortalClient(HRSession(base_url=url, token=token))
    ctx.call_on_close(ctx.obj.close)


@cli.command()
@click.argument("paths", nargs=-1, required=True, type=click.Path(exists=True, dir_okay=False))
@click.pass_obj
def upload(client, paths):
    """Upload one or more CVs (PDF, DOCX or TXT)."""
    selection = UploadSelection()
    try:
        selection.add(paths)
    except UnsupportedFileError as e:
        raise click.UsageError(str(e))

    for path, result in zip(list(selection.files), client.upload_selection(selection)):
        click.echo(f"✅ {path}: {result['referenceCode']} ({result['candidateName']})")


@cli.command()
@click.option("--email", prompt=True)
@click.option("--password", prompt=True, hide_input=True)
@click.pass_obj
def login(client, email, password):
    """Log in and print the bearer token."""
    data = client.login(email, password)
    click.echo(data["token"])


@cli.command()
@click.pass_obj
def jobs(client):
    """List job postings."""
    _echo_json(client.list_jobs())


@cli.command()
@click.pass_obj
def candidates(client):
    """List candidates."""
    _echo_json(client.list_candidates())


@cli.command()
@click.argument("candidate_id", type=int)
@click.option("--job", "job_id", type=int, default=None, help="Job id; omit for a generic assessment.")
@click.pass_obj
def analyze(client, candidate_id, job_id):
    """Run a fit assessment and create a PDF report."""
    _echo_json(client.analyze(candidate_id, job_id))


@cli.command()
@click.option("--search", default=None)
@click.option("--tag", "tags", multiple=True)
@click.option("--score", "scores", multiple=True, help="Score range such as 60-100.")
@click.pass_obj
def reports(client, search, tags, scores):
    """List analysis reports with optional filters."""
    _echo_json(client.list_reports(search=search, tags=list(tags), scores=list(scores)))


def main():
    try:
        cli()
    except PortalError as e:
        raise SystemExit(f"❌ {e.message} (HTTP {e.status_code})")


if __name__ == "__main__":
    main()
