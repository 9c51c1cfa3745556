"""CLI for the trainready scoring toolkit."""

import logging
from pathlib import Path

import click

from trainready.errors import TrainReadyError
from trainready.records import AthleteProfile, BiologicalSex


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


@click.group()
def main() -> None:
    """trainready: daily recovery, sleep and strain scores."""


@main.command()
@click.argument("file", type=click.Path(exists=True, dir_okay=False))
@click.option("--max-hr", default=190.0, help="Maximum heart rate (bpm).")
@click.option("--resting-hr", default=60.0, help="Resting heart rate used for HR reserve (bpm).")
@click.option(
    "--sex",
    type=click.Choice([s.value for s in BiologicalSex]),
    default=BiologicalSex.UNSPECIFIED.value,
    help="Selects the TRIMP constants.",
)
@click.option("--ftp", default=None, type=float, help="Functional threshold power (W).")
@click.option("--window", "-w", default=7, help="Baseline window in days.")
@click.option("--output", "-o", default=None, help="Also write the summary JSON to this file.")
@click.option("--verbose", "-v", is_flag=True, help="Log engine fallbacks and the summary line.")
def score(
    file: str,
    max_hr: float,
    resting_hr: float,
    sex: str,
    ftp: float | None,
    window: int,
    output: str | None,
    verbose: bool,
) -> None:
    """Score the latest day in a .jsonl observation file."""
    from trainready.analytics.pipeline import run_pipeline
    from trainready.loader import load_observations

    _configure_logging(verbose)
    try:
        profile = AthleteProfile(
            max_hr=max_hr, resting_hr=resting_hr, sex=BiologicalSex(sex), ftp=ftp
        )
        observations = load_observations(file)
        if not observations:
            raise click.ClickException(f"No observations in {file}")
        summary = run_pipeline(observations, profile=profile, baseline_window=window)
    except TrainReadyError as e:
        raise click.ClickException(str(e)) from e

    click.echo(summary.to_json())
    if output:
        Path(output).write_text(summary.to_json() + "\n")
        click.echo(f"Summary written to {output}", err=True)


@main.command()
@click.argument("file", type=click.Path(exists=True, dir_okay=False))
@click.option("--max-hr", default=190.0, help="Maximum heart rate (bpm).")
@click.option("--resting-hr", default=60.0, help="Resting heart rate used for HR reserve (bpm).")
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging.")
def load(file: str, max_hr: float, resting_hr: float, verbose: bool) -> None:
    """Print the CTL / ATL / TSB series for a .jsonl observation file."""
    from trainready.analytics.pipeline import training_load_series
    from trainready.loader import load_observations

    _configure_logging(verbose)
    try:
        profile = AthleteProfile(max_hr=max_hr, resting_hr=resting_hr)
        series = training_load_series(load_observations(file), profile)
    except TrainReadyError as e:
        raise click.ClickException(str(e)) from e

    click.echo(f"{'date':<12}{'ctl':>8}{'atl':>8}{'tsb':>8}")
    for day, state in series:
        click.echo(f"{day.isoformat():<12}{state.ctl:>8.1f}{state.atl:>8.1f}{state.tsb:>+8.1f}")


if __name__ == "__main__":
    main()
