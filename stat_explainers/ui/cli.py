"""Typer-based command line interface for running the demonstrations."""

from __future__ import annotations

from pathlib import Path
from typing import Dict, List, Optional

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from ..config import DEFAULT_RANDOM_SEED, LOG_LEVEL, configure_logging
from ..core.aggregator import AggregatorConfig
from ..core.degrees_of_freedom import DegreesOfFreedomConfig
from ..core.sampler import SamplerConfig
from ..core.validator import ValidationError
from ..engine import ALL_DEMOS, DemoEngine
from ..models.results import DemoResult, EngineResults
from ..reporting import ReportGenerator
from ..visualization import Backend

app = typer.Typer(help="Statistics explainer demonstrations (sampling distributions, CLT, degrees of freedom)")
console = Console()


@app.callback()
def _main(
    log_level: str = typer.Option(LOG_LEVEL, help="Logging level (DEBUG, INFO, WARNING, ...)"),
) -> None:
    configure_logging(log_level)


def _parse_params(values: Optional[List[str]]) -> Dict[str, float]:
    """Turn repeated ``key=value`` options into a parameter mapping."""
    parsed: Dict[str, float] = {}
    for item in values or []:
        key, sep, raw = item.partition("=")
        if not sep or not key.strip():
            raise typer.BadParameter(f"Expected key=value, got {item!r}", param_hint="--param")
        try:
            parsed[key.strip()] = float(raw)
        except ValueError as exc:
            raise typer.BadParameter(f"Parameter {key!r} must be numeric, got {raw!r}", param_hint="--param") from exc
    return parsed


def _distribution_kwargs(family: Optional[str], params: Optional[List[str]]) -> Dict[str, object]:
    """Only override the configuration defaults when the user picked a distribution."""
    if family is None and not params:
        return {}
    kwargs: Dict[str, object] = {"parameters": _parse_params(params)}
    if family is not None:
        kwargs["family"] = family
    return kwargs


def _fmt(value: Optional[float], digits: int = 4) -> str:
    """Format numbers for console output."""
    return f"{value:.{digits}g}" if value is not None else "n/a"


def _summary_table(result: DemoResult, title: str) -> Table:
    table = Table(title=title, show_lines=False)
    for column in ("series", "n", "mean", "sd", "skewness", "kurtosis", "test", "p-value"):
        table.add_column(column)
    for label, summary in result.summaries.items():
        table.add_row(
            label,
            str(summary.n),
            _fmt(summary.mean),
            _fmt(summary.standard_deviation),
            _fmt(summary.skewness),
            _fmt(summary.kurtosis),
            summary.normality_test or "not tested",
            _fmt(summary.normality_p_value, 3),
        )
    return table


def _print_result(result: DemoResult) -> None:
    if not result.ok:
        console.print(f"[red]{result.demo_id} failed: {escape(str(result.error))}[/red]")
        return
    console.print(_summary_table(result, result.demo_id.replace("_", " ").title()))
    meta = result.metadata
    if "theoretical_standard_error" in meta:
        console.print(
            f"Theoretical mean {_fmt(meta['theoretical_mean'])}, "
            f"standard error {_fmt(meta['theoretical_standard_error'])}; "
            f"observed {_fmt(meta['observed_mean_of_means'])}, {_fmt(meta['observed_standard_error'])}"
        )
    if "convergence_display" in meta:
        for criterion, value in meta["convergence_display"].items():
            console.print(f"Normal-like {criterion} reached at k = {value}")
    if "true_variance" in meta:
        console.print(
            f"True variance {_fmt(meta['true_variance'])}; mean estimate with n divisor "
            f"{_fmt(meta['mean_variance_n'])}, with n - 1 divisor {_fmt(meta['mean_variance_n_minus_1'])}"
        )
    if result.validation:
        status = result.validation["status"]
        colour = "green" if status == "PASS" else "red"
        warnings = ", ".join(result.validation.get("warnings", [])) or "none"
        console.print(f"Validation: [{colour}]{status}[/{colour}] (warnings: {warnings})")


def _backend(value: str) -> Backend:
    try:
        return Backend(value.lower())
    except ValueError as exc:
        raise typer.BadParameter(f"Unknown backend {value!r}; choose plotly or matplotlib", param_hint="--backend") from exc


def _finish(results: EngineResults, output_dir: Optional[Path], backend: Backend, no_plots: bool) -> None:
    for result in results.demo_results.values():
        _print_result(result)
    if output_dir is not None:
        manifest = ReportGenerator(output_dir).export(
            results, backend=backend, include_figures=not no_plots
        )
        console.print(f"Outputs written to: {manifest['manifest_path']}")
    if any(not result.ok for result in results.demo_results.values()):
        raise typer.Exit(code=1)


def _run_single(run) -> EngineResults:
    results = EngineResults()
    try:
        results.add_result(run())
    except (ValidationError, ValueError) as exc:
        console.print(f"[red]Invalid configuration: {escape(str(exc))}[/red]")
        raise typer.Exit(code=2) from exc
    return results


BACKEND_HELP = "Chart backend: plotly (HTML) or matplotlib (PNG)"


@app.command()
def sample(
    family: Optional[str] = typer.Option(None, help="Distribution family (default exponential, rate=0.5)"),
    param: Optional[List[str]] = typer.Option(None, "--param", "-p", help="Distribution parameter as key=value"),
    population_size: int = typer.Option(10000, help="Population size"),
    sample_size: int = typer.Option(30, help="Observations per resample"),
    repetitions: int = typer.Option(10000, help="Number of resamples"),
    seed: int = typer.Option(DEFAULT_RANDOM_SEED, help="Random seed"),
    output_dir: Optional[Path] = typer.Option(None, help="Directory for tables and charts"),
    backend: str = typer.Option(Backend.PLOTLY.value, help=BACKEND_HELP),
    no_plots: bool = typer.Option(False, help="Skip chart generation"),
) -> None:
    """Build the sampling distribution of the mean by resampling a population."""
    chart_backend = _backend(backend)
    config = SamplerConfig(
        population_size=population_size,
        sample_size=sample_size,
        repetitions=repetitions,
        random_seed=seed,
        **_distribution_kwargs(family, param),
    )
    results = _run_single(lambda: DemoEngine(seed).run_sampling_demo(config))
    _finish(results, output_dir, chart_backend, no_plots)


@app.command()
def aggregate(
    family: Optional[str] = typer.Option(None, help="Base distribution family (default exponential, rate=0.5)"),
    param: Optional[List[str]] = typer.Option(None, "--param", "-p", help="Distribution parameter as key=value"),
    max_variables: int = typer.Option(30, help="Largest number of variables summed"),
    repetitions: int = typer.Option(10000, help="Sums drawn per variable count"),
    seed: int = typer.Option(DEFAULT_RANDOM_SEED, help="Random seed"),
    output_dir: Optional[Path] = typer.Option(None, help="Directory for tables and charts"),
    backend: str = typer.Option(Backend.PLOTLY.value, help=BACKEND_HELP),
    no_plots: bool = typer.Option(False, help="Skip chart generation"),
) -> None:
    """Sum increasing numbers of variables and track skewness and kurtosis."""
    chart_backend = _backend(backend)
    config = AggregatorConfig(
        max_variables=max_variables,
        repetitions=repetitions,
        random_seed=seed,
        **_distribution_kwargs(family, param),
    )
    results = _run_single(lambda: DemoEngine(seed).run_aggregation_demo(config))
    _finish(results, output_dir, chart_backend, no_plots)


@app.command()
def dof(
    sample_size: int = typer.Option(5, help="Observations per sample"),
    repetitions: int = typer.Option(10000, help="Number of samples"),
    seed: int = typer.Option(DEFAULT_RANDOM_SEED, help="Random seed"),
    output_dir: Optional[Path] = typer.Option(None, help="Directory for tables and charts"),
    backend: str = typer.Option(Backend.PLOTLY.value, help=BACKEND_HELP),
    no_plots: bool = typer.Option(False, help="Skip chart generation"),
) -> None:
    """Compare variance estimators dividing by n and by n - 1."""
    chart_backend = _backend(backend)
    config = DegreesOfFreedomConfig(sample_size=sample_size, repetitions=repetitions, random_seed=seed)
    results = _run_single(lambda: DemoEngine(seed).run_degrees_of_freedom_demo(config))
    _finish(results, output_dir, chart_backend, no_plots)


@app.command("run-all")
def run_all(
    seed: int = typer.Option(DEFAULT_RANDOM_SEED, help="Random seed"),
    output_dir: Optional[Path] = typer.Option(None, help="Directory for tables and charts"),
    backend: str = typer.Option(Backend.PLOTLY.value, help=BACKEND_HELP),
    no_plots: bool = typer.Option(False, help="Skip chart generation"),
) -> None:
    """Run every demonstration with default settings."""
    chart_backend = _backend(backend)
    engine = DemoEngine(seed)

    def report(step: int, total: int, message: str) -> None:
        console.print(f"[dim]{step}/{total} {message}[/dim]")

    results = engine.run_all(ALL_DEMOS, progress_callback=report)
    _finish(results, output_dir, chart_backend, no_plots)


def main() -> None:
    """Entry point for CLI execution."""
    app()


if __name__ == "__main__":
    main()
