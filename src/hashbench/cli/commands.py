"""CLI command registration and handlers for hashbench."""

from __future__ import annotations

import argparse
import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional

from hashbench.contracts.error import Exit


@dataclass(frozen=True)
class CLIContext:
    """Runtime hooks supplied by the top-level CLI entrypoint."""

    emit_success: Callable[..., None]
    run_benchmark: Callable[..., Dict[str, Any]]
    run_trial: Callable[..., Dict[str, Any]]
    compute_indexes: Callable[..., Dict[str, Any]]
    chain_histogram: Callable[..., Dict[str, Any]]
    validate_summary: Callable[[str], Dict[str, Any]]
    logger: logging.Logger
    json_enabled: Callable[[], bool]
    guard: Callable[[Callable[[argparse.Namespace], int]], Callable[[argparse.Namespace], int]]
    strategy_choices: List[str]


def register_subcommands(
    subparsers: argparse._SubParsersAction[argparse.ArgumentParser],
    ctx: CLIContext,
) -> Dict[str, Callable[[argparse.Namespace], int]]:
    """Define CLI subcommands and return their handlers."""

    handlers: Dict[str, Callable[[argparse.Namespace], int]] = {}

    def _register(
        name: str,
        help_text: Optional[str],
        configure: Callable[[argparse.ArgumentParser], Callable[[argparse.Namespace], int]],
    ) -> None:
        parser = subparsers.add_parser(name, help=help_text)
        handler = configure(parser)
        handlers[name] = ctx.guard(handler)

    _register(
        "run",
        "Sweep the table size x element count matrix and export CSV tables.",
        lambda parser: _configure_run(parser, ctx),
    )
    _register(
        "trial",
        "Run a single insert/search trial and print its timings.",
        lambda parser: _configure_trial(parser, ctx),
    )
    _register(
        "index",
        "Print the slot index of keys under each hash function.",
        lambda parser: _configure_index(parser, ctx),
    )
    _register(
        "chains",
        "Insert a trial's keys and report the chain length histogram.",
        lambda parser: _configure_chains(parser, ctx),
    )
    _register(
        "validate-summary",
        "Validate a JSON run summary against the bundled schema.",
        lambda parser: _configure_validate_summary(parser, ctx),
    )

    return handlers


def _add_strategy_argument(parser: argparse.ArgumentParser, ctx: CLIContext, **kwargs: Any) -> None:
    parser.add_argument(
        "--strategy",
        type=str.lower,
        metavar="NAME",
        help=f"Hash function ({', '.join(ctx.strategy_choices)})",
        **kwargs,
    )


def _configure_run(
    parser: argparse.ArgumentParser, ctx: CLIContext
) -> Callable[[argparse.Namespace], int]:
    parser.add_argument("--out-dir", default=None, help="CSV output directory (default: config output_dir)")
    _add_strategy_argument(parser, ctx, action="append", dest="strategies", default=None)
    parser.add_argument("--runs", type=int, default=None, help="Trials averaged per cell")
    parser.add_argument("--summary-out", default=None, help="Optional JSON summary path")

    def handler(args: argparse.Namespace) -> int:
        result = ctx.run_benchmark(
            out_dir=args.out_dir,
            strategies=args.strategies,
            runs=args.runs,
            summary_out=args.summary_out,
        )
        text = f"Wrote {len(result['files'])} CSV files to {result['out_dir']}"
        ctx.emit_success("run", text=text, data=result)
        return int(Exit.OK)

    return handler


def _configure_trial(
    parser: argparse.ArgumentParser, ctx: CLIContext
) -> Callable[[argparse.Namespace], int]:
    parser.add_argument("--capacity", type=int, required=True)
    parser.add_argument("--elements", type=int, required=True)
    _add_strategy_argument(parser, ctx, default="modulo")
    parser.add_argument("--seed", type=int, default=None)
    parser.add_argument("--numbers-size", type=int, default=None)

    def handler(args: argparse.Namespace) -> int:
        result = ctx.run_trial(
            args.capacity,
            args.elements,
            args.strategy,
            seed=args.seed,
            numbers_size=args.numbers_size,
        )
        text = (
            f"{result['strategy']} capacity={result['capacity']} elements={result['elements']}: "
            f"insert={result['insert_seconds']}s collisions={result['collisions']} "
            f"search={result['search_seconds']}s"
        )
        ctx.emit_success("trial", text=text, data=result)
        return int(Exit.OK)

    return handler


def _configure_index(
    parser: argparse.ArgumentParser, ctx: CLIContext
) -> Callable[[argparse.Namespace], int]:
    parser.add_argument("keys", type=int, nargs="+")
    parser.add_argument("--capacity", type=int, required=True)
    _add_strategy_argument(parser, ctx, action="append", dest="strategies", default=None)

    def handler(args: argparse.Namespace) -> int:
        result = ctx.compute_indexes(args.keys, args.capacity, args.strategies)
        lines = []
        for name, indexes in result["indexes"].items():
            pairs = " ".join(f"{key}->{idx}" for key, idx in zip(result["keys"], indexes))
            lines.append(f"{name}: {pairs}")
        ctx.emit_success("index", text="\n".join(lines), data=result)
        return int(Exit.OK)

    return handler


def _configure_chains(
    parser: argparse.ArgumentParser, ctx: CLIContext
) -> Callable[[argparse.Namespace], int]:
    parser.add_argument("--capacity", type=int, required=True)
    parser.add_argument("--elements", type=int, required=True)
    _add_strategy_argument(parser, ctx, default="modulo")
    parser.add_argument("--seed", type=int, default=None)
    parser.add_argument("--numbers-size", type=int, default=None)

    def handler(args: argparse.Namespace) -> int:
        result = ctx.chain_histogram(
            args.capacity,
            args.elements,
            args.strategy,
            seed=args.seed,
            numbers_size=args.numbers_size,
        )
        lines = [
            f"{result['strategy']} capacity={result['capacity']} elements={result['elements']} "
            f"collisions={result['collisions']} occupied={result['occupied_slots']} "
            f"max_chain={result['max_chain_len']} load_factor={result['load_factor']:.3f}"
        ]
        lines.extend(f"  len={length:<4d} slots={count}" for length, count in result["histogram"])
        ctx.emit_success("chains", text="\n".join(lines), data=result)
        return int(Exit.OK)

    return handler


def _configure_validate_summary(
    parser: argparse.ArgumentParser, ctx: CLIContext
) -> Callable[[argparse.Namespace], int]:
    parser.add_argument("path", help="Path to a summary JSON file")

    def handler(args: argparse.Namespace) -> int:
        result = ctx.validate_summary(args.path)
        ctx.logger.info("Summary %s is valid", args.path)
        ctx.emit_success("validate-summary", text=f"{args.path}: valid", data=result)
        return int(Exit.OK)

    return handler


__all__ = ["CLIContext", "register_subcommands"]
