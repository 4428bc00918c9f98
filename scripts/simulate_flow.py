#!/usr/bin/env python3
"""Walk the onboarding wizard end-to-end with an in-memory persister.

Drives an ``IntakeFlow`` over the ``v1/screens.yaml`` catalog, answering
every screen with mock input, and prints each step plus the final profile.

By default answers are **randomised** (``--random``, on by default) so each
run picks different options.  Use ``--no-random`` for a fixed walkthrough.

Usage::

    # Default run (random answers)
    python scripts/simulate_flow.py

    # Deterministic run
    python scripts/simulate_flow.py --no-random

    # Make the first save fail to exercise the retry path
    python scripts/simulate_flow.py --fail-once

    # Step back once from the quick tour before finishing
    python scripts/simulate_flow.py --revisit
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import random
import sys
from pathlib import Path

# ---------------------------------------------------------------------------
# Ensure src/ is importable when running from a checkout.
# ---------------------------------------------------------------------------
_REPO_ROOT = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(_REPO_ROOT / "src"))

from rich.console import Console  # noqa: E402
from rich.table import Table  # noqa: E402

from intake_flow.catalog import ScreenCatalog  # noqa: E402
from intake_flow.completion import CompletionHandler  # noqa: E402
from intake_flow.errors import PersistenceError  # noqa: E402
from intake_flow.flow import IntakeFlow  # noqa: E402
from intake_flow.interfaces import ProfilePersister  # noqa: E402
from intake_flow.models.profile import ProfileRecord  # noqa: E402
from intake_flow.models.screen import (  # noqa: E402
    FormScreen,
    FrequencyScreen,
    MultiSelectScreen,
    SingleChoiceScreen,
)
from intake_flow.models.step import BonusStep, CompletedStep, ScreenStep  # noqa: E402

console = Console()

# Canned form values keyed by field type.
_FIELD_VALUES = {
    "text": "Ada Lovelace",
    "textarea": "None worth mentioning",
    "number": 70,
    "date": "1990-12-10",
}


# ---------------------------------------------------------------------------
# In-memory persister
# ---------------------------------------------------------------------------


class SimPersister(ProfilePersister):
    """Keeps the stored profile in memory; can fail the first save."""

    def __init__(self, fail_once: bool = False) -> None:
        self._fail_next = fail_once
        self.stored: ProfileRecord | None = None
        self.completed = False

    async def persist_profile(self, record: ProfileRecord) -> None:
        if self._fail_next:
            self._fail_next = False
            raise ConnectionError("simulated storage outage")
        self.stored = record

    async def mark_flow_complete(self, record: ProfileRecord) -> None:
        self.completed = True


# ---------------------------------------------------------------------------
# Mock input
# ---------------------------------------------------------------------------


def answer_screen(flow: IntakeFlow, step: ScreenStep, rng: random.Random | None) -> None:
    """Feed mock input for the screen in ``step``."""
    screen = step.screen
    pick = (lambda seq: rng.choice(seq)) if rng else (lambda seq: seq[0])

    if isinstance(screen, FormScreen):
        for field in screen.fields:
            value = _FIELD_VALUES[field.type]
            flow.set_field(field.name, value)
            console.print(f"    [dim]{field.label}:[/] {value}")
    elif isinstance(screen, SingleChoiceScreen):
        for q in screen.questions:
            option = pick(q.options)
            flow.select_single(q.question, option)
            console.print(f"    [dim]{q.question}:[/] {option}")
    elif isinstance(screen, FrequencyScreen):
        option = pick(screen.options)
        flow.select_frequency(option)
        console.print(f"    [dim]{screen.question}[/] {option}x per week")
    elif isinstance(screen, MultiSelectScreen):
        count = rng.randint(1, 3) if rng else 1
        chosen = rng.sample(screen.options, count) if rng else screen.options[:1]
        for option in chosen:
            flow.toggle_option(screen.collection_key, option)
        console.print(f"    [dim]{screen.question}[/] {', '.join(chosen)}")


# ---------------------------------------------------------------------------
# Simulation
# ---------------------------------------------------------------------------


async def run_simulation(use_random: bool, fail_once: bool, revisit: bool) -> int:
    rng = random.Random() if use_random else None
    catalog = ScreenCatalog.from_yaml()
    persister = SimPersister(fail_once=fail_once)
    flow = IntakeFlow(catalog, CompletionHandler(persister), user_id="sim_user")

    step = flow.current_step()
    revisited = False

    while not isinstance(step, CompletedStep):
        if isinstance(step, ScreenStep):
            console.rule(f"[bold]{step.index + 1}/{step.total} {step.screen.title}")
            console.print(f"  kind: {step.kind_name}  button: {step.continue_label}")
            answer_screen(flow, step, rng)
        elif isinstance(step, BonusStep):
            console.rule(f"[bold]{step.title}")
            for feature in step.features:
                console.print(f"  • {feature.title}: {feature.description}")
            if revisit and not revisited:
                revisited = True
                step = flow.retreat()
                console.print("  [yellow]←[/] back to the conclusion screen")
                continue

        try:
            step = await flow.advance()
        except PersistenceError as exc:
            console.print(f"  [red]ERROR[/] {exc} ({exc.__cause__}); retrying")
            step = await flow.advance()

        if isinstance(step, ScreenStep) and step.blocked:
            console.print(f"  [red]✗[/] blocked on screen {step.screen.id}")
            return 1

    console.rule("[bold green]Profile stored")
    table = Table(title=f"Flow {flow.flow_id} → {step.next_stage}", show_lines=True)
    table.add_column("Key")
    table.add_column("Value")
    for key, value in step.profile.answers.items():
        shown = ", ".join(sorted(value)) if isinstance(value, frozenset) else str(value)
        table.add_row(key, shown)
    console.print(table)
    return 0 if persister.completed else 1


def main() -> None:
    parser = argparse.ArgumentParser(
        description="Walk the onboarding wizard end-to-end with mock answers.",
    )
    parser.add_argument(
        "--random",
        action=argparse.BooleanOptionalAction,
        default=True,
        help="Randomise mock answers (default: on). Use --no-random for a fixed run.",
    )
    parser.add_argument(
        "--fail-once",
        action="store_true",
        help="Fail the first profile save to exercise the retry path",
    )
    parser.add_argument(
        "--revisit",
        action="store_true",
        help="Step back from the quick tour once before completing",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Show SDK debug logging",
    )
    args = parser.parse_args()

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING)
    sys.exit(asyncio.run(run_simulation(args.random, args.fail_once, args.revisit)))


if __name__ == "__main__":
    main()
