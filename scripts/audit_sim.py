#!/usr/bin/env python3
"""
Audit simulation for the outcome engine.

Runs seeded spins through the real engine and compares the observed hit
rate and RTP to the configured target. The same seed, rounds and config
hash always produce the same CSV row.

Usage:
    python -m scripts.audit_sim --game slots --rounds 100000 --seed AUDIT_2025
    python -m scripts.audit_sim --game wheel --rounds 50000 --seed AUDIT_2025 --win-rate 20 --out out/audit_wheel.csv
"""
import argparse
import csv
import logging
import subprocess
import sys
from collections import Counter
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

# Add parent to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from fairspin.config import settings
from fairspin.config_hash import get_config_hash
from fairspin.logic.bias import effective_distribution, expected_return
from fairspin.logic.rng import SeededRNG
from fairspin.presets import LUCKY_GIFT, SLOTS, WHEEL, default_engine
from fairspin.telemetry import TelemetryService


GAMES = [SLOTS, WHEEL, LUCKY_GIFT]


class NullTelemetrySink:
    """Drops events; per-spin telemetry is noise in a batch audit."""

    def emit(self, event_name: str, data: dict[str, Any]) -> None:
        pass


@dataclass
class SimulationStats:
    """Statistics accumulated during simulation."""
    game_type: str = ""
    config_hash: str = ""
    target_win_rate: float = 0.0
    expected_rtp: float = 0.0
    total_wagered: float = 0.0
    total_won: float = 0.0
    rounds: int = 0
    wins: int = 0
    max_win_x_observed: float = 0.0
    outcome_counts: Counter = field(default_factory=Counter)

    @property
    def hit_rate(self) -> float:
        """Observed percent of rounds that paid anything."""
        return (self.wins / self.rounds * 100) if self.rounds > 0 else 0.0

    @property
    def rtp(self) -> float:
        return (self.total_won / self.total_wagered * 100) if self.total_wagered > 0 else 0.0


def get_git_commit() -> str:
    """Get current git commit hash (short)."""
    try:
        result = subprocess.run(
            ["git", "rev-parse", "--short", "HEAD"],
            capture_output=True,
            text=True,
            cwd=Path(__file__).parent.parent,
            timeout=5,
        )
        if result.returncode == 0:
            return result.stdout.strip()
    except (subprocess.TimeoutExpired, FileNotFoundError):
        pass
    return "unknown"


def get_timestamp_iso() -> str:
    """Get ISO 8601 UTC timestamp."""
    return datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")


def run_simulation(
    game_type: str,
    rounds: int,
    seed_str: str,
    win_rate: float | None = None,
    verbose: bool = False,
) -> SimulationStats:
    """
    Run headless simulation.

    Args:
        game_type: 'slots', 'wheel' or 'lucky_gift'
        rounds: Number of rounds to simulate
        seed_str: Seed string for reproducibility
        win_rate: Override the configured target win rate
        verbose: Print progress

    Returns:
        SimulationStats with aggregated results
    """
    rng = SeededRNG.from_string(seed_str)
    engine = default_engine(rng=rng)
    engine.telemetry = TelemetryService(sink=NullTelemetrySink())

    config = engine.get_game_config(game_type)
    if config is None:
        raise ValueError(f"Unknown game type: {game_type}")
    if win_rate is not None:
        config = engine.set_game_config(game_type, config.table, win_rate)

    distribution = effective_distribution(config.table, config.target_win_rate)
    stats = SimulationStats(
        game_type=game_type,
        config_hash=get_config_hash(config),
        target_win_rate=config.target_win_rate,
        expected_rtp=expected_return(distribution) * 100,
    )

    bet_amount = 1.0  # Standard bet for simulation
    progress_interval = max(1, rounds // 100)

    for round_count in range(rounds):
        if verbose and round_count % progress_interval == 0:
            pct = (round_count / rounds) * 100
            print(f"\rProgress: {pct:.1f}%", end="", flush=True)

        result = engine.spin(game_type, bet_amount)

        stats.rounds += 1
        stats.total_wagered += bet_amount
        stats.total_won += result.payout_amount
        stats.outcome_counts[result.outcome_id] += 1
        if result.is_win:
            stats.wins += 1
        stats.max_win_x_observed = max(stats.max_win_x_observed, result.multiplier)

    if verbose:
        print("\rProgress: 100.0%")

    return stats


def generate_csv(seed_str: str, stats: SimulationStats, output_path: str) -> None:
    """Write a one-row audit CSV."""
    row = {
        "timestamp": get_timestamp_iso(),
        "git_commit": get_git_commit(),
        "config_hash": stats.config_hash,
        "game_type": stats.game_type,
        "rounds": stats.rounds,
        "seed": seed_str,
        "target_win_rate": f"{stats.target_win_rate:.4f}",
        "hit_rate": f"{stats.hit_rate:.4f}",
        "expected_rtp": f"{stats.expected_rtp:.4f}",
        "rtp": f"{stats.rtp:.4f}",
        "max_win_x": f"{stats.max_win_x_observed:.2f}",
    }

    output_file = Path(output_path)
    output_file.parent.mkdir(parents=True, exist_ok=True)

    with open(output_file, "w", newline="") as f:
        writer = csv.DictWriter(f, fieldnames=row.keys())
        writer.writeheader()
        writer.writerow(row)

    print(f"CSV written to: {output_path}")


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    parser = argparse.ArgumentParser(description="Seeded audit simulation of the outcome engine")
    parser.add_argument(
        "--game",
        choices=GAMES,
        required=True,
        help="Game type to simulate",
    )
    parser.add_argument(
        "--rounds",
        type=int,
        required=True,
        help="Number of rounds to simulate",
    )
    parser.add_argument(
        "--seed",
        type=str,
        required=True,
        help="Seed string for reproducibility",
    )
    parser.add_argument(
        "--win-rate",
        type=float,
        default=None,
        help="Override target win rate (0-100)",
    )
    parser.add_argument(
        "--out",
        type=str,
        default=None,
        help="Output CSV path",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Show progress",
    )

    args = parser.parse_args(argv)
    logging.basicConfig(
        level="DEBUG" if settings.debug else settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    print(f"Running simulation: game={args.game}, rounds={args.rounds}, seed={args.seed}")
    stats = run_simulation(
        game_type=args.game,
        rounds=args.rounds,
        seed_str=args.seed,
        win_rate=args.win_rate,
        verbose=args.verbose,
    )
    print(f"Config hash: {stats.config_hash}")

    if args.out:
        generate_csv(args.seed, stats, args.out)

    print("\nSummary:")
    print(f"  Rounds: {stats.rounds}")
    print(f"  Target win rate: {stats.target_win_rate:.2f}%")
    print(f"  Hit rate: {stats.hit_rate:.4f}%")
    print(f"  Expected RTP: {stats.expected_rtp:.4f}%")
    print(f"  Observed RTP: {stats.rtp:.4f}%")
    print(f"  Max win_x observed: {stats.max_win_x_observed:.2f}x")
    print("  Outcomes:")
    for outcome_id, count in sorted(stats.outcome_counts.items()):
        print(f"    {outcome_id}: {count} ({count / stats.rounds * 100:.4f}%)")

    return 0


if __name__ == "__main__":
    sys.exit(main())
