"""Career host loop: join an employer, work with the team, tick through the years.

Plays the role of the host game. Each simulated year the player talks to a
random teammate, pushes on the oldest project, then lets the world tick. Rewards
are applied to a simple player record using npcverse.rewards.

    python examples/career/run.py --ticks 8 --seed 42

Pass ``--save`` to write a JSON snapshot after every tick (NPCVERSE_SNAPSHOT_DIR
controls the location).
"""

from __future__ import annotations

import argparse
import asyncio
import random
from uuid import uuid4

from npcverse import (
    Employer,
    InteractionType,
    JsonPersistence,
    Simulation,
    total_project_bonus,
)
from npcverse.config import Config
from npcverse.logging_utils import log_info, log_success


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Career host loop")
    parser.add_argument("--ticks", type=int, default=6, help="Number of years to simulate")
    parser.add_argument("--seed", type=int, default=None, help="Seed for reproducible runs")
    parser.add_argument("--employer", default="Initech", help="Employer name")
    parser.add_argument("--prestige", type=int, default=4, help="Employer prestige (team size)")
    parser.add_argument(
        "--contribution",
        type=float,
        default=12.0,
        help="Player work applied to the oldest active project each year",
    )
    parser.add_argument("--save", action="store_true", help="Save a JSON snapshot after every tick")
    return parser.parse_args()


async def main(args: argparse.Namespace) -> None:
    Config.validate()
    print(Config.display())

    sim = Simulation(seed=args.seed, verbose=True)
    chooser = random.Random(args.seed)
    persistence = JsonPersistence() if args.save else None
    run_id = uuid4()
    if persistence is not None:
        await persistence.initialize()

    project = sim.join_employer(Employer(name=args.employer, prestige_level=args.prestige))
    if project is None:
        log_info("No team to work with; nothing to simulate.")
        return

    money = 0
    performance = 50

    for _ in range(args.ticks):
        team = sim.team()
        teammate = chooser.choice(team)
        interaction = chooser.choice(list(InteractionType))
        result = sim.interact(teammate.id, interaction)
        log_info(
            f"You -> {teammate.full_name} ({interaction.value}): \"{result.message}\" "
            f"[{result.relationship_change:+d}]"
        )

        completions = []
        active = sim.active_projects()
        if active:
            update = sim.advance_project(active[0].id, args.contribution)
            if update is not None and update.completion is not None:
                completions.append(update.completion)

        report = sim.tick()
        completions.extend(report.completions)

        bonus = total_project_bonus(completions)
        boost = sim.team_performance_boost()
        money += bonus
        performance = max(0, min(100, performance + boost))
        log_success(f"Year {report.tick}: bonus ${bonus}, performance {performance} ({boost:+d})")

        if persistence is not None:
            await persistence.save_snapshot(run_id, sim.snapshot())

    print()
    for agent in sim.roster():
        print(
            f"{agent.avatar} {agent.full_name:<20} {agent.role.value:<18} "
            f"{agent.mood.emoji} relationship {agent.relationship_with_player:>3}"
        )
    print(f"\nTotal bonus: ${money}  Final performance: {performance}")

    if persistence is not None:
        await persistence.close()
        log_info(f"Snapshots saved under {persistence.base_path / str(run_id)}")


if __name__ == "__main__":
    args = parse_args()
    asyncio.run(main(args))
