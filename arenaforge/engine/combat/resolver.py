"""Round-by-round combat resolution between two fighters."""

import logging
import math
from dataclasses import dataclass

from arenaforge.engine.config.settings import CombatConfig
from arenaforge.engine.exceptions import InvalidBattleInputError
from .models import Arena, BattleLog, Fighter, HealthAfter, RoundRecord, StatsUsed
from .rng import Roller
from .types import DRAW, CombatMode, RandomEvent

logger = logging.getLogger(__name__)


@dataclass
class Strike:
    """Raw outcome of one attack before it is applied to the defender."""

    damage: float
    event: RandomEvent | None = None
    arena_object: str | None = None


class CombatResolver:
    """Resolves battles from stat blocks using an injected roller.

    The resolver is a pure function of its inputs plus the roller's stream:
    fighters and arenas are never mutated, health is tracked in working copies.
    """

    def __init__(self, config: CombatConfig | None = None, roller: Roller | None = None):
        self.config = config or CombatConfig()
        self.roller = roller or Roller()

    def resolve(
        self, fighter_a: Fighter, fighter_b: Fighter, arena: Arena, max_rounds: int
    ) -> BattleLog:
        """Simulate up to max_rounds alternating attacks and return the log.

        Fighter A attacks on odd rounds, fighter B on even rounds. The log stops
        at the first knockout.
        """
        self._validate(fighter_a, fighter_b, max_rounds)

        fighters = (fighter_a, fighter_b)
        health = [fighter_a.stats.health, fighter_b.stats.health]
        mode, favorite = self._determine_mode(fighter_a, fighter_b)

        if mode is CombatMode.UNDERDOG:
            logger.info(
                f"Underdog mode: {fighters[favorite].name} favored over "
                f"{fighters[1 - favorite].name}"
            )

        rounds: list[RoundRecord] = []
        for round_number in range(1, max_rounds + 1):
            if health[0] <= 0 or health[1] <= 0:
                break

            attacker_idx = 0 if round_number % 2 == 1 else 1
            defender_idx = 1 - attacker_idx
            attacker = fighters[attacker_idx]
            defender = fighters[defender_idx]

            if mode is CombatMode.UNDERDOG and attacker_idx == favorite:
                strike = self._favorite_strike(attacker, arena)
            elif mode is CombatMode.UNDERDOG:
                strike = self._underdog_strike(attacker, health[defender_idx])
            else:
                strike = self._balanced_strike(attacker, defender, arena)

            # Halves round up, so a 2.5 counter lands as 3
            damage = max(0, math.floor(strike.damage + 0.5))
            health[defender_idx] = max(0, health[defender_idx] - damage)

            rounds.append(
                RoundRecord(
                    round=round_number,
                    attacker=attacker.name,
                    defender=defender.name,
                    attacker_id=attacker.id,
                    defender_id=defender.id,
                    damage=damage,
                    stats_used=StatsUsed(
                        attacker_strength=attacker.stats.strength,
                        attacker_agility=attacker.stats.agility,
                        attacker_luck=attacker.stats.luck,
                        defender_defense=defender.stats.defense,
                        defender_agility=defender.stats.agility,
                    ),
                    health_after=HealthAfter(
                        attacker=health[attacker_idx], defender=health[defender_idx]
                    ),
                    random_event=strike.event,
                    arena_objects_used=strike.arena_object,
                )
            )
            logger.debug(
                f"Round {round_number}: {attacker.name} hits {defender.name} for "
                f"{damage} ({strike.event.value if strike.event else 'plain hit'})"
            )

            if health[defender_idx] <= 0:
                break

        winner = self._determine_winner(fighters, health)
        verdict = winner.name if winner else DRAW
        logger.info(
            f"{fighter_a.name} vs {fighter_b.name} in {arena.name}: "
            f"{verdict} after {len(rounds)} rounds"
        )
        return BattleLog(
            winner=verdict,
            winner_id=winner.id if winner else None,
            rounds=rounds,
            mode=mode,
            max_rounds=max_rounds,
        )

    def _validate(self, fighter_a: Fighter, fighter_b: Fighter, max_rounds: int) -> None:
        if max_rounds < 1:
            raise InvalidBattleInputError(f"max_rounds must be at least 1, got {max_rounds}")
        for fighter in (fighter_a, fighter_b):
            if fighter.stats.health <= 0:
                raise InvalidBattleInputError(
                    f"Fighter {fighter.name} cannot battle with health {fighter.stats.health}"
                )

    def _determine_mode(
        self, fighter_a: Fighter, fighter_b: Fighter
    ) -> tuple[CombatMode, int]:
        """Return the combat mode and the index of the stronger fighter."""
        power_a, power_b = fighter_a.power, fighter_b.power
        favorite = 0 if power_a >= power_b else 1
        stronger, weaker = max(power_a, power_b), min(power_a, power_b)

        if weaker == 0:
            mismatched = stronger > 0
        else:
            mismatched = stronger / weaker >= self.config.underdog_power_ratio

        if mismatched:
            return CombatMode.UNDERDOG, favorite
        return CombatMode.BALANCED, favorite

    def _underdog_strike(self, underdog: Fighter, favorite_health: int) -> Strike:
        cfg = self.config
        dodge_chance = (underdog.stats.agility + underdog.stats.luck) / cfg.underdog_dodge_divisor

        if not self.roller.chance(dodge_chance):
            return Strike(damage=favorite_health, event=RandomEvent.UNDERDOG_COLLAPSE)

        if self.roller.chance(cfg.weak_spot_chance):
            return Strike(
                damage=cfg.weak_spot_fraction * favorite_health,
                event=RandomEvent.WEAK_SPOT,
            )
        return Strike(
            damage=cfg.underdog_counter_multiplier * underdog.stats.strength,
            event=RandomEvent.UNDERDOG_DODGE,
        )

    def _favorite_strike(self, favorite: Fighter, arena: Arena) -> Strike:
        cfg = self.config
        damage = favorite.stats.strength * self.roller.uniform(
            cfg.favorite_damage_min, cfg.favorite_damage_max
        )

        if arena.environmental_objects and self.roller.chance(
            cfg.favorite_environment_chance
        ):
            return Strike(
                damage=damage * cfg.favorite_environment_multiplier,
                event=RandomEvent.ENVIRONMENTAL_HIT,
                arena_object=self.roller.pick(arena.environmental_objects),
            )
        return Strike(damage=damage)

    def _balanced_strike(self, attacker: Fighter, defender: Fighter, arena: Arena) -> Strike:
        cfg = self.config
        mitigation = cfg.defense_factor * defender.stats.defense
        roll = self.roller.uniform(cfg.damage_min, cfg.damage_max)
        damage = max(cfg.min_damage, attacker.stats.strength * roll - mitigation)

        # Only the first special outcome that triggers applies
        if self.roller.chance(cfg.critical_chance):
            critical = attacker.stats.strength * cfg.critical_multiplier - mitigation
            return Strike(
                damage=max(cfg.min_damage, critical), event=RandomEvent.CRITICAL_HIT
            )

        if self.roller.chance(cfg.dodge_chance):
            if self.roller.chance(defender.stats.agility / cfg.agility_dodge_divisor):
                return Strike(damage=0, event=RandomEvent.DODGE)
            return Strike(damage=damage)

        if arena.environmental_objects and self.roller.chance(cfg.environment_chance):
            return Strike(
                damage=damage * cfg.environment_multiplier,
                event=RandomEvent.ENVIRONMENTAL_HIT,
                arena_object=self.roller.pick(arena.environmental_objects),
            )

        return Strike(damage=damage)

    def _determine_winner(
        self, fighters: tuple[Fighter, Fighter], health: list[int]
    ) -> Fighter | None:
        """Return the winning fighter, or None for a draw."""
        a_down, b_down = health[0] <= 0, health[1] <= 0
        if a_down and b_down:
            return None
        if a_down:
            return fighters[1]
        if b_down:
            return fighters[0]

        # Round cap reached with both standing
        if health[0] > health[1]:
            return fighters[0]
        if health[1] > health[0]:
            return fighters[1]
        return None


def resolve_battle(
    fighter_a: Fighter,
    fighter_b: Fighter,
    arena: Arena,
    max_rounds: int = 6,
    roller: Roller | None = None,
    config: CombatConfig | None = None,
) -> BattleLog:
    """Resolve a single battle with a one-off resolver."""
    return CombatResolver(config=config, roller=roller).resolve(
        fighter_a, fighter_b, arena, max_rounds
    )
