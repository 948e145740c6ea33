import logging
import random
import statistics
import sys
from collections import defaultdict

from lifesim.config_loader import ConfigLoader
from lifesim.eligibility import available_education, available_professions
from lifesim.models import BRANCH_IDS, CharacterSeed
from lifesim.simulation import LifeSession

# Toggle this to True if you want to collect & print stats of the simulated lives
STATS_ENABLED = True

NUM_SIMULATIONS = 200

# Hard stop for a single life; natural death ends almost every life long before this
MAX_DECISIONS = 5000

# Chance per decision that an auto-played life looks for a job or a course
CAREER_CHANCE = 0.05

COUNTRIES = ["US", "GB", "DE", "FR", "JP", "BR", "IN", "NG"]
FIRST_NAMES = ["Alex", "Sam", "Jordan", "Robin", "Casey", "Morgan", "Taylor", "Jamie"]


def setup_logging(level=logging.INFO):
    logging.basicConfig(
        level=level,
        format='%(asctime)s - %(levelname)s - %(message)s',
        handlers=[
            logging.StreamHandler()
        ]
    )


def play_life(session, rng, max_decisions=MAX_DECISIONS):
    """Auto-play a session until the character dies or the decision cap is hit."""
    for _ in range(max_decisions):
        if not session.is_alive:
            break
        character = session.character

        if rng.random() < CAREER_CHANCE:
            if character.profession is None:
                jobs = available_professions(session.catalog, character.skills)
                if jobs:
                    session.assign_profession(rng.choice(jobs).id)
            else:
                courses = available_education(session.catalog, character.skills, character.age)
                if courses:
                    session.enroll(rng.choice(courses).id)

        if session.character.profession is not None:
            session.work()
        if session.character.current_disease is not None and not session.treat_disease():
            session.suffer_disease()
        if not session.is_alive:
            break

        if session.next_decision() is None:
            break
        session.choose(rng.choice(BRANCH_IDS))
    return session.character


def run_main(num_lives=NUM_SIMULATIONS, seed=None, difficulty="medium"):
    setup_logging()
    try:
        config_loader = ConfigLoader()
        catalog = config_loader.build_catalog()
        rules = config_loader.get_rules()
    except Exception as e:
        logging.error(f"Failed to load configuration: {e}")
        return []

    rng = random.Random(seed)
    lives = []
    for i in range(num_lives):
        seed_data = CharacterSeed(
            name=f"{rng.choice(FIRST_NAMES)} {i + 1}",
            country=rng.choice(COUNTRIES),
            birth_year=rng.randint(1940, 2000),
        )
        session = LifeSession.start(seed_data, catalog, difficulty, rules=rules, rng=rng)
        if session is None:
            continue
        lives.append(play_life(session, rng))

    logging.info(f"Simulated {len(lives)} lives on {difficulty} difficulty.")

    if STATS_ENABLED and lives:
        print_statistics(lives)

    return lives


def print_statistics(lives):
    # 1) Gather a flat list of "records"
    records = []
    for c in lives:
        records.append({
            "age_death": c.age if not c.is_alive else None,
            "cause": c.death_cause or "Still alive",
            "achievements": len(c.unlocked_achievements()),
            "milestones": len(c.completed_milestones()),
            "decisions": len(c.history),
            "wealth": c.stats.wealth,
            "profession": c.profession or "none",
        })

    ages = sorted(r["age_death"] for r in records if r["age_death"] is not None)
    print("\n--- Age at Death ---")
    if len(ages) >= 2:
        q1, med, q3 = statistics.quantiles(ages, n=4, method="inclusive")
        print(f"{'Count':>6} {'Min':>6} {'P25':>8} {'Median':>8} {'P75':>8} {'Max':>6}")
        print(f"{len(ages):>6} {ages[0]:>6} {q1:8.1f} {med:8.1f} {q3:8.1f} {ages[-1]:>6}")
    elif ages:
        print(f"Only one death recorded, at age {ages[0]}")
    else:
        print("No deaths recorded")

    cause_counts = defaultdict(int)
    for r in records:
        cause_counts[r["cause"]] += 1
    print("\n--- Causes of Death ---")
    for cause, count in sorted(cause_counts.items(), key=lambda kv: -kv[1]):
        pct = count / len(records) * 100
        print(f"{cause:<28} {count:>6} ({pct:.1f}%)")

    profession_counts = defaultdict(int)
    for r in records:
        profession_counts[r["profession"]] += 1
    print("\n--- Final Professions ---")
    for profession, count in sorted(profession_counts.items(), key=lambda kv: -kv[1]):
        print(f"{profession:<20} {count:>6}")

    print("\n--- Progress ---")
    print("Average achievements:", round(statistics.mean(r["achievements"] for r in records), 2),
          " milestones:", round(statistics.mean(r["milestones"] for r in records), 2))
    print("Average decisions per life:", round(statistics.mean(r["decisions"] for r in records), 1),
          " median final wealth:", statistics.median(r["wealth"] for r in records))


if __name__ == "__main__":
    count = int(sys.argv[1]) if len(sys.argv) > 1 else NUM_SIMULATIONS
    run_main(count)
