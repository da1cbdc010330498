import yaml, pathlib

ROOT = pathlib.Path(__file__).resolve().parents[2]

CAT = yaml.safe_load((ROOT / "shared/dictionaries/global_exercises.yaml").read_text())


def all_exercises():
    for item in CAT:
        yield {
            "name": item["name"],
            "muscle_group": item.get("muscle_group"),
            "equipment": item.get("equipment"),
        }


def muscle_groups():
    return sorted({c["muscle_group"] for c in CAT if c.get("muscle_group")})


def seed_global_exercises(exercise_repo):
    """Insert catalog entries not yet present as global exercises (by name, case-insensitive). Returns rows inserted."""
    existing = {name.lower() for name in exercise_repo.global_names()}
    missing = [e for e in all_exercises() if e["name"].lower() not in existing]
    if not missing:
        return 0
    return exercise_repo.seed_global(missing)
