import argparse
import sys

from backend.core.catalog import all_exercises, muscle_groups, seed_global_exercises


def _seed(args):
    from api.deps import get_supabase_client
    from infrastructure.db import SupabaseExerciseRepository

    client = get_supabase_client()
    if client is None:
        print("Error: SUPABASE_URL and SUPABASE_SERVICE_ROLE_KEY must be set", file=sys.stderr)
        sys.exit(1)

    inserted = seed_global_exercises(SupabaseExerciseRepository(client))
    if inserted:
        print(f"Seeded {inserted} exercises")
    else:
        print("Exercises already seeded")


def _list(args):
    for item in all_exercises():
        if args.muscle_group and item["muscle_group"] != args.muscle_group:
            continue
        print(f"{item['name']}\t{item['muscle_group']}\t{item['equipment']}")


def main(argv=None):
    parser = argparse.ArgumentParser(description="LiftLog maintenance commands")
    sub = parser.add_subparsers(dest="command", required=True)

    seed = sub.add_parser("seed-exercises", help="Seed the global exercise catalog")
    seed.set_defaults(func=_seed)

    ls = sub.add_parser("list-exercises", help="Print the bundled exercise catalog")
    ls.add_argument("-m", "--muscle-group", choices=muscle_groups(), help="Only this muscle group")
    ls.set_defaults(func=_list)

    args = parser.parse_args(argv)

    try:
        args.func(args)
    except Exception as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
