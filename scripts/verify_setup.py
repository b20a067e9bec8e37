"""Verify herdcast setup is complete."""

import sys
from pathlib import Path

project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))


def check_python():
    print("Python version...", end=" ")
    v = sys.version_info
    if v.major == 3 and v.minor >= 10:
        print(f"OK ({v.major}.{v.minor}.{v.micro})")
        return True
    print(f"FAIL ({v.major}.{v.minor})")
    return False


def check_deps():
    print("\nDependencies:")
    deps = [
        ("loguru", "loguru"),
        ("pydantic", "pydantic"),
        ("PyYAML", "yaml"),
        ("python-dotenv", "dotenv"),
        ("numpy", "numpy"),
        ("pandas", "pandas"),
    ]
    ok = True
    for name, mod in deps:
        try:
            __import__(mod)
            print(f"  [x] {name}")
        except ImportError:
            print(f"  [ ] {name} MISSING")
            ok = False
    return ok


def check_files():
    print("\nData and config files:")
    files = [
        "herdcast/data/corridor.yaml",
        "config/environments/development.yaml",
    ]
    ok = True
    for f in files:
        path = project_root / f
        if path.exists():
            print(f"  [x] {f}")
        else:
            print(f"  [ ] {f} MISSING")
            ok = False
    return ok


def check_pois():
    print("\nCorridor POIs...", end=" ")
    try:
        from herdcast.geo.pois import load_points_of_interest
        pois = load_points_of_interest()
    except (FileNotFoundError, ValueError, TypeError) as e:
        print(f"FAIL ({e})")
        return False
    print(f"OK ({len(pois.villages)} villages, {len(pois.herd_seeds)} herds)")
    return True


def check_snapshot():
    """Optional: a configured snapshot must load."""
    from herdcast.utils.config import settings
    path = settings.data.snapshot_path
    print("Snapshot...", end=" ")
    if not path:
        print("not configured (synthetic mode)")
        return True
    try:
        from herdcast.data_sources.provider import load_snapshot
        snap = load_snapshot(Path(path))
    except (FileNotFoundError, ValueError) as e:
        print(f"FAIL ({e})")
        return False
    print(f"OK ({len(snap.cells)} cells, {snap.mode})")
    return True


def main():
    print("=" * 50)
    print("HERDCAST - SETUP VERIFICATION")
    print("=" * 50)

    results = [
        check_python(),
        check_deps(),
        check_files(),
    ]
    if results[1]:
        results.append(check_pois())
        results.append(check_snapshot())

    print("\n" + "=" * 50)
    if all(results):
        print("Setup: COMPLETE")
        print("Run: python main.py risks 30")
    else:
        print("Some checks failed. Review above.")
    print("=" * 50)


if __name__ == "__main__":
    main()
