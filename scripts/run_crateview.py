"""Prints the derived version views and owners of a crate."""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from pathlib import Path


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("crate", help="Crate name, e.g. serde")
    parser.add_argument("--reload", action="store_true", help="Force a second, fresh versions fetch")
    parser.add_argument("--limit", type=int, default=10, help="Number of versions to print per ordering")
    parser.add_argument("--owners", action="store_true", help="Also load and print owners")
    return parser.parse_args(argv)


async def _run(args: argparse.Namespace) -> int:
    from crateview import open_crate  # type: ignore
    from crateview.errors import CrateViewError  # type: ignore

    try:
        async with open_crate(args.crate) as crate:
            await crate.load_versions()
            if args.reload:
                await crate.load_versions(reload=True)
            by_id = crate.versions_by_id
            print(f"{crate.name}: {len(by_id)} versions (max {crate.record.max_version})")
            print("by semver:", ", ".join(by_id[i].num for i in crate.version_ids_by_semver[: args.limit]))
            print("by date:  ", ", ".join(by_id[i].num for i in crate.version_ids_by_date[: args.limit]))
            tracks = sorted((by_id[i] for i in crate.release_track_set), key=lambda v: v.release_track or "")
            print("release tracks:", ", ".join(f"{v.release_track}={v.num}" for v in tracks))
            if args.owners:
                await crate.load_owners()
                print("owners:", ", ".join(owner.login for owner in crate.owners))
    except CrateViewError:
        logging.getLogger("crateview").exception("Failed to inspect crate %s", args.crate)
        return 1
    return 0


def main(argv: list[str] | None = None) -> int:
    repo_root = Path(__file__).resolve().parents[1]
    sys.path.insert(0, str(repo_root))

    # Lazy import after adjusting sys.path
    from crateview.config import get_settings  # type: ignore

    args = _parse_args(argv)
    settings = get_settings()
    logging.basicConfig(
        level=getattr(logging, settings.log_level.upper(), logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )
    return asyncio.run(_run(args))


if __name__ == "__main__":
    sys.exit(main())
