"""Entry point for hasapi-validate."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from .config import load_config
from .manifests import ManifestReader, ManifestResult, ManifestScanner
from .models import Component
from .scheme import build_scheme

logger = logging.getLogger(__name__)


def _describe(result: ManifestResult) -> str:
    obj = result.obj
    if isinstance(obj, Component):
        origin = obj.spec.origin.value if obj.spec.origin else "unknown"
        return f"Component {obj.metadata.name} (application {obj.spec.application}, origin {origin})"
    return getattr(obj, "kind", type(obj).__name__)


def main(argv: list[str] | None = None) -> int:
    """Validate manifest files and report every violation.

    Returns:
        0 if every manifest is valid, 1 otherwise.
    """
    parser = argparse.ArgumentParser(
        prog="hasapi-validate", description="Validate Component manifests"
    )
    parser.add_argument("paths", nargs="+", help="Manifest files or directories")
    parser.add_argument("--config", help="Config file (default: hasapi.yaml lookup)")
    parser.add_argument(
        "-q", "--quiet", action="store_true", help="Only report invalid manifests"
    )
    args = parser.parse_args(argv)

    logging.basicConfig(format="%(levelname)s %(name)s: %(message)s")
    config = load_config(config_path=args.config)
    logging.getLogger().setLevel(config.settings.log_level)

    reader = ManifestReader(build_scheme())
    files = list(ManifestScanner().scan(*args.paths))
    if not files:
        print("No manifests found", file=sys.stderr)
        return 1

    failed = 0
    for path in files:
        try:
            results = reader.read_file(Path(path))
        except OSError as e:
            logger.error(f"Failed to read {path}: {e}")
            failed += 1
            continue

        for result in results:
            if result.ok:
                if not args.quiet:
                    print(f"{result.source}: ok - {_describe(result)}")
                continue
            failed += 1
            print(f"{result.source}: invalid")
            for violation in result.error.violations:
                print(f"  - {violation}")

    if failed:
        print(f"{failed} invalid manifest(s)", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
