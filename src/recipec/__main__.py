"""CLI entry point: run `recipec justfile` or `python -m recipec justfile`."""

import logging
import sys
from pathlib import Path


def main(argv=None) -> int:
    import argparse
    from .compiler.driver import CompilerDriver

    parser = argparse.ArgumentParser(prog="recipec", description="Resolve and check a recipe file.")
    parser.add_argument("file", type=Path, help="Path to the recipe file")
    parser.add_argument("--list", action="store_true", help="List resolved recipes and their dependencies")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log resolution steps")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    path = args.file.resolve()
    if not path.exists():
        sys.stderr.write(f"recipec: error: file not found: {path}\n")
        return 1
    if not path.is_file():
        sys.stderr.write(f"recipec: error: not a file: {path}\n")
        return 1

    try:
        result = CompilerDriver().compile_file(path)
    except OSError as e:
        sys.stderr.write(f"recipec: error: could not read file: {e}\n")
        return 1

    if not result.success:
        result.reporter.print_errors()
        return 1

    if args.list:
        for qualified, recipe in result.namespace.walk():
            deps = " ".join(str(d.path) for d in recipe.dependencies)
            line = f"{qualified}: {deps}" if deps else f"{qualified}:"
            if recipe.doc:
                line += f"  # {recipe.doc}"
            print(line)

    return 0


if __name__ == "__main__":
    sys.exit(main())
