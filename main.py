"""Entry point for resolving and checking code owners of a checked-out tree."""

from codeowners.cli import main

if __name__ == "__main__":
    raise SystemExit(main())
