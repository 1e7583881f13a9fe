"""Allow ``python -m atomc``."""

from atomc.cli.atomc import main

if __name__ == "__main__":
    main()
