"""Allow ``python -m jirawalk.cli``."""

from jirawalk.cli.app import run

if __name__ == "__main__":
    run()
