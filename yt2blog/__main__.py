"""Allow ``python -m yt2blog``."""

from yt2blog.cli.cli import main

if __name__ == "__main__":
    main()
