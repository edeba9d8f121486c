"""Module entrypoint for ``python -m bufmark``.

All argument parsing happens in ``bufmark.cli``.
"""

from .cli import main


if __name__ == "__main__":
    main()
