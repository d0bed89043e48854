"""Package entry point for ``python -m pobsd_converter``.

WHY: Users run the converter as ``python -m pobsd_converter games.db``
as well as through the ``pobsd-converter`` console script.

HOW: Delegates to the CLI's main() function.
"""

from pobsd_converter.cli import main

if __name__ == "__main__":
    main()
