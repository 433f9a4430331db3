"""Package entry point for ``python -m elevenlabs_client``.

HOW: Delegates to the CLI's main() function.
"""

from elevenlabs_client.cli import main

if __name__ == "__main__":
    main()
