"""Command-line interface."""
from scattertransition.main import main

if __name__ == "__main__":
    main()
