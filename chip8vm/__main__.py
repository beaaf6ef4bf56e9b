import sys

from chip8vm.cli import main

if __name__ == "__main__":
    sys.exit(main())
