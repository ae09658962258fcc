"""
listgen - converts a JSON file of rule sets into DNS filter lists
"""
import sys

from listgen.main import main

if __name__ == "__main__":
    sys.exit(main())
