import sys

from tools.sound_extract.extract_sounds import main

raise SystemExit(main(sys.argv[1:]))
