"""Helper launcher run inside the terminal.

Usage:
    python shell_exec.py command [args...] signal_file

Runs ``command`` with ``args`` as a subprocess attached to the terminal and
records its progress in ``signal_file``:

    START           before the command is launched
    END             when it exits with status 0
    FAIL <status>   when it exits non-zero or cannot be launched

This file is executed by path under whichever interpreter the terminal has,
so it must only use the standard library.
"""

import subprocess
import sys


def _mark(fp, marker):
    fp.write(marker + "\n")
    fp.flush()


def main(argv):
    if len(argv) < 2:
        print("usage: shell_exec.py command [args...] signal_file", file=sys.stderr)
        return 2

    signal_file = argv[-1]
    command = argv[:-1]
    print("Executing command in shell >> " + " ".join(command))

    with open(signal_file, "w", encoding="utf-8") as fp:
        _mark(fp, "START")
        try:
            status = subprocess.call(command)
        except OSError as e:
            print("Failed to launch {}: {}".format(command[0], e), file=sys.stderr)
            _mark(fp, "FAIL 127")
            return 127
        if status == 0:
            _mark(fp, "END")
        else:
            _mark(fp, "FAIL {}".format(status))
        return status


if __name__ == "__main__":
    sys.exit(main(sys.argv[1:]))
