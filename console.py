# console.py
# Colour and box drawing helpers shared by the benchmark runners

# --- Colors (ANSI escape codes) ---
GREEN = '\033[0;32m'
BLUE = '\033[0;34m'
YELLOW = '\033[1;33m'
RED = '\033[0;31m'
MAGENTA = '\033[0;35m'  # For single-run markers
NC = '\033[0m' # No Color

# Box drawing characters
T_DOWN = '┬'
T_UP = '┴'
T_CROSS = '┼'
V = '│'  # Vertical line
L_HORZ = '─'
C_TL = '┌'  # Top left corner
C_TR = '┐'  # Top right corner
C_BL = '└'  # Bottom left corner
C_BR = '┘'  # Bottom right corner
L_LEFT = '├'  # T-shape pointing right
L_RIGHT = '┤'  # T-shape pointing left


def print_color(color, text):
    """Prints text in the specified color."""
    print(f"{color}{text}{NC}")


def box_rule(left, joint, right, widths):
    """Builds a horizontal table rule, e.g. ├───┼───┤ for the given column widths."""
    return left + joint.join(L_HORZ * w for w in widths) + right
