import os
import sys
from datetime import datetime

RESET = "\033[0m"
RED = "\033[91m"
GREEN = "\033[92m"
YELLOW = "\033[93m"
CYAN = "\033[96m"

COLORS = {
    "Info": CYAN,
    "Success": GREEN,
    "Warning": YELLOW,
    "Error": RED,
}

use_color = not os.environ.get("NO_COLOR")

def set_color(enabled: bool):
    global use_color
    use_color = enabled

# The log function so we can see what happened to every mod in real time
def DayZPrint(type: str, param: str):
    current_time = datetime.now().strftime("%Y-%m-%d %H:%M:%S")
    log_entry = f"[{current_time}]: {param}"
    color = COLORS.get(type)
    if use_color and color:
        log_entry = f"{color}{log_entry}{RESET}"
    stream = sys.stderr if type in ("Warning", "Error") else sys.stdout
    print(log_entry, file=stream)
