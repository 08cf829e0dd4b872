"""
Default settings shared by the CLI and the lab state objects.
"""

# CPU scheduling
DEFAULT_QUANTUM = 2
SAMPLE_PROCESSES = [
    # (pid, arrival_time, burst_time, priority)
    (1, 0, 5, 1),
    (2, 2, 3, 2),
]

# Page replacement
DEFAULT_FRAME_CAPACITY = 3
DEFAULT_REFERENCE_STRING = "7,0,1,2,0,3,0,4,2,3"

# Banker's algorithm (resources A, B, C)
RESOURCE_LABELS = ("A", "B", "C")
DEFAULT_TOTAL_RESOURCES = (10, 5, 7)
DEFAULT_CLAIMS = [
    # (pid, allocation, maximum)
    (0, (0, 1, 0), (7, 5, 3)),
    (1, (2, 0, 0), (3, 2, 2)),
    (2, (3, 0, 2), (9, 0, 2)),
]

# Concurrency
BUFFER_CAPACITY = 5
PHILOSOPHER_COUNT = 5
EVENT_LOG_LENGTH = 6

# Shell
SHELL_PROMPT = "root@vlab:~#"
SHELL_BANNER = (
    "OS Lab shell [Version 1.0]",
    'Type "help" to see available system calls.',
)
ROOT_PROCESS = (101, "init", 0)  # (pid, name, ppid)

# Progress tracking: mastery points credited per completed task
MASTERY_POINTS_PER_TASK = 2
