"""Global constants for the animation core."""

# Animation defaults
DEFAULT_DURATION_MS = 300  # Duration of one generated instruction
DEFAULT_DELAY_MS = 0
DEFAULT_EASING = "easeInOut"
HIGHLIGHT_DURATION_MS = 200  # Flash used for search / traversal paths

# Playback speed multiplier bounds
MIN_SPEED = 0.1
MAX_SPEED = 4.0
DEFAULT_SPEED = 1.0

# Scheduler
FRAME_INTERVAL_MS = 16  # ~60 frames per second

# Structure engines
DEFAULT_MAX_SIZE = 1000  # Capacity of bounded stacks / queues
DEFAULT_HASH_CAPACITY = 16
MAX_LOAD_FACTOR = 0.75  # Resize trigger, checked after every insert

# Snapshot files
SNAPSHOT_SCHEMA = "dsviz"
SNAPSHOT_VERSION = 1
