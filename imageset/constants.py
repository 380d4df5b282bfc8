LOGGER_NAME = "imageset"

# Images decoded between two memory reclaim hints
DEFAULT_GC_INTERVAL = 2000

# Color spaces reachable from RGB without changing the channel count
COLOR_SPACES = (
    "rgb",
    "yuv",
    "ycbcr",
    "hsv",
    "hls",
    "lab",
    "lab_normalized",
    "luv",
    "xyz",
)
